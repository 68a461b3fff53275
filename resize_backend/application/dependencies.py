"""Shared factories for application entry points.

Centralizes construction of the handler and runner so every entry point
runs with the same settings-derived PipelineConfig.
"""
from __future__ import annotations

from functools import lru_cache

from resize_backend.application.commands.transform_image import TransformImageHandler
from resize_backend.application.transform_runner import TransformRunner
from resize_backend.config import get_settings


@lru_cache()
def _transform_handler() -> TransformImageHandler:
    return TransformImageHandler(get_settings().pipeline_config())


@lru_cache()
def _transform_runner() -> TransformRunner:
    return TransformRunner(_transform_handler(), max_workers=get_settings().workers)


def get_transform_runner() -> TransformRunner:
    """Provide a singleton worker pool sized from settings."""
    return _transform_runner()
