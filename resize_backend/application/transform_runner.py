"""Bounded worker pool for transform jobs.

Decode/resize/encode are CPU-bound and Pillow releases the GIL inside them,
so a thread pool keeps one slow image from stalling unrelated jobs.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from resize_backend.application.commands.transform_image import (
    TransformImageCommand,
    TransformImageHandler,
)
from resize_backend.domain.value_objects.encoded_artifact import EncodedArtifact

logger = logging.getLogger(__name__)


class TransformRunner:
    """Runs TransformImage commands on a fixed number of worker threads.

    Jobs share nothing but the handler's read-only configuration. Callers
    cancel through the returned future; a job already running finishes.
    """

    def __init__(self, handler: Optional[TransformImageHandler] = None, *, max_workers: int = 4) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._handler = handler or TransformImageHandler()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="transform")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def submit(self, command: TransformImageCommand) -> Future[EncodedArtifact]:
        logger.debug("Queued transform for %s", command.filename or "upload")
        return self._executor.submit(self._handler.handle, command)

    def run(self, command: TransformImageCommand, timeout: Optional[float] = None) -> EncodedArtifact:
        """Submit and wait; on timeout the queued job is cancelled if it has not started."""
        future = self.submit(command)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            raise

    def shutdown(self, wait: bool = True, *, cancel_pending: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=cancel_pending)

    def __enter__(self) -> TransformRunner:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(cancel_pending=exc_type is not None)
