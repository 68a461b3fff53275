"""Pytest configuration for resize_backend tests.

Ensures the project root is on sys.path so ``resize_backend.*`` imports
resolve during test collection without an editable install.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from PIL import Image

# Add repository root to sys.path for module resolution.
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resize_backend.tests.image_factories import encode, halves  # noqa: E402


@pytest.fixture
def png_source() -> bytes:
    """PNG bytes of a 200x100 left-red/right-blue image."""
    return encode(halves(200, 100))


@pytest.fixture
def transparent_png() -> bytes:
    """PNG bytes of a fully transparent 120x80 image."""
    return encode(Image.new("RGBA", (120, 80), (0, 0, 0, 0)))
