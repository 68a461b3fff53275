"""
ResizeMode value object

Closed set of strategies mapping source pixels onto the target canvas.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from resize_backend.domain.exceptions import UnsupportedModeError


class ResizeMode(str, Enum):
    STRETCH = "stretch"
    CONTAIN = "contain"
    COVER = "cover"
    COLOR_PAD = "color"
    BLUR_PAD = "blur"

    @property
    def flattens_alpha(self) -> bool:
        """Whether the mode always produces an opaque canvas."""
        return self in (ResizeMode.COLOR_PAD, ResizeMode.BLUR_PAD)

    @classmethod
    def parse(cls, raw: Any) -> ResizeMode:
        """Resolve a mode token; unknown tokens are rejected, never defaulted."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise UnsupportedModeError(raw)
        mode = _MODE_SYNONYMS.get(raw.strip().lower())
        if mode is None:
            raise UnsupportedModeError(raw)
        return mode


_MODE_SYNONYMS = {
    "stretch": ResizeMode.STRETCH,
    "fill": ResizeMode.STRETCH,
    "contain": ResizeMode.CONTAIN,
    "cover": ResizeMode.COVER,
    "color": ResizeMode.COLOR_PAD,
    "color-pad": ResizeMode.COLOR_PAD,
    "blur": ResizeMode.BLUR_PAD,
    "blur-pad": ResizeMode.BLUR_PAD,
}
