"""
OutputFormat value object

Container the final artifact is written in.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from resize_backend.constants import MIME_TYPES
from resize_backend.domain.exceptions import UnsupportedFormatError


class OutputFormat(str, Enum):
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    PDF = "pdf"

    @property
    def is_document(self) -> bool:
        return self is OutputFormat.PDF

    @property
    def supports_alpha(self) -> bool:
        return self in (OutputFormat.PNG, OutputFormat.WEBP)

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self.value]

    @property
    def extension(self) -> str:
        return "jpg" if self is OutputFormat.JPEG else self.value

    @property
    def pillow_format(self) -> str:
        """Format name understood by ``PIL.Image.save``."""
        return self.value.upper()

    @classmethod
    def parse(cls, raw: Any) -> OutputFormat:
        """
        Resolve a format token.

        Examples:
            >>> OutputFormat.parse("JPG")
            <OutputFormat.JPEG: 'jpeg'>
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise UnsupportedFormatError(raw)
        token = raw.strip().lower()
        if token == "jpg":
            return cls.JPEG
        try:
            return cls(token)
        except ValueError:
            raise UnsupportedFormatError(raw) from None
