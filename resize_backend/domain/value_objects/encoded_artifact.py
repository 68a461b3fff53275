"""
EncodedArtifact value object
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from resize_backend.domain.value_objects.output_format import OutputFormat


@dataclass(frozen=True)
class EncodedArtifact:
    """
    Final bytes of a transform job and the container they are in.

    ``quality`` and ``attempts`` describe how the bytes were produced; they
    are informational and never affect the payload.
    """
    data: bytes
    output_format: OutputFormat
    quality: Optional[int] = None
    attempts: int = 1

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def mime_type(self) -> str:
        return self.output_format.mime_type

    @property
    def extension(self) -> str:
        return self.output_format.extension

    def suggested_filename(self, now: Optional[datetime] = None) -> str:
        """Download name of the form ``processed-<epoch ms>.<ext>``."""
        moment = now or datetime.now(timezone.utc)
        return f"processed-{int(moment.timestamp() * 1000)}.{self.extension}"

    def describe(self) -> Dict[str, Any]:
        return {
            "format": self.output_format.value,
            "mimeType": self.mime_type,
            "bytes": self.size,
            "quality": self.quality,
            "attempts": self.attempts,
        }
