"""
TransformRequest value object

Immutable description of one transform job, built once from validated input.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from resize_backend.constants import DEFAULT_BACKGROUND, DEFAULT_QUALITY
from resize_backend.domain.exceptions import InvalidOptionError
from resize_backend.domain.value_objects.crop_rectangle import CropRectangle
from resize_backend.domain.value_objects.output_format import OutputFormat
from resize_backend.domain.value_objects.resize_mode import ResizeMode
from resize_backend.domain.value_objects.units import LengthUnit, ResolutionPolicy
from resize_backend.utils.numbers import to_finite_float


@dataclass(frozen=True)
class TransformRequest:
    """
    One transform job.

    Width and height stay in the caller's unit; the resolver turns them into
    pixels. Enum-typed fields also accept their string tokens and are coerced
    on construction.
    """
    width: float
    height: float
    unit: LengthUnit = LengthUnit.PIXEL
    mode: ResizeMode = ResizeMode.STRETCH
    output_format: OutputFormat = OutputFormat.JPEG
    background_color: str = DEFAULT_BACKGROUND
    quality: int = DEFAULT_QUALITY
    max_size_kb: Optional[float] = None
    rotation: float = 0.0
    crop: Optional[CropRectangle] = None
    resolution_policy: ResolutionPolicy = ResolutionPolicy.AUTO
    density: Optional[int] = None
    draft: bool = False

    def __post_init__(self):
        object.__setattr__(self, "unit", LengthUnit.parse(self.unit))
        object.__setattr__(self, "mode", ResizeMode.parse(self.mode))
        object.__setattr__(self, "output_format", OutputFormat.parse(self.output_format))
        object.__setattr__(self, "resolution_policy", ResolutionPolicy.parse(self.resolution_policy))

        quality = to_finite_float(self.quality)
        if quality is None:
            raise InvalidOptionError("quality", self.quality, "must be a number between 1 and 100")
        object.__setattr__(self, "quality", int(min(max(quality, 1), 100)))

        if self.max_size_kb is not None:
            max_size = to_finite_float(self.max_size_kb)
            if max_size is None or max_size <= 0:
                raise InvalidOptionError("maxSizeKB", self.max_size_kb, "must be a positive number")
            object.__setattr__(self, "max_size_kb", max_size)

        rotation = to_finite_float(self.rotation)
        if rotation is None:
            raise InvalidOptionError("rotate", self.rotation, "must be a number of degrees")
        object.__setattr__(self, "rotation", rotation)

        if not self.background_color or not isinstance(self.background_color, str):
            object.__setattr__(self, "background_color", DEFAULT_BACKGROUND)
        object.__setattr__(self, "draft", bool(self.draft))

    @property
    def effective_format(self) -> OutputFormat:
        """Container actually produced; drafts are always a cheap JPEG."""
        return OutputFormat.JPEG if self.draft else self.output_format

    @property
    def has_rotation(self) -> bool:
        return self.rotation % 360 != 0
