"""
Schema for the flat option set a transform is requested with.
"""
from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from resize_backend.constants import DEFAULT_BACKGROUND, DEFAULT_QUALITY
from resize_backend.domain.exceptions import InvalidCropError, InvalidDimensionError, InvalidOptionError
from resize_backend.domain.value_objects.crop_rectangle import CropRectangle
from resize_backend.domain.value_objects.transform_request import TransformRequest
from resize_backend.infrastructure.raster.colors import parse_color


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TransformOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    width: Optional[float] = None
    height: Optional[float] = None
    unit: str = "px"
    mode: str = "stretch"
    output_format: str = Field(default="jpeg", alias="format")
    background_color: str = Field(default=DEFAULT_BACKGROUND, alias="backgroundColor")
    quality: int = Field(default=DEFAULT_QUALITY, ge=1, le=100)
    max_size_kb: Optional[float] = Field(default=None, alias="maxSizeKB", gt=0)
    is_preview: bool = Field(default=False, alias="isPreview")
    resolution_mode: str = Field(default="auto", alias="resolutionMode")
    dpi: Optional[int] = None
    rotate: float = 0.0
    crop: Any = None

    @field_validator("width", "height", "max_size_kb", "dpi", "crop", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("quality", mode="before")
    @classmethod
    def _default_quality(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return DEFAULT_QUALITY if value is None else value

    @field_validator("rotate", mode="before")
    @classmethod
    def _default_rotate(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        return 0.0 if value is None else value

    @field_validator("unit", "mode", "output_format", "resolution_mode", mode="before")
    @classmethod
    def _default_token(cls, value: Any, info: ValidationInfo) -> Any:
        if _blank_to_none(value) is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("background_color", mode="before")
    @classmethod
    def _check_color(cls, value: Any) -> Any:
        value = _blank_to_none(value)
        if value is None:
            return DEFAULT_BACKGROUND
        try:
            parse_color(value)
        except InvalidOptionError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> TransformOptions:
        """Validate a raw option mapping, reporting problems as InvalidOptionError."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            first = exc.errors()[0]
            loc = first.get("loc") or ("options",)
            option = str(loc[0])
            if option in ("width", "height", "dpi"):
                raise InvalidDimensionError(option, first.get("input")) from exc
            raise InvalidOptionError(option, first.get("input"), first.get("msg", "invalid value")) from exc

    def crop_rectangle(self) -> Optional[CropRectangle]:
        crop = self.crop
        if isinstance(crop, str):
            try:
                crop = json.loads(crop)
            except json.JSONDecodeError as exc:
                raise InvalidCropError(f"Crop is not valid JSON: {exc.msg}", value=self.crop) from exc
            if crop is not None and not isinstance(crop, dict):
                raise InvalidCropError("Crop must be an object", value=self.crop)
        return CropRectangle.from_dict(crop)

    def to_request(self) -> TransformRequest:
        """Build the immutable request; unit/mode/format tokens are checked here."""
        if self.width is None or self.height is None:
            missing = "width" if self.width is None else "height"
            raise InvalidDimensionError(missing, None, message="Width and height are required.")

        return TransformRequest(
            width=self.width,
            height=self.height,
            unit=self.unit,
            mode=self.mode,
            output_format=self.output_format,
            background_color=self.background_color,
            quality=self.quality,
            max_size_kb=self.max_size_kb,
            rotation=self.rotate,
            crop=self.crop_rectangle(),
            resolution_policy=self.resolution_mode,
            density=self.dpi,
            draft=self.is_preview,
        )
