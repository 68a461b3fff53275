"""
CropRectangle and PixelRect value objects

A CropRectangle is what the caller asked for (percentages or pixels); a
PixelRect is the clamped integer region it resolves to against a concrete
image. Crops are always resolved against the image *after* rotation.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from resize_backend.domain.exceptions import InvalidCropError
from resize_backend.utils.numbers import round_half_up, to_finite_float


class CropUnit(str, Enum):
    PERCENT = "percent"
    PIXEL = "px"

    @classmethod
    def parse(cls, raw: Any) -> Optional[CropUnit]:
        if raw is None or isinstance(raw, cls):
            return raw
        token = str(raw).strip().lower()
        if not token:
            return None
        if token in ("%", "percent", "percentage", "pct"):
            return cls.PERCENT
        if token in ("px", "pixel", "pixels"):
            return cls.PIXEL
        raise InvalidCropError(f"Unsupported crop unit: {raw!r}", value=raw)


@dataclass(frozen=True)
class PixelRect:
    """
    Absolute integer rectangle inside an image.

    Always non-degenerate: width and height are >= 1 and the offset is >= 0.
    """
    left: int
    top: int
    width: int
    height: int

    def __post_init__(self):
        if self.left < 0 or self.top < 0:
            raise ValueError("PixelRect offset must be >= 0")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("PixelRect extent must be > 0")

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) tuple as taken by ``Image.crop``."""
        return (self.left, self.top, self.right, self.bottom)

    def fits_within(self, width: int, height: int) -> bool:
        return self.right <= width and self.bottom <= height


@dataclass(frozen=True)
class CropRectangle:
    """
    Caller-supplied crop region.

    Attributes:
        x, y: Offset of the top-left corner
        width, height: Extent of the region
        unit: Explicit PERCENT/PIXEL tag, or None when the caller sent none
        absolute_offsets: True when the caller used ``left``/``top`` keys,
            which only ever carry pixel offsets
    """
    x: float
    y: float
    width: float
    height: float
    unit: Optional[CropUnit] = None
    absolute_offsets: bool = False

    def __post_init__(self):
        """Reject non-numeric fields; a crop we cannot read is fatal."""
        for field_name in ("x", "y", "width", "height"):
            raw = getattr(self, field_name)
            number = to_finite_float(raw)
            if number is None:
                raise InvalidCropError(f"Crop {field_name} must be a finite number, got {raw!r}", value=raw)
            object.__setattr__(self, field_name, number)
        object.__setattr__(self, "unit", CropUnit.parse(self.unit))

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[CropRectangle]:
        """
        Create a CropRectangle from a loosely structured mapping.

        Accepts ``{unit?, x, y, width, height}`` or the absolute form
        ``{left, top, width, height}``. Missing offsets default to 0.

        Examples:
            >>> CropRectangle.from_dict({'unit': '%', 'x': 0, 'y': 0, 'width': 50, 'height': 50}).is_percentage
            True
            >>> CropRectangle.from_dict({'left': 10, 'top': 10, 'width': 40, 'height': 40}).is_percentage
            False
        """
        if not data:
            return None
        if not isinstance(data, dict):
            raise InvalidCropError(f"Crop must be a mapping, got {type(data).__name__}", value=data)
        if "width" not in data or "height" not in data:
            raise InvalidCropError("Crop requires width and height", value=data)

        absolute_offsets = "left" in data or "top" in data
        if absolute_offsets:
            x, y = data.get("left", 0), data.get("top", 0)
        else:
            x, y = data.get("x", 0), data.get("y", 0)
        return cls(
            x=x,
            y=y,
            width=data["width"],
            height=data["height"],
            unit=data.get("unit"),
            absolute_offsets=absolute_offsets,
        )

    @property
    def is_percentage(self) -> bool:
        if self.unit is not None:
            return self.unit is CropUnit.PERCENT
        return self.width <= 100 and self.height <= 100 and not self.absolute_offsets

    @property
    def unit_inferred(self) -> bool:
        """True when ``is_percentage`` came from the small-number heuristic."""
        return self.unit is None and self.is_percentage

    def resolve(self, image_width: int, image_height: int) -> Optional[PixelRect]:
        """
        Resolve to a clamped PixelRect against the given image size.

        Returns None when the clamped region is empty on either axis; callers
        treat that as "no crop".

        Examples:
            >>> CropRectangle(0, 0, 50, 50, unit='%').resolve(200, 100)
            PixelRect(left=0, top=0, width=100, height=50)
            >>> CropRectangle(150, 0, 100, 40, unit='px').resolve(200, 100)
            PixelRect(left=150, top=0, width=50, height=40)
            >>> CropRectangle(0, 0, 0, 10, unit='px').resolve(200, 100) is None
            True
        """
        if image_width <= 0 or image_height <= 0:
            return None

        if self.is_percentage:
            left = round_half_up(self.x / 100 * image_width)
            top = round_half_up(self.y / 100 * image_height)
            width = round_half_up(self.width / 100 * image_width)
            height = round_half_up(self.height / 100 * image_height)
        else:
            left = round_half_up(self.x)
            top = round_half_up(self.y)
            width = round_half_up(self.width)
            height = round_half_up(self.height)

        left = min(max(left, 0), image_width - 1)
        top = min(max(top, 0), image_height - 1)
        width = min(width, image_width - left)
        height = min(height, image_height - top)

        if width <= 0 or height <= 0:
            return None
        return PixelRect(left=left, top=top, width=width, height=height)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit": self.unit.value if self.unit else None,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }
