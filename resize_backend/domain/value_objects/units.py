"""
Length unit and resolution policy value objects.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from resize_backend.domain.exceptions import InvalidOptionError, UnsupportedUnitError


class LengthUnit(str, Enum):
    """Units a target width/height may be expressed in."""
    PIXEL = "px"
    INCH = "in"
    CENTIMETER = "cm"
    MILLIMETER = "mm"

    @property
    def is_physical(self) -> bool:
        return self is not LengthUnit.PIXEL

    def to_pixels(self, value: float, density: float) -> float:
        """
        Convert ``value`` in this unit to (unrounded) pixels at ``density`` ppi.

        Pixel values pass through untouched; density only applies to
        physical units.
        """
        if self is LengthUnit.PIXEL:
            return value
        if self is LengthUnit.INCH:
            return value * density
        if self is LengthUnit.CENTIMETER:
            return (value / 2.54) * density
        return (value / 25.4) * density

    @classmethod
    def parse(cls, raw: Any) -> LengthUnit:
        """
        Resolve a unit token, accepting short and long forms.

        Examples:
            >>> LengthUnit.parse("Inches")
            <LengthUnit.INCH: 'in'>
            >>> LengthUnit.parse("px")
            <LengthUnit.PIXEL: 'px'>
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise UnsupportedUnitError(raw)
        unit = _UNIT_SYNONYMS.get(raw.strip().lower())
        if unit is None:
            raise UnsupportedUnitError(raw)
        return unit


_UNIT_SYNONYMS = {
    "px": LengthUnit.PIXEL,
    "pixel": LengthUnit.PIXEL,
    "pixels": LengthUnit.PIXEL,
    "in": LengthUnit.INCH,
    "inch": LengthUnit.INCH,
    "inches": LengthUnit.INCH,
    "cm": LengthUnit.CENTIMETER,
    "centimeter": LengthUnit.CENTIMETER,
    "centimeters": LengthUnit.CENTIMETER,
    "centimetre": LengthUnit.CENTIMETER,
    "centimetres": LengthUnit.CENTIMETER,
    "mm": LengthUnit.MILLIMETER,
    "millimeter": LengthUnit.MILLIMETER,
    "millimeters": LengthUnit.MILLIMETER,
    "millimetre": LengthUnit.MILLIMETER,
    "millimetres": LengthUnit.MILLIMETER,
}


class ResolutionPolicy(str, Enum):
    """How the embedded density is chosen."""
    AUTO = "auto"
    FIXED = "fixed"

    @classmethod
    def parse(cls, raw: Any) -> ResolutionPolicy:
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise InvalidOptionError("resolutionMode", raw, "expected 'auto' or 'fixed'") from None
