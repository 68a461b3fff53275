"""Domain exceptions."""
from typing import Any, Optional


class TransformException(Exception):
    """Base exception for transform job errors.

    Carries the operation that failed and the offending value so the caller
    can correct the request.
    """

    def __init__(self, message: str, *, operation: str = "transform", value: Any = None):
        super().__init__(message)
        self.operation = operation
        self.value = value

    def to_dict(self) -> dict:
        return {
            "error": type(self).__name__,
            "message": str(self),
            "operation": self.operation,
            "value": None if self.value is None else str(self.value),
        }


class InvalidDimensionError(TransformException):
    """Requested width/height (or density) is non-positive or non-numeric."""

    def __init__(self, field: str, value: Any, *, message: Optional[str] = None):
        final_message = message or f"{field} must be a positive number, got {value!r}"
        super().__init__(final_message, operation="resolve_dimension", value=value)
        self.field = field


class DimensionOutOfRangeError(TransformException):
    """Resolved pixel dimension falls outside the allowed bounds."""

    def __init__(self, field: str, pixels: int, minimum: int, maximum: int):
        message = f"{field} resolves to {pixels}px, outside the allowed range [{minimum}, {maximum}]"
        super().__init__(message, operation="resolve_dimension", value=pixels)
        self.field = field
        self.minimum = minimum
        self.maximum = maximum


class UnsupportedUnitError(TransformException):
    """Unit token is not one of the recognized length units."""

    def __init__(self, unit: Any):
        super().__init__(f"Unsupported unit: {unit!r}", operation="parse_unit", value=unit)


class UnsupportedModeError(TransformException):
    """Resize mode token is not one of the known compositing strategies."""

    def __init__(self, mode: Any):
        super().__init__(f"Unsupported resize mode: {mode!r}", operation="parse_mode", value=mode)


class UnsupportedFormatError(TransformException):
    """Output format token is not one of the supported containers."""

    def __init__(self, output_format: Any):
        super().__init__(f"Unsupported output format: {output_format!r}", operation="parse_format", value=output_format)


class InvalidCropError(TransformException):
    """Crop rectangle carries fields that cannot be interpreted as numbers."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message, operation="crop", value=value)


class InvalidOptionError(TransformException):
    """An option outside the dimension/unit/mode/format families is malformed."""

    def __init__(self, option: str, value: Any, reason: str):
        super().__init__(f"Invalid {option} {value!r}: {reason}", operation=f"parse_{option}", value=value)
        self.option = option


class EncodingError(TransformException):
    """The raster or document engine rejected the operation."""

    def __init__(self, message: str, *, operation: str = "encode", value: Any = None, cause: Optional[Exception] = None):
        super().__init__(message, operation=operation, value=value)
        self.cause = cause


class InvalidSourceError(EncodingError):
    """Uploaded bytes are empty, oversized, corrupt, or an unsupported format."""

    def __init__(self, message: str, *, value: Any = None, cause: Optional[Exception] = None):
        super().__init__(message, operation="decode", value=value, cause=cause)


__all__ = [
    "TransformException",
    "InvalidDimensionError",
    "DimensionOutOfRangeError",
    "UnsupportedUnitError",
    "UnsupportedModeError",
    "UnsupportedFormatError",
    "InvalidCropError",
    "InvalidOptionError",
    "EncodingError",
    "InvalidSourceError",
]
