"""Color and alpha helpers shared by the raster infrastructure."""
from __future__ import annotations

from typing import Tuple

from PIL import Image, ImageColor

from resize_backend.domain.exceptions import InvalidOptionError

RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)


def parse_color(spec: str) -> RGBA:
    """Parse any color Pillow recognizes (``#fff``, ``white``, ``rgb(...)``) to RGBA."""
    try:
        return ImageColor.getcolor(spec, "RGBA")  # type: ignore[return-value]
    except (ValueError, AttributeError) as exc:
        raise InvalidOptionError("backgroundColor", spec, "not a recognized color") from exc


def opaque(spec: str) -> RGBA:
    r, g, b, _ = parse_color(spec)
    return (r, g, b, 255)


def has_alpha(image: Image.Image) -> bool:
    if image.mode in ("RGBA", "LA", "PA", "RGBa", "La"):
        return True
    return image.mode == "P" and "transparency" in image.info


def to_working_mode(image: Image.Image) -> Image.Image:
    """Normalize to RGBA when the image carries transparency, RGB otherwise."""
    target = "RGBA" if has_alpha(image) else "RGB"
    if image.mode == target:
        return image
    return image.convert(target)


def fill_for(image: Image.Image, spec: str) -> Tuple[int, ...]:
    """Fill value matching ``image.mode`` for the given color."""
    color = parse_color(spec)
    if image.mode == "RGBA":
        return color
    return color[:3]


def flatten(image: Image.Image, spec: str) -> Image.Image:
    """Composite any transparency onto an opaque background; returns RGB."""
    if not has_alpha(image):
        return image if image.mode == "RGB" else image.convert("RGB")
    canvas = Image.new("RGBA", image.size, opaque(spec))
    canvas.alpha_composite(image.convert("RGBA"))
    return canvas.convert("RGB")
