from __future__ import annotations

# Single source of truth for static constants.

# Density defaults (pixels per inch).
PRINT_DENSITY = 300
SCREEN_DENSITY = 96

# Per-axis ceiling for resolved target dimensions.
MIN_DIMENSION = 1
MAX_DIMENSION = 16384

# Upload ceilings applied before decoding.
MAX_UPLOAD_MB = 10
MAX_SOURCE_DIMENSION = 10000
# MPO is how Pillow reports multi-picture JPEGs written by phone cameras.
ALLOWED_SOURCE_FORMATS = frozenset({"JPEG", "MPO", "PNG", "WEBP"})

# Size-convergence search.
MAX_SIZE_ATTEMPTS = 15
QUALITY_FLOOR = 10
LAST_RESORT_QUALITY = 1
# (overshoot ratio, quality step) pairs, checked in order; anything at or
# below the last ratio uses DEFAULT_QUALITY_STEP.
QUALITY_STEP_TABLE = ((3.0, 40), (2.0, 25), (1.5, 15), (1.2, 10))
DEFAULT_QUALITY_STEP = 5

# Draft/preview rendering.
PREVIEW_MAX_DIMENSION = 1200
PREVIEW_QUALITY = 60

# blur-pad compositing.
BLUR_RADIUS = 20.0
BLUR_BRIGHTNESS = 0.7

# Fixed quality of the raster embedded in document output.
DOCUMENT_EMBED_QUALITY = 90

DEFAULT_QUALITY = 90
DEFAULT_BACKGROUND = "#FFFFFF"

MIME_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "pdf": "application/pdf",
}
