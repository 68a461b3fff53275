"""
PipelineConfig value object

Process-wide, read-only defaults threaded into every transform job.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from resize_backend import constants


@dataclass(frozen=True)
class PipelineConfig:
    """
    Immutable bundle of the ceilings and defaults a transform job runs under.

    Attributes:
        print_density: Density used for physical units under the auto policy
        screen_density: Density used for pixel units under the auto policy
        min_dimension / max_dimension: Inclusive bounds for resolved pixels
        max_source_dimension: Largest accepted upload on either axis
        max_upload_bytes: Largest accepted upload payload
        max_size_attempts: Encode attempts allowed per size-constrained job
        quality_floor: Lowest quality the step strategy will choose
        last_resort_quality: Quality of the final metadata-free attempt
        quality_steps: (overshoot ratio, step) thresholds, largest ratio first
        default_quality_step: Step used below the smallest ratio
        preview_max_dimension: Longer-axis ceiling for draft output
        preview_quality: Fixed quality of draft output
        blur_radius / blur_brightness: blur-pad background treatment
        document_quality: Quality of the raster embedded in documents
    """
    print_density: int = constants.PRINT_DENSITY
    screen_density: int = constants.SCREEN_DENSITY
    min_dimension: int = constants.MIN_DIMENSION
    max_dimension: int = constants.MAX_DIMENSION
    max_source_dimension: int = constants.MAX_SOURCE_DIMENSION
    max_upload_bytes: int = constants.MAX_UPLOAD_MB * 1024 * 1024
    max_size_attempts: int = constants.MAX_SIZE_ATTEMPTS
    quality_floor: int = constants.QUALITY_FLOOR
    last_resort_quality: int = constants.LAST_RESORT_QUALITY
    quality_steps: Tuple[Tuple[float, int], ...] = constants.QUALITY_STEP_TABLE
    default_quality_step: int = constants.DEFAULT_QUALITY_STEP
    preview_max_dimension: int = constants.PREVIEW_MAX_DIMENSION
    preview_quality: int = constants.PREVIEW_QUALITY
    blur_radius: float = constants.BLUR_RADIUS
    blur_brightness: float = constants.BLUR_BRIGHTNESS
    document_quality: int = constants.DOCUMENT_EMBED_QUALITY

    def __post_init__(self):
        """Reject configurations the pipeline cannot honor."""
        if self.min_dimension < 1 or self.max_dimension < self.min_dimension:
            raise ValueError("dimension bounds must satisfy 1 <= min <= max")
        if self.max_size_attempts < 1:
            raise ValueError("max_size_attempts must be >= 1")
        if not (1 <= self.quality_floor <= 100):
            raise ValueError("quality_floor must be between 1 and 100")
        if not (1 <= self.last_resort_quality <= self.quality_floor):
            raise ValueError("last_resort_quality must be between 1 and quality_floor")
        if self.preview_max_dimension < 1:
            raise ValueError("preview_max_dimension must be >= 1")
        ratios = [ratio for ratio, _ in self.quality_steps]
        if ratios != sorted(ratios, reverse=True):
            raise ValueError("quality_steps must be ordered by descending ratio")
        object.__setattr__(self, "quality_steps", tuple((float(r), int(s)) for r, s in self.quality_steps))
