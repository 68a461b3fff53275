"""
ResolutionResolver domain service.

Turns a width/height in an arbitrary unit, plus a resolution policy, into the
pixel canvas a job renders to and the density embedded in its metadata.
"""
from __future__ import annotations

from typing import Any, Optional

from resize_backend.domain.exceptions import DimensionOutOfRangeError, InvalidDimensionError
from resize_backend.domain.value_objects.pipeline_config import PipelineConfig
from resize_backend.domain.value_objects.target_geometry import TargetGeometry
from resize_backend.domain.value_objects.transform_request import TransformRequest
from resize_backend.domain.value_objects.units import LengthUnit, ResolutionPolicy
from resize_backend.utils.numbers import round_half_up, to_finite_float


class ResolutionResolver:
    """
    Domain service for unit and density normalization.

    Stateless apart from the read-only PipelineConfig it is built with.
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self._config = config or PipelineConfig()

    def effective_density(
        self,
        unit: LengthUnit | str,
        policy: ResolutionPolicy | str = ResolutionPolicy.AUTO,
        explicit_density: Any = None,
    ) -> int:
        """
        Density (pixels per inch) used for conversion and metadata.

        Args:
            unit: Unit the dimensions are expressed in
            policy: ``auto`` picks a print or screen default from the unit;
                ``fixed`` uses ``explicit_density`` exactly
            explicit_density: Caller-supplied density, only read under ``fixed``

        Returns:
            Positive integer density
        """
        unit = LengthUnit.parse(unit)
        policy = ResolutionPolicy.parse(policy)

        if policy is ResolutionPolicy.FIXED:
            # Embedded density must equal the caller's value, so it is never rounded.
            density = to_finite_float(explicit_density)
            if density is None or density < 1 or not density.is_integer():
                raise InvalidDimensionError(
                    "dpi",
                    explicit_density,
                    message=f"dpi must be a whole number >= 1 when resolutionMode is fixed, got {explicit_density!r}",
                )
            return int(density)

        if unit.is_physical:
            return self._config.print_density
        return self._config.screen_density

    def resolve(
        self,
        value: Any,
        unit: LengthUnit | str,
        policy: ResolutionPolicy | str = ResolutionPolicy.AUTO,
        explicit_density: Any = None,
        *,
        field: str = "dimension",
    ) -> int:
        """
        Convert one dimension to whole pixels.

        Raises:
            InvalidDimensionError: value is non-numeric or not positive
            DimensionOutOfRangeError: rounded result is outside the configured bounds
            UnsupportedUnitError: unit token is unknown
        """
        number = to_finite_float(value)
        if number is None or number <= 0:
            raise InvalidDimensionError(field, value)

        unit = LengthUnit.parse(unit)
        density = self.effective_density(unit, policy, explicit_density)
        pixels = round_half_up(unit.to_pixels(number, density))

        if pixels < self._config.min_dimension or pixels > self._config.max_dimension:
            raise DimensionOutOfRangeError(field, pixels, self._config.min_dimension, self._config.max_dimension)
        return pixels

    def resolve_target(self, request: TransformRequest) -> TargetGeometry:
        """Resolve both axes of a request and the density to embed."""
        return TargetGeometry(
            width=self.resolve(
                request.width, request.unit, request.resolution_policy, request.density, field="width"
            ),
            height=self.resolve(
                request.height, request.unit, request.resolution_policy, request.density, field="height"
            ),
            density=self.effective_density(request.unit, request.resolution_policy, request.density),
        )
