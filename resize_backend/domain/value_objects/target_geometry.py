"""
TargetGeometry value object
"""
from __future__ import annotations

from dataclasses import dataclass

from resize_backend.utils.numbers import round_half_up


@dataclass(frozen=True)
class TargetGeometry:
    """Resolved output canvas in pixels plus the density to embed."""
    width: int
    height: int
    density: int

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError("target geometry must be at least 1x1")
        if self.density < 1:
            raise ValueError("density must be >= 1")

    def fit_within(self, max_dimension: int) -> TargetGeometry:
        """
        Scale down uniformly so neither axis exceeds ``max_dimension``.

        Geometry already inside the bound is returned unchanged.

        Examples:
            >>> TargetGeometry(2400, 1200, 300).fit_within(1200)
            TargetGeometry(width=1200, height=600, density=300)
        """
        if self.width <= max_dimension and self.height <= max_dimension:
            return self
        ratio = min(max_dimension / self.width, max_dimension / self.height)
        return TargetGeometry(
            width=max(1, round_half_up(self.width * ratio)),
            height=max(1, round_half_up(self.height * ratio)),
            density=self.density,
        )
