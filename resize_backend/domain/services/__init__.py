"""
Domain services for transform logic that doesn't belong to a single value object.

Domain services here are pure: they depend only on value objects and the
read-only PipelineConfig, never on the raster engine.
"""
from .quality_strategy import ProportionalStepStrategy, QualityStrategy
from .resolution_resolver import ResolutionResolver

__all__ = ["ProportionalStepStrategy", "QualityStrategy", "ResolutionResolver"]
