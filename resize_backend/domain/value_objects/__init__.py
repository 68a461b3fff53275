"""
Domain Value Objects

Immutable value objects that encapsulate transform concepts with validation.
"""
from .crop_rectangle import CropRectangle, CropUnit, PixelRect
from .encoded_artifact import EncodedArtifact
from .output_format import OutputFormat
from .pipeline_config import PipelineConfig
from .resize_mode import ResizeMode
from .target_geometry import TargetGeometry
from .transform_request import TransformRequest
from .units import LengthUnit, ResolutionPolicy

__all__ = [
    'CropRectangle',
    'CropUnit',
    'PixelRect',
    'EncodedArtifact',
    'OutputFormat',
    'PipelineConfig',
    'ResizeMode',
    'TargetGeometry',
    'TransformRequest',
    'LengthUnit',
    'ResolutionPolicy',
]
