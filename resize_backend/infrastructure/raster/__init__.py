"""Raster infrastructure built on Pillow."""

from .compositor import Compositor
from .image_decoder import SourceDecoder
from .raster_encoder import RasterEncoder
from .transform_pipeline import TransformPipeline

__all__ = ["Compositor", "SourceDecoder", "RasterEncoder", "TransformPipeline"]
