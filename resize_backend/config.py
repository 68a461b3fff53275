from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

from . import constants
from .domain.value_objects.pipeline_config import PipelineConfig

# Ensure environment variables from the repository root .env are available
# regardless of the working directory used to start the process.
ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


class Settings(BaseSettings):
  log_level: str = Field(default="INFO", alias="LOG_LEVEL")
  print_dpi: int = Field(default=constants.PRINT_DENSITY, alias="RESIZE_PRINT_DPI", gt=0)
  screen_dpi: int = Field(default=constants.SCREEN_DENSITY, alias="RESIZE_SCREEN_DPI", gt=0)
  max_dimension: int = Field(default=constants.MAX_DIMENSION, alias="RESIZE_MAX_DIMENSION", gt=0)
  max_source_dimension: int = Field(default=constants.MAX_SOURCE_DIMENSION, alias="RESIZE_MAX_SOURCE_DIMENSION", gt=0)
  max_upload_mb: float = Field(default=constants.MAX_UPLOAD_MB, alias="RESIZE_MAX_UPLOAD_MB", gt=0)
  max_size_attempts: int = Field(default=constants.MAX_SIZE_ATTEMPTS, alias="RESIZE_MAX_SIZE_ATTEMPTS", gt=0)
  quality_floor: int = Field(default=constants.QUALITY_FLOOR, alias="RESIZE_QUALITY_FLOOR", ge=1, le=100)
  preview_max_dimension: int = Field(default=constants.PREVIEW_MAX_DIMENSION, alias="RESIZE_PREVIEW_MAX_DIMENSION", gt=0)
  preview_quality: int = Field(default=constants.PREVIEW_QUALITY, alias="RESIZE_PREVIEW_QUALITY", ge=1, le=100)
  blur_radius: float = Field(default=constants.BLUR_RADIUS, alias="RESIZE_BLUR_RADIUS", ge=0)
  workers: int = Field(default=4, alias="RESIZE_WORKERS", gt=0)

  def pipeline_config(self) -> PipelineConfig:
    return PipelineConfig(
      print_density=self.print_dpi,
      screen_density=self.screen_dpi,
      max_dimension=self.max_dimension,
      max_source_dimension=self.max_source_dimension,
      max_upload_bytes=int(self.max_upload_mb * 1024 * 1024),
      max_size_attempts=self.max_size_attempts,
      quality_floor=self.quality_floor,
      preview_max_dimension=self.preview_max_dimension,
      preview_quality=self.preview_quality,
      blur_radius=self.blur_radius,
    )

  class Config:
    case_sensitive = False
    populate_by_name = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  return Settings()  # type: ignore[arg-type]
