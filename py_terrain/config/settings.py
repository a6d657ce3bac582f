from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

from ..core.params import GenerationParams, TerrainExtent
from .layer_presets import get_layer_preset

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from TERRAIN_* environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Generation defaults
    default_seed: int = Field(default=42, description="Default random seed")
    default_width: float = Field(default=500.0, gt=0, description="Default terrain width")
    default_max_height: float = Field(default=120.0, gt=0, description="Default terrain max height")
    default_depth: float = Field(default=500.0, gt=0, description="Default terrain depth")
    default_heightmap_resolution: int = Field(default=513, ge=2, description="Default heightmap resolution")
    default_alphamap_resolution: int = Field(default=256, ge=2, description="Default alphamap resolution")
    default_tree_count: int = Field(default=80, ge=0, description="Default number of trees")
    default_grass_count: int = Field(default=220, ge=0, description="Default number of grass patches")
    default_layer_preset: str = Field(default="default", description="Default terrain layer preset")

    # Limits
    max_resolution: int = Field(default=4097, ge=2, description="Max heightmap/alphamap resolution")
    max_decorations: int = Field(default=100000, ge=0, description="Max decorations per kind")
    max_placement_attempts: int = Field(default=10000, ge=1, description="Retry budget per tree slot")

    class Config:
        env_prefix = "TERRAIN_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def origins(self) -> list:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def default_generation_params(self, **overrides) -> GenerationParams:
        """Build GenerationParams from the configured defaults."""
        values = dict(
            seed=self.default_seed,
            extent=TerrainExtent(self.default_width, self.default_max_height, self.default_depth),
            heightmap_resolution=self.default_heightmap_resolution,
            alphamap_resolution=self.default_alphamap_resolution,
            layers=get_layer_preset(self.default_layer_preset),
            tree_count=self.default_tree_count,
            grass_count=self.default_grass_count,
        )
        values.update(overrides)
        return GenerationParams(**values)


# Instantiate settings object
settings = Settings()
