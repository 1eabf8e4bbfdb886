"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from MAPGEN_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="MAPGEN_", env_file=".env", extra="ignore")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="plain", description="Logging format (plain or json)")

    # Storage
    cache_dir: str = Field(default="./maps", description="Directory for cached grids")

    # Generation
    default_generator: str = Field(default="circle", description="Generator used when none is given")
    default_height: int = Field(default=640, description="Default map height")
    default_width: int = Field(default=1280, description="Default map width")
    default_iterations: int = Field(default=1000, description="Default fracture iterations")
    max_map_size: int = Field(default=16384, description="Maximum map height or width")
    fractal_roughness: float = Field(default=0.001, description="Diamond-square roughness")
    great_circle_pct_water: int = Field(
        default=65, description="Water share used by the great-circle generator"
    )

    # Coloring
    pct_water: int = Field(default=33, description="Percent of the map colored as water")
    pct_ice: int = Field(default=8, description="Percent of the map colored as ice")
    flood_fill_depth: int = Field(default=12, description="Maximum polar ice fill depth")


settings = Settings()
