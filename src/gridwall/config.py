"""Configuration management using Pydantic settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Generator settings loaded from environment variables (GRIDWALL_*)."""

    model_config = SettingsConfigDict(
        env_prefix="GRIDWALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Basic
    wall_count: int = 15
    safe_radius: float = 5.0            # no walls this close to the player

    # Grid
    grid_size: int = 20                 # cells from center to edge
    grid_spacing: float = 1.0
    force_grid_alignment: bool = True   # snap clustered walls to cell centers

    # Randomness
    grouping_factor: float = 0.3        # chance of placing next to an existing wall
    max_placement_attempts: int = 20    # attempts per requested wall
    seed: Optional[int] = None          # None = fresh entropy every session

    # Wall properties (passed through to the entity factory)
    randomize_health: bool = True
    min_health: int = 25
    max_health: int = 60

    # Frame budget
    max_generation_time_per_frame: float = 0.016   # seconds
    max_walls_per_frame: int = 5

    # Host loop
    tick_rate_hz: float = 60.0

    # Debug
    debug_logs: bool = True


settings = Settings()
