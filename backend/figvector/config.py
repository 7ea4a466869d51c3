"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    figvector_env: str = "development"
    figvector_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Conversion defaults
    figvector_coverage_factor: float = 6.0
    figvector_decimal_places: int = 4
    figvector_sweep_max_stops: int | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
