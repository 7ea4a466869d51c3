"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import Depends

from figvector.config import Settings, settings
from figvector.engine.config import ConversionConfig
from figvector.engine.pipeline import Converter, create_converter


def get_settings() -> Settings:
    return settings


def get_converter(current: Settings = Depends(get_settings)) -> Converter:
    return create_converter(ConversionConfig.from_settings(current))
