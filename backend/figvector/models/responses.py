"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    targets: list[str] = Field(default_factory=list)


class ConvertResponse(BaseModel):
    xml: str
    next_id: int
    warnings: list[str] = Field(default_factory=list)
    layer_name: str = ""
    processing_time_ms: float = 0.0
