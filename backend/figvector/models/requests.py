"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from figvector.models.structured import StructuredLayer


class ConvertRequest(BaseModel):
    source: str = Field(..., description="Pasted SVG export or CSS declarations")
    format: Literal["auto", "svg", "css"] = Field(
        default="auto",
        description="Source dialect; auto detects SVG markup",
    )
    target: Literal["vector", "shape"] = Field(
        default="vector",
        description="vector = VectorDrawable, shape = three-stop shape drawable",
    )
    next_id: int = Field(default=1, ge=0, description="First id for generated element names")


class StructuredConvertRequest(StructuredLayer):
    """Structured layer export plus conversion options."""

    target: Literal["vector", "shape"] = Field(default="vector")
    next_id: int = Field(default=1, ge=0)
