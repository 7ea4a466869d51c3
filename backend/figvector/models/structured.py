"""Structured design-tool export models (matrix + typed paints + effects)."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

GradientType = Literal[
    "GRADIENT_LINEAR",
    "GRADIENT_RADIAL",
    "GRADIENT_ANGULAR",
    "GRADIENT_DIAMOND",
]


class _Strict(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


class MatrixFields(_Strict):
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0


class FloatColor(_Strict):
    """Channels as 0-1 floats."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @field_validator("r", "g", "b", "a", mode="after")
    @classmethod
    def _clamp(cls, v: float) -> float:
        # exporters round-trip through float32 and overshoot by an ulp or so
        return min(1.0, max(0.0, v))


class StructuredStop(FloatColor):
    # 0-1; values outside are legal in source tools
    position: float


class Offset(_Strict):
    x: float = 0.0
    y: float = 0.0


class StructuredGradient(_Strict):
    type: GradientType
    transform: MatrixFields
    stops: list[StructuredStop] = Field(default_factory=list)
    bounds_offset: Offset = Field(default_factory=Offset, alias="boundsOffset")
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = True


class StructuredSolid(_Strict):
    type: Literal["SOLID"]
    color: FloatColor
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    visible: bool = True


class StructuredEffect(_Strict):
    type: Literal["DROP_SHADOW", "INNER_SHADOW"]
    offset: Offset = Field(default_factory=Offset)
    radius: float = Field(default=0.0, ge=0.0)
    spread: float = 0.0
    color: FloatColor = Field(default_factory=lambda: FloatColor(r=0.0, g=0.0, b=0.0, a=0.25))
    visible: bool = True


class StructuredLayer(_Strict):
    """A whole layer. Paints and effects stay raw so one bad entry can't sink the rest."""

    name: str = "Layer"
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)
    corner_radius: float = Field(default=0.0, ge=0.0, alias="cornerRadius")
    # (tl, tr, br, bl); overrides corner_radius when present
    rectangle_corner_radii: tuple[float, float, float, float] | None = Field(
        default=None, alias="rectangleCornerRadii",
    )
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)
    # Bottommost paint first
    fills: list[dict[str, Any]] = Field(default_factory=list)
    effects: list[dict[str, Any]] = Field(default_factory=list)
