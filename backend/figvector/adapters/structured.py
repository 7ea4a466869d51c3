"""Structured-matrix adapter — six numeric matrix fields, a type tag and float stops."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from figvector.adapters.base import ParseError
from figvector.engine.model import ColorStop, GradientDescriptor, GradientFamily
from figvector.models.structured import FloatColor, StructuredGradient, StructuredStop
from figvector.utils.affine import AffineTransform, aspect_baked_rotation, normalized_rotation
from figvector.utils.color import RGBA

ADAPTER_NAME = "structured-matrix"

FAMILY_BY_TYPE: dict[str, GradientFamily] = {
    "GRADIENT_LINEAR": GradientFamily.LINEAR,
    "GRADIENT_RADIAL": GradientFamily.RADIAL,
    "GRADIENT_ANGULAR": GradientFamily.ANGULAR,
    "GRADIENT_DIAMOND": GradientFamily.DIAMOND,
}


def float_color(color: FloatColor) -> RGBA:
    return RGBA.from_floats(color.r, color.g, color.b, color.a)


def convert_stop(stop: StructuredStop) -> ColorStop:
    return ColorStop(float_color(stop), stop.position * 100.0)


def family_of(raw: Any) -> GradientFamily:
    """Best-effort family lookup on raw (possibly invalid) input."""
    if isinstance(raw, Mapping):
        return FAMILY_BY_TYPE.get(str(raw.get("type")), GradientFamily.LINEAR)
    return GradientFamily.LINEAR


def salvage_stops(raw: Any) -> tuple[ColorStop, ...]:
    """Stops that validate on their own, for the identity fallback."""
    if not isinstance(raw, Mapping) or not isinstance(raw.get("stops"), list):
        return ()
    stops: list[ColorStop] = []
    for item in raw["stops"]:
        try:
            stops.append(convert_stop(StructuredStop.model_validate(item)))
        except ValidationError:
            continue
    return tuple(stops)


class StructuredMatrixAdapter:
    """``parse(mapping)`` → shape-local GradientDescriptor, or ParseError."""

    name = ADAPTER_NAME

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def parse(self, raw: Any) -> GradientDescriptor | ParseError:
        try:
            model = StructuredGradient.model_validate(raw)
        except ValidationError as e:
            return ParseError(ADAPTER_NAME, f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")

        family = FAMILY_BY_TYPE[model.type]
        t = model.transform
        ox, oy = model.bounds_offset.x, model.bounds_offset.y
        matrix = AffineTransform(t.a, t.b, t.c, t.d, t.tx, t.ty).translated(-ox, -oy)
        if family == GradientFamily.ANGULAR and self.width > 0 and self.height > 0:
            angle = normalized_rotation(matrix, self.width, self.height)
            matrix = aspect_baked_rotation(angle, self.width, self.height, matrix.tx, matrix.ty)

        return GradientDescriptor(
            family=family,
            stops=tuple(convert_stop(s) for s in model.stops),
            transform=matrix,
            source_bounds_offset=(ox, oy),
        )
