"""Structured layer adapter — a whole layer export (size, corners, paints, effects) → Layer."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from figvector.adapters.base import ParseError, parse_with_fallback
from figvector.adapters.structured import (
    StructuredMatrixAdapter,
    family_of,
    float_color,
    salvage_stops,
)
from figvector.engine.model import (
    CornerRadii,
    Fill,
    FillKind,
    Layer,
    Shadow,
    ShadowKind,
    ShapeEnvelope,
)
from figvector.models.structured import StructuredEffect, StructuredLayer, StructuredSolid

logger = logging.getLogger(__name__)

ADAPTER_NAME = "structured-layer"


def parse_structured_layer(data: Mapping[str, Any] | StructuredLayer) -> Layer:
    """Build a Layer; only layer-level problems raise ParseError.

    Paints keep their export order, which is already bottommost-first.
    """
    try:
        model = data if isinstance(data, StructuredLayer) else StructuredLayer.model_validate(data)
    except ValidationError as e:
        raise ParseError(ADAPTER_NAME, f"invalid layer: {e.errors()[0]['msg']}") from e

    if model.rectangle_corner_radii is not None:
        radii = CornerRadii(*model.rectangle_corner_radii)
    else:
        radii = CornerRadii.uniform(model.corner_radius)
    envelope = ShapeEnvelope(model.width, model.height, radii)

    notes: list[str] = []
    adapter = StructuredMatrixAdapter(model.width, model.height)
    fills: list[Fill] = []
    for index, paint in enumerate(model.fills):
        fill = _convert_paint(index, paint, adapter, notes)
        if fill is not None:
            fills.append(fill)

    shadows: list[Shadow] = []
    for index, effect in enumerate(model.effects):
        try:
            parsed = StructuredEffect.model_validate(effect)
        except ValidationError as e:
            logger.warning("Skipping effect %d: %s", index, e.errors()[0]["msg"])
            notes.append(f"effect {index} skipped: {e.errors()[0]['msg']}")
            continue
        shadows.append(
            Shadow(
                kind=ShadowKind.DROP if parsed.type == "DROP_SHADOW" else ShadowKind.INNER,
                dx=parsed.offset.x,
                dy=parsed.offset.y,
                blur=parsed.radius,
                spread=parsed.spread,
                color=float_color(parsed.color),
                visible=parsed.visible,
            )
        )

    logger.info(
        "Structured layer %r: %.0fx%.0f, %d fills, %d shadows",
        model.name, model.width, model.height, len(fills), len(shadows),
    )
    return Layer(
        envelope=envelope,
        fills=tuple(fills),
        shadows=tuple(shadows),
        opacity=model.opacity,
        name=model.name,
        notes=tuple(notes),
    )


def _convert_paint(
    index: int,
    paint: Mapping[str, Any],
    adapter: StructuredMatrixAdapter,
    notes: list[str],
) -> Fill | None:
    kind = paint.get("type") if isinstance(paint, Mapping) else None
    if kind == "SOLID":
        try:
            solid = StructuredSolid.model_validate(paint)
        except ValidationError as e:
            logger.warning("Skipping solid paint %d: %s", index, e.errors()[0]["msg"])
            notes.append(f"fill {index} skipped: {e.errors()[0]['msg']}")
            return None
        return Fill(FillKind.SOLID, float_color(solid.color), solid.opacity, solid.visible)

    if not (isinstance(kind, str) and kind.startswith("GRADIENT_")):
        logger.warning("Skipping paint %d of unsupported type %r", index, kind)
        notes.append(f"fill {index} skipped: unsupported paint type {kind!r}")
        return None

    result = parse_with_fallback(
        [(adapter, paint)],
        family=family_of(paint),
        stops=salvage_stops(paint),
    )
    if result.used_default:
        notes.append(f"fill {index}: {result.errors[-1]}; identity transform used")
    return Fill(
        FillKind.GRADIENT,
        result.descriptor,
        opacity=_number(paint.get("opacity"), 1.0),
        visible=bool(paint.get("visible", True)),
    )


def _number(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return max(0.0, min(1.0, number))
