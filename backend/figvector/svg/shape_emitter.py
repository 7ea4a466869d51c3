"""Write an Android ``<shape>`` drawable — the simplified three-stop target.

A shape drawable holds one rectangle with one paint. Only the topmost visible
fill survives, gradients keep start/center/end colors sampled at 0/50/100%,
and linear angles snap to 45° steps. Every loss is reported as a warning.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

from figvector.engine.config import ConversionConfig
from figvector.engine.model import GradientFamily, Layer
from figvector.engine.stops import reduce_to_three, resolve_stops
from figvector.svg.vector_emitter import ANDROID_NS, EmitResult
from figvector.utils.affine import IDENTITY, decompose, normalize_degrees, normalized_rotation
from figvector.utils.color import TRANSPARENT_BLACK, to_android_hex
from figvector.utils.math_helpers import format_number, safe_ratio, snap_to_multiple

logger = logging.getLogger(__name__)

_GRADIENT_TYPES = {
    GradientFamily.LINEAR: "linear",
    GradientFamily.RADIAL: "radial",
    GradientFamily.DIAMOND: "radial",
    GradientFamily.ANGULAR: "sweep",
}


def emit_shape(layer: Layer, config: ConversionConfig | None = None, next_id: int = 1) -> EmitResult:
    """Serialize ``layer`` as a shape drawable. Names nothing, so ``next_id`` passes through."""
    config = config or ConversionConfig()
    envelope = layer.envelope
    warnings: list[str] = list(layer.notes)

    def n(value: float) -> str:
        return format_number(value, config.decimal_places)

    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f'<shape xmlns:android="{ANDROID_NS}"',
        '    android:shape="rectangle">',
        f'    <size android:width="{n(envelope.width)}dp" android:height="{n(envelope.height)}dp" />',
    ]

    r = envelope.corner_radii
    if r.tl == r.tr == r.br == r.bl:
        if r.tl > 0:
            lines.append(f'    <corners android:radius="{n(r.tl)}dp" />')
    else:
        lines.append(
            f'    <corners android:topLeftRadius="{n(r.tl)}dp"'
            f' android:topRightRadius="{n(r.tr)}dp"'
            f' android:bottomRightRadius="{n(r.br)}dp"'
            f' android:bottomLeftRadius="{n(r.bl)}dp" />'
        )

    visible = layer.visible_fills
    if len(visible) > 1:
        warnings.append(f"shape drawable keeps the topmost fill only; {len(visible) - 1} fill(s) dropped")
    shadows = [s for s in layer.shadows if s.visible]
    if shadows:
        warnings.append(f"shape drawable has no shadows; {len(shadows)} shadow(s) dropped")

    fill = layer.topmost_fill
    if fill is None:
        warnings.append("layer has no visible fill")
        lines.append(f'    <solid android:color="{to_android_hex(TRANSPARENT_BLACK)}" />')
    elif fill.color is not None:
        color = to_android_hex(fill.color, fill.opacity * layer.opacity)
        lines.append(f'    <solid android:color="{color}" />')
    else:
        lines.extend(_gradient_lines(layer, config, warnings, n))

    lines.append("</shape>")
    for warning in warnings[len(layer.notes):]:
        logger.warning("Shape fallback for %r: %s", layer.name, warning)
    return EmitResult(xml="\n".join(lines) + "\n", next_id=next_id, warnings=tuple(warnings))


def _gradient_lines(
    layer: Layer,
    config: ConversionConfig,
    warnings: list[str],
    n: Callable[[float], str],
) -> list[str]:
    fill = layer.topmost_fill
    descriptor = fill.gradient
    envelope = layer.envelope
    m = descriptor.transform
    if not m.is_finite():
        warnings.append("gradient transform is not finite; identity used")
        m = IDENTITY

    stops = resolve_stops(descriptor.stops, fill.opacity * layer.opacity, config.transparent_alpha)
    ramp = reduce_to_three(stops)
    if ramp.dropped:
        warnings.append(f"three-stop fallback dropped {ramp.dropped} of {len(stops)} gradient stops")

    attrs = [f'android:type="{_GRADIENT_TYPES[descriptor.family]}"']
    family = descriptor.family
    if family == GradientFamily.LINEAR:
        sx, sy = m.apply(0.0, 0.0)
        ex, ey = m.apply(1.0, 0.0)
        # Shape angles run counter-clockwise from left → right; y points down
        angle = math.degrees(math.atan2(-(ey - sy), ex - sx))
        snapped = normalize_degrees(snap_to_multiple(normalize_degrees(angle), 45.0))
        if abs(normalize_degrees(angle - snapped + 180) - 180) > 0.5:
            warnings.append(f"linear angle {angle:.1f}° snapped to {snapped:.0f}°")
        attrs.append(f'android:angle="{n(snapped)}"')
    else:
        cx, cy = m.tx, m.ty
        attrs.append(f'android:centerX="{n(safe_ratio(cx, envelope.width, config.min_scale))}"')
        attrs.append(f'android:centerY="{n(safe_ratio(cy, envelope.height, config.min_scale))}"')
        if family == GradientFamily.ANGULAR:
            start = normalized_rotation(m, envelope.width, envelope.height)
            # Shape sweeps always start at three o'clock, i.e. 90° from twelve
            if abs(normalize_degrees(start - 90.0 + 180) - 180) > 0.5:
                warnings.append(f"sweep start angle {start:.1f}° not representable; three o'clock used")
        else:
            dec = decompose(m)
            radius = dec.scale_x
            if abs(dec.scale_y - dec.scale_x) > 1e-6 * max(dec.scale_x, 1.0):
                warnings.append("elliptical radial gradient drawn as a circle")
            if family == GradientFamily.DIAMOND:
                warnings.append("diamond gradient drawn as a radial gradient")
            attrs.append(f'android:gradientRadius="{n(max(radius, config.min_scale))}"')

    attrs.append(f'android:startColor="{to_android_hex(ramp.start)}"')
    if len(stops) > 2:
        attrs.append(f'android:centerColor="{to_android_hex(ramp.center)}"')
    attrs.append(f'android:endColor="{to_android_hex(ramp.end)}"')

    lines = ["    <gradient"]
    for i, attr in enumerate(attrs):
        end = " />" if i == len(attrs) - 1 else ""
        lines.append(f"        {attr}{end}")
    return lines
