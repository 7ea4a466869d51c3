"""Color stop resolver — ordering, padding, sampling and the transparent-stop fix.

Offsets are percentages. Interpolation happens in straight (non-premultiplied)
RGBA, which is what the target renderer does too.
"""

from __future__ import annotations

import bisect
import logging
from dataclasses import dataclass
from typing import Sequence

from figvector.engine.model import ColorStop
from figvector.utils.color import BLACK, RGBA, TRANSPARENT_BLACK

logger = logging.getLogger(__name__)

DEFAULT_TRANSPARENT_ALPHA = 1 / 255


def default_stops() -> tuple[ColorStop, ...]:
    """Opaque black → transparent black, used when a gradient has no stops."""
    return (ColorStop(BLACK, 0.0), ColorStop(TRANSPARENT_BLACK, 100.0))


def sort_stops(stops: Sequence[ColorStop]) -> tuple[ColorStop, ...]:
    """Stable sort by offset; equal offsets keep their input order."""
    return tuple(sorted(stops, key=lambda s: s.offset))


def pad_boundary_stops(stops: Sequence[ColorStop]) -> tuple[ColorStop, ...]:
    """Ensure the ramp reaches 0% and 100% by cloning the nearest stop.

    Idempotent: a padded list already spans [0, 100].
    """
    ordered = sort_stops(stops)
    if not ordered:
        return ordered
    padded = list(ordered)
    if padded[0].offset > 0.0:
        padded.insert(0, ColorStop(padded[0].color, 0.0))
    if padded[-1].offset < 100.0:
        padded.append(ColorStop(padded[-1].color, 100.0))
    return tuple(padded)


def _lerp_color(c0: RGBA, c1: RGBA, f: float) -> RGBA:
    return RGBA(
        int(round(c0.r + (c1.r - c0.r) * f)),
        int(round(c0.g + (c1.g - c0.g) * f)),
        int(round(c0.b + (c1.b - c0.b) * f)),
        c0.a + (c1.a - c0.a) * f,
    )


def sample_at(stops: Sequence[ColorStop], t: float) -> RGBA:
    """Color at offset ``t`` (percent).

    Outside the stop range the first/last color is returned unchanged.
    """
    ordered = sort_stops(stops) or default_stops()
    if t <= ordered[0].offset:
        return ordered[0].color
    if t >= ordered[-1].offset:
        return ordered[-1].color

    offsets = [s.offset for s in ordered]
    hi = bisect.bisect_left(offsets, t)
    upper = ordered[hi]
    if upper.offset == t:
        return upper.color
    lower = ordered[hi - 1]
    span = upper.offset - lower.offset
    if span <= 0:
        return upper.color
    return _lerp_color(lower.color, upper.color, (t - lower.offset) / span)


def clip_to_unit_range(stops: Sequence[ColorStop]) -> tuple[ColorStop, ...]:
    """Replace offsets outside [0, 100] with stops sampled at the boundaries."""
    ordered = sort_stops(stops)
    if not ordered:
        return ordered
    if ordered[0].offset >= 0.0 and ordered[-1].offset <= 100.0:
        return ordered

    inner = [s for s in ordered if 0.0 <= s.offset <= 100.0]
    if ordered[0].offset < 0.0 and not (inner and inner[0].offset == 0.0):
        inner.insert(0, ColorStop(sample_at(ordered, 0.0), 0.0))
    if ordered[-1].offset > 100.0 and not (inner and inner[-1].offset == 100.0):
        inner.append(ColorStop(sample_at(ordered, 100.0), 100.0))
    return tuple(inner)


def transparent_color_fix(
    color: RGBA,
    neighbor: RGBA,
    alpha_threshold: float = DEFAULT_TRANSPARENT_ALPHA,
) -> RGBA:
    """Give a "fade to nothing" stop its neighbor's hue.

    A transparent BLACK stop is what design tools write for "fade out"; left as
    is, the target interpolates through a muddy dark mid-color. A transparent
    stop with any other RGB is an intentional tinted fade and is kept.
    """
    if color.a <= alpha_threshold and color.is_black:
        return color.with_rgb_of(neighbor)
    return color


def apply_transparent_fix(
    stops: Sequence[ColorStop],
    alpha_threshold: float = DEFAULT_TRANSPARENT_ALPHA,
) -> tuple[ColorStop, ...]:
    """Run transparent_color_fix on every stop against its nearest visible neighbor."""
    ordered = sort_stops(stops)
    fixed: list[ColorStop] = []
    for i, stop in enumerate(ordered):
        if stop.color.a > alpha_threshold or not stop.color.is_black:
            fixed.append(stop)
            continue
        neighbor = _nearest_visible(ordered, i, alpha_threshold)
        if neighbor is None:
            fixed.append(stop)
            continue
        fixed.append(
            ColorStop(transparent_color_fix(stop.color, neighbor.color, alpha_threshold), stop.offset)
        )
    return tuple(fixed)


def _nearest_visible(
    ordered: Sequence[ColorStop], index: int, alpha_threshold: float,
) -> ColorStop | None:
    origin = ordered[index].offset
    before = next(
        (ordered[j] for j in range(index - 1, -1, -1) if ordered[j].color.a > alpha_threshold),
        None,
    )
    after = next(
        (ordered[j] for j in range(index + 1, len(ordered)) if ordered[j].color.a > alpha_threshold),
        None,
    )
    if before is None:
        return after
    if after is None:
        return before
    # Ties go to the previous stop
    if (after.offset - origin) < (origin - before.offset):
        return after
    return before


def apply_opacity(stops: Sequence[ColorStop], opacity: float) -> tuple[ColorStop, ...]:
    if opacity >= 1.0:
        return tuple(stops)
    return tuple(ColorStop(s.color.with_alpha(s.color.a * opacity), s.offset) for s in stops)


def reduce_to_endpoints(stops: Sequence[ColorStop]) -> tuple[ColorStop, ...]:
    """Start/end-color approximation used when the target can't take every stop."""
    ordered = sort_stops(stops) or default_stops()
    return (ColorStop(ordered[0].color, 0.0), ColorStop(ordered[-1].color, 100.0))


@dataclass(frozen=True)
class ThreeStopRamp:
    start: RGBA
    center: RGBA
    end: RGBA
    # Input stops that the three samples cannot represent exactly
    dropped: int = 0


def reduce_to_three(stops: Sequence[ColorStop]) -> ThreeStopRamp:
    """Sample start/center/end at 0/50/100.

    Stops other than those at exactly 0, 50 and 100 are lost; the count is
    reported so callers can surface the degradation.
    """
    ordered = sort_stops(stops) or default_stops()
    kept_offsets = {0.0, 50.0, 100.0}
    dropped = 0
    if len(ordered) > 2:
        dropped = sum(1 for s in ordered if s.offset not in kept_offsets)
    if dropped:
        logger.warning("Three-stop fallback dropped %d of %d stops", dropped, len(ordered))
    return ThreeStopRamp(
        start=sample_at(ordered, 0.0),
        center=sample_at(ordered, 50.0),
        end=sample_at(ordered, 100.0),
        dropped=dropped,
    )


def resolve_stops(
    stops: Sequence[ColorStop],
    opacity: float = 1.0,
    alpha_threshold: float = DEFAULT_TRANSPARENT_ALPHA,
) -> tuple[ColorStop, ...]:
    """Full normalization chain applied before a gradient is emitted."""
    if not stops:
        logger.info("Gradient has no stops, using black → transparent default")
        resolved = default_stops()
    else:
        resolved = sort_stops(stops)
    resolved = clip_to_unit_range(resolved)
    resolved = pad_boundary_stops(resolved)
    resolved = apply_transparent_fix(resolved, alpha_threshold)
    return apply_opacity(resolved, opacity)
