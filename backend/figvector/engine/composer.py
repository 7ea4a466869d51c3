"""Document composition — Layer → drawable tree the emitters serialize.

Paint order, bottom to top:

1. drop shadows (offset, spread-grown copies of the outline)
2. one clip group cut to the outline, holding
   a. fills in list order (index 0 first)
   b. inner shadows as even-odd rings

Gradient fills become nested container groups around an oversized region;
the single clip group trims all of them at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from figvector.engine.config import ConversionConfig
from figvector.engine.model import (
    ColorStop,
    Fill,
    GradientFamily,
    Layer,
    Shadow,
    ShadowKind,
    ShapeEnvelope,
)
from figvector.engine.reprojection import (
    ContainerNode,
    GradientTree,
    LinearPrimitive,
    Primitive,
    RadialPrimitive,
    reproject,
)
from figvector.engine.stops import reduce_to_endpoints, resolve_stops
from figvector.utils.color import RGBA
from figvector.utils.geometry import (
    coverage_rect_path,
    is_degenerate,
    rect_path,
    rounded_rect_path,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradientPaint:
    primitive: Primitive
    stops: tuple[ColorStop, ...]

    @property
    def kind(self) -> str:
        if isinstance(self.primitive, LinearPrimitive):
            return "linear"
        if isinstance(self.primitive, RadialPrimitive):
            return "radial"
        return "sweep"


@dataclass(frozen=True)
class PathNode:
    path_data: str
    paint: RGBA | GradientPaint
    fill_alpha: float = 1.0
    even_odd: bool = False


@dataclass(frozen=True)
class GroupNode:
    children: tuple[GroupNode | PathNode, ...]
    container: ContainerNode | None = None
    clip_path: str | None = None


Node = GroupNode | PathNode


@dataclass(frozen=True)
class Drawable:
    width: float
    height: float
    children: tuple[Node, ...]
    alpha: float = 1.0
    name: str = "Layer"
    # Outer margin added around the shape so drop shadows are not cut off
    inset: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    warnings: tuple[str, ...] = field(default=(), compare=False)


def compose_document(layer: Layer, config: ConversionConfig | None = None) -> Drawable:
    """Build the drawable tree for one layer."""
    config = config or ConversionConfig()
    envelope = layer.envelope
    warnings: list[str] = list(layer.notes)
    decimals = config.decimal_places
    radii = (
        envelope.corner_radii.tl,
        envelope.corner_radii.tr,
        envelope.corner_radii.br,
        envelope.corner_radii.bl,
    )

    shadows = [s for s in layer.shadows if s.visible]
    children: list[Node] = []
    for shadow in shadows:
        if shadow.kind == ShadowKind.DROP:
            children.extend(_drop_shadow(shadow, envelope, config))

    clipped: list[Node] = []
    for fill in layer.visible_fills:
        clipped.append(_fill_node(fill, envelope, config, warnings))
    for shadow in shadows:
        if shadow.kind == ShadowKind.INNER:
            clipped.append(_inner_shadow(shadow, envelope, config))

    if is_degenerate(envelope.width, envelope.height):
        logger.info(
            "Layer %r has a degenerate %.3gx%.3g envelope, skipping clip path",
            layer.name, envelope.width, envelope.height,
        )
        children.append(GroupNode(children=tuple(clipped)))
    else:
        outline = rounded_rect_path(envelope.width, envelope.height, radii, decimals=decimals)
        children.append(GroupNode(children=tuple(clipped), clip_path=outline))

    return Drawable(
        width=envelope.width,
        height=envelope.height,
        children=tuple(children),
        alpha=layer.opacity,
        name=layer.name,
        inset=_shadow_inset(shadows, config),
        warnings=tuple(warnings),
    )


def _fill_node(
    fill: Fill, envelope: ShapeEnvelope, config: ConversionConfig, warnings: list[str],
) -> Node:
    decimals = config.decimal_places
    if fill.color is not None:
        return PathNode(
            path_data=rect_path(0.0, 0.0, envelope.width, envelope.height, decimals),
            paint=fill.color,
            fill_alpha=fill.opacity,
        )

    descriptor = fill.gradient
    if descriptor is None:
        raise ValueError(f"fill of kind {fill.kind.value} carries no gradient")
    tree = reproject(descriptor, envelope, config)
    warnings.extend(tree.notes)

    stops = resolve_stops(descriptor.stops, fill.opacity, config.transparent_alpha)
    max_stops = config.sweep_max_stops
    if descriptor.family == GradientFamily.ANGULAR and max_stops is not None and len(stops) > max_stops:
        logger.warning(
            "Sweep gradient has %d stops, target takes %d: using start/end colors",
            len(stops), max_stops,
        )
        warnings.append(
            f"angular gradient reduced from {len(stops)} stops to start/end colors"
        )
        stops = reduce_to_endpoints(stops)

    return _wrap(tree, GradientPaint(tree.primitive, stops), decimals)


def _wrap(tree: GradientTree, paint: GradientPaint, decimals: int) -> Node:
    cx, cy = tree.region_center
    node: Node = PathNode(
        path_data=coverage_rect_path(cx, cy, tree.region_side, decimals),
        paint=paint,
    )
    for container in reversed(tree.containers):
        node = GroupNode(children=(node,), container=container)
    return node


def _shadow_alpha(shadow: Shadow, config: ConversionConfig) -> float:
    return config.shadow_blur_alpha if shadow.blur > 0 else 1.0


def _shadow_grow(shadow: Shadow, steps: int, index: int) -> float:
    if steps == 1:
        return shadow.spread
    # Outermost step first so the denser core paints on top
    return shadow.spread + shadow.blur / 2 * (steps - 1 - index) / (steps - 1)


def _steps(shadow: Shadow, config: ConversionConfig) -> int:
    return max(1, config.shadow_blur_layers) if shadow.blur > 0 else 1


def _drop_shadow(shadow: Shadow, envelope: ShapeEnvelope, config: ConversionConfig) -> list[PathNode]:
    """Offset copies of the outline; blur spreads them into fainter concentric steps."""
    steps = _steps(shadow, config)
    alpha = _shadow_alpha(shadow, config) / steps
    nodes: list[PathNode] = []
    for i in range(steps):
        grow = _shadow_grow(shadow, steps, i)
        w = envelope.width + 2 * grow
        h = envelope.height + 2 * grow
        if is_degenerate(w, h):
            continue
        radii = envelope.corner_radii.expanded(grow)
        nodes.append(
            PathNode(
                path_data=rounded_rect_path(
                    w, h,
                    (radii.tl, radii.tr, radii.br, radii.bl),
                    origin=(shadow.dx - grow, shadow.dy - grow),
                    decimals=config.decimal_places,
                ),
                paint=shadow.color,
                fill_alpha=alpha,
            )
        )
    return nodes


def _inner_shadow(shadow: Shadow, envelope: ShapeEnvelope, config: ConversionConfig) -> PathNode:
    """Ring between a frame around the shape and the offset, spread-shrunk outline."""
    decimals = config.decimal_places
    margin = max(envelope.max_dimension, 1.0) + abs(shadow.dx) + abs(shadow.dy)
    frame = rect_path(
        -margin, -margin,
        envelope.width + 2 * margin, envelope.height + 2 * margin,
        decimals,
    )
    w = max(0.0, envelope.width - 2 * shadow.spread)
    h = max(0.0, envelope.height - 2 * shadow.spread)
    radii = envelope.corner_radii.expanded(-shadow.spread)
    hole = ""
    if not is_degenerate(w, h):
        hole = " " + rounded_rect_path(
            w, h,
            (radii.tl, radii.tr, radii.br, radii.bl),
            origin=(shadow.dx + shadow.spread, shadow.dy + shadow.spread),
            decimals=decimals,
        )
    return PathNode(
        path_data=frame + hole,
        paint=shadow.color,
        fill_alpha=_shadow_alpha(shadow, config),
        even_odd=True,
    )


def _shadow_inset(shadows: list[Shadow], config: ConversionConfig) -> tuple[float, float, float, float]:
    """Room (left, top, right, bottom) the drop shadows need outside the shape."""
    left = top = right = bottom = 0.0
    for shadow in shadows:
        if shadow.kind != ShadowKind.DROP:
            continue
        grow = _shadow_grow(shadow, _steps(shadow, config), 0)
        left = max(left, grow - shadow.dx)
        top = max(top, grow - shadow.dy)
        right = max(right, grow + shadow.dx)
        bottom = max(bottom, grow + shadow.dy)
    return (left, top, right, bottom)
