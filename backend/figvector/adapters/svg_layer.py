"""SVG paste adapter — a design tool's SVG export → Layer.

Every filled ``<path>``/``<rect>``/``<circle>``/``<ellipse>`` becomes one fill of
a single layer, in document order (bottommost first). The first filled
element's bounds define the shape envelope and the viewport → shape offset
that gradient adapters subtract. Shadows come from the ``<filter>`` applied
to the filled elements.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from figvector.adapters.base import ParseError, parse_with_fallback
from figvector.adapters.transform_list import TransformListAdapter, TransformListSource
from figvector.engine.model import (
    ColorStop,
    CornerRadii,
    Fill,
    FillKind,
    GradientFamily,
    Layer,
    Shadow,
    ShadowKind,
    ShapeEnvelope,
)
from figvector.utils.color import RGBA, ColorParseError, clamp_unit, parse_color
from figvector.utils.geometry import path_bounds, path_start

logger = logging.getLogger(__name__)

ADAPTER_NAME = "svg"

_XLINK_HREF = "{http://www.w3.org/1999/xlink}href"
_URL_RE = re.compile(r"url\(\s*['\"]?#([^'\")]+)['\"]?\s*\)")
_NUMBER_RE = re.compile(r"[-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?")
_SKIP_SUBTREES = {
    "defs", "clipPath", "mask", "pattern", "filter", "symbol", "marker",
    "linearGradient", "radialGradient", "title", "desc", "metadata", "style",
}
_SHAPE_TAGS = {"path", "rect", "circle", "ellipse"}


def _local(tag: str) -> str:
    return tag.split("}")[-1] if isinstance(tag, str) else ""


def _style_map(el: ET.Element) -> dict[str, str]:
    style = el.get("style", "")
    result: dict[str, str] = {}
    for decl in style.split(";"):
        if ":" in decl:
            key, value = decl.split(":", 1)
            result[key.strip()] = value.strip()
    return result


def _prop(el: ET.Element, name: str, default: str | None = None) -> str | None:
    """Presentation property; inline style wins over the attribute."""
    style = _style_map(el)
    if name in style:
        return style[name]
    return el.get(name, default)


def _number(value: str | None, default: float = 0.0) -> float:
    if value is None:
        return default
    match = _NUMBER_RE.search(value)
    return float(match.group(0)) if match else default


def _length(value: str | None, default: float, reference: float) -> float:
    """Length or percentage of ``reference``."""
    if value is None or not value.strip():
        return default
    value = value.strip()
    if value.endswith("%"):
        return _number(value[:-1]) * reference / 100
    return _number(value, default)


def _opacity(value: str | None) -> float:
    if value is None:
        return 1.0
    value = value.strip()
    if value.endswith("%"):
        return clamp_unit(_number(value[:-1], 100.0) / 100)
    return clamp_unit(_number(value, 1.0))


@dataclass
class _Shape:
    element: ET.Element
    bounds: tuple[float, float, float, float]
    radii: CornerRadii
    opacity: float
    filter_id: str | None
    fill: str


@dataclass
class _Document:
    root: ET.Element
    canvas: tuple[float, float, float, float]
    by_id: dict[str, ET.Element] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)


def parse_svg_layer(svg_text: str) -> Layer:
    """Parse SVG export text. Raises ParseError when no layer can be built."""
    try:
        root = ET.fromstring(svg_text.strip())
    except ET.ParseError as e:
        raise ParseError(ADAPTER_NAME, f"malformed XML: {e}") from e
    if _local(root.tag) != "svg":
        raise ParseError(ADAPTER_NAME, f"root element is <{_local(root.tag)}>, expected <svg>")

    doc = _Document(root=root, canvas=_canvas(root))
    doc.by_id = {el.get("id"): el for el in root.iter() if el.get("id")}

    root_fill = _prop(root, "fill", "#000000") or "#000000"
    shapes = [s for s in _collect_shapes(doc, root, 1.0, None, root_fill) if s is not None]
    if not shapes:
        raise ParseError(ADAPTER_NAME, "no filled shapes found")

    base = shapes[0]
    xmin, ymin, xmax, ymax = base.bounds
    width, height = xmax - xmin, ymax - ymin
    envelope = ShapeEnvelope(width, height, base.radii)
    adapter = TransformListAdapter(width, height)

    fills: list[Fill] = []
    for shape in shapes:
        fill = _convert_fill(doc, shape, base.bounds, adapter)
        if fill is not None:
            fills.append(fill)

    shadows: list[Shadow] = []
    seen_filters: set[str] = set()
    for shape in shapes:
        if shape.filter_id and shape.filter_id not in seen_filters:
            seen_filters.add(shape.filter_id)
            shadows.extend(_parse_filter(doc, shape.filter_id))

    name = _layer_name(root, base.element)
    logger.info(
        "Parsed SVG layer %r: %.1fx%.1f at (%.1f, %.1f), %d fills, %d shadows",
        name, width, height, xmin, ymin, len(fills), len(shadows),
    )
    return Layer(
        envelope=envelope,
        fills=tuple(fills),
        shadows=tuple(shadows),
        opacity=_opacity(root.get("opacity")),
        name=name,
        notes=tuple(doc.notes),
    )


def _canvas(root: ET.Element) -> tuple[float, float, float, float]:
    viewbox = root.get("viewBox")
    if viewbox:
        parts = [float(p) for p in _NUMBER_RE.findall(viewbox)]
        if len(parts) >= 4:
            return (parts[0], parts[1], parts[2], parts[3])
    return (0.0, 0.0, _number(root.get("width"), 100.0), _number(root.get("height"), 100.0))


def _layer_name(root: ET.Element, first: ET.Element) -> str:
    for el in root:
        if _local(el.tag) == "title" and (el.text or "").strip():
            return el.text.strip()
    return first.get("id") or "Imported Shape"


def _collect_shapes(
    doc: _Document, el: ET.Element, opacity: float, filter_id: str | None, fill: str,
) -> list[_Shape | None]:
    shapes: list[_Shape | None] = []
    for child in el:
        tag = _local(child.tag)
        if tag in _SKIP_SUBTREES:
            continue
        child_opacity = opacity * _opacity(_prop(child, "opacity"))
        child_filter = filter_id
        filter_ref = _URL_RE.search(_prop(child, "filter") or "")
        if filter_ref:
            child_filter = filter_ref.group(1)
        child_fill = _prop(child, "fill") or fill

        if tag == "g" or tag == "svg":
            shapes.extend(_collect_shapes(doc, child, child_opacity, child_filter, child_fill))
        elif tag in _SHAPE_TAGS:
            if child_fill.strip() == "none":
                continue
            shapes.append(_shape(doc, child, tag, child_opacity, child_filter, child_fill))
    return shapes


def _shape(
    doc: _Document, el: ET.Element, tag: str, opacity: float, filter_id: str | None, fill: str,
) -> _Shape | None:
    cw, ch = doc.canvas[2], doc.canvas[3]
    radii = CornerRadii()
    if tag == "path":
        d = el.get("d", "")
        try:
            bounds = path_bounds(d)
        except ValueError as e:
            logger.warning("Skipping path: %s", e)
            doc.notes.append(f"path skipped: {e}")
            return None
        radii = _estimate_path_radius(d, bounds)
    elif tag == "rect":
        x = _length(el.get("x"), 0.0, cw)
        y = _length(el.get("y"), 0.0, ch)
        w = _length(el.get("width"), 0.0, cw)
        h = _length(el.get("height"), 0.0, ch)
        bounds = (x, y, x + w, y + h)
        rx = el.get("rx") or el.get("ry")
        if rx is not None:
            radii = CornerRadii.uniform(min(_length(rx, 0.0, cw), min(w, h) / 2))
    else:
        cx = _length(el.get("cx"), 0.0, cw)
        cy = _length(el.get("cy"), 0.0, ch)
        if tag == "circle":
            rx = ry = _length(el.get("r"), 0.0, min(cw, ch))
        else:
            rx = _length(el.get("rx"), 0.0, cw)
            ry = _length(el.get("ry"), rx, ch)
        bounds = (cx - rx, cy - ry, cx + rx, cy + ry)
        radii = CornerRadii.uniform(min(rx, ry))
    return _Shape(el, bounds, radii, opacity, filter_id, fill)


def _estimate_path_radius(d: str, bounds: tuple[float, float, float, float]) -> CornerRadii:
    """Rounded-rect exports start on the top edge, right after the top-left arc."""
    start = path_start(d)
    xmin, ymin, xmax, ymax = bounds
    if start is None or abs(start[1] - ymin) > 1e-6:
        return CornerRadii()
    limit = min(xmax - xmin, ymax - ymin) / 2
    return CornerRadii.uniform(max(0.0, min(start[0] - xmin, limit)))


def _convert_fill(
    doc: _Document,
    shape: _Shape,
    base_bounds: tuple[float, float, float, float],
    adapter: TransformListAdapter,
) -> Fill | None:
    el = shape.element
    fill = shape.fill.strip()
    opacity = shape.opacity * _opacity(_prop(el, "fill-opacity"))

    ref = _URL_RE.match(fill)
    if ref is None:
        try:
            color = parse_color(fill)
        except ColorParseError as e:
            logger.warning("Skipping fill: %s", e)
            doc.notes.append(f"fill skipped: {e}")
            return None
        return Fill(FillKind.SOLID, color, opacity)

    gradient = doc.by_id.get(ref.group(1))
    if gradient is None or _local(gradient.tag) not in ("linearGradient", "radialGradient"):
        logger.warning("Fill references unknown gradient %r", ref.group(1))
        doc.notes.append(f"fill skipped: unknown paint server #{ref.group(1)}")
        return None

    stops = _gradient_stops(doc, gradient)
    family = GradientFamily.RADIAL if _local(gradient.tag) == "radialGradient" else GradientFamily.LINEAR
    full, geometry_only = _gradient_transform_text(doc, gradient, family, shape.bounds)
    offset = (base_bounds[0], base_bounds[1])
    result = parse_with_fallback(
        [
            (adapter, TransformListSource(family, full, stops, offset)),
            (adapter, TransformListSource(family, geometry_only, stops, offset)),
        ],
        family=family,
        stops=stops,
    )
    if result.errors:
        doc.notes.append(f"gradient #{ref.group(1)}: {result.errors[0]}")
    return Fill(FillKind.GRADIENT, result.descriptor, opacity)


def _gradient_attr(doc: _Document, gradient: ET.Element, name: str) -> str | None:
    """Attribute lookup following href inheritance."""
    current: ET.Element | None = gradient
    for _ in range(8):
        if current is None:
            return None
        value = current.get(name)
        if value is not None:
            return value
        href = current.get(_XLINK_HREF) or current.get("href")
        current = doc.by_id.get(href[1:]) if href and href.startswith("#") else None
    return None


def _gradient_stops(doc: _Document, gradient: ET.Element) -> tuple[ColorStop, ...]:
    current: ET.Element | None = gradient
    stop_elements: list[ET.Element] = []
    for _ in range(8):
        if current is None:
            break
        stop_elements = [s for s in current if _local(s.tag) == "stop"]
        if stop_elements:
            break
        href = current.get(_XLINK_HREF) or current.get("href")
        current = doc.by_id.get(href[1:]) if href and href.startswith("#") else None

    stops: list[ColorStop] = []
    for stop in stop_elements:
        raw_offset = (stop.get("offset") or "0").strip()
        if raw_offset.endswith("%"):
            offset = _number(raw_offset[:-1])
        else:
            offset = _number(raw_offset) * 100
        try:
            color = parse_color(_prop(stop, "stop-color", "#000000") or "#000000")
        except ColorParseError as e:
            logger.warning("Skipping gradient stop: %s", e)
            doc.notes.append(f"stop skipped: {e}")
            continue
        alpha = color.a * _opacity(_prop(stop, "stop-opacity"))
        stops.append(ColorStop(RGBA(color.r, color.g, color.b, alpha), offset))
    return tuple(stops)


def _gradient_transform_text(
    doc: _Document,
    gradient: ET.Element,
    family: GradientFamily,
    bounds: tuple[float, float, float, float],
) -> tuple[str, str]:
    """Transform lists (full, without gradientTransform) for a gradient element."""
    bbox_units = (_gradient_attr(doc, gradient, "gradientUnits") or "objectBoundingBox") != "userSpaceOnUse"
    ref_w = 1.0 if bbox_units else doc.canvas[2]
    ref_h = 1.0 if bbox_units else doc.canvas[3]

    def length(name: str, default: float, ref: float) -> float:
        return _length(_gradient_attr(doc, gradient, name), default, ref)

    if family == GradientFamily.LINEAR:
        x1 = length("x1", 0.0, ref_w)
        y1 = length("y1", 0.0, ref_h)
        x2 = length("x2", ref_w, ref_w)
        y2 = length("y2", 0.0, ref_h)
        dx, dy = x2 - x1, y2 - y1
        local = f"matrix({dx!r} {dy!r} {-dy!r} {dx!r} {x1!r} {y1!r})"
    else:
        cx = length("cx", 0.5 * ref_w, ref_w)
        cy = length("cy", 0.5 * ref_h, ref_h)
        r = length("r", 0.5 * min(ref_w, ref_h), min(ref_w, ref_h))
        local = f"translate({cx!r} {cy!r}) scale({r!r})"

    prefix = ""
    if bbox_units:
        xmin, ymin, xmax, ymax = bounds
        prefix = f"translate({xmin!r} {ymin!r}) scale({xmax - xmin!r} {ymax - ymin!r})"

    gradient_transform = _gradient_attr(doc, gradient, "gradientTransform") or ""
    full = " ".join(p for p in (prefix, gradient_transform, local) if p)
    geometry_only = " ".join(p for p in (prefix, local) if p)
    return full, geometry_only


def _parse_filter(doc: _Document, filter_id: str) -> list[Shadow]:
    """Read drop/inner shadows from a filter.

    Handles ``feDropShadow`` and the longhand chain design tools export:
    feMorphology (spread) → feOffset → feGaussianBlur → feComposite (inner
    cut-out) → feColorMatrix (color).
    """
    filt = doc.by_id.get(filter_id)
    if filt is None or _local(filt.tag) != "filter":
        doc.notes.append(f"filter #{filter_id} not found")
        return []

    shadows: list[Shadow] = []
    pending: dict[str, float | bool] = {}
    for prim in filt:
        tag = _local(prim.tag)
        if tag == "feDropShadow":
            try:
                color = parse_color(_prop(prim, "flood-color", "#000000") or "#000000")
            except ColorParseError:
                color = RGBA(0, 0, 0, 1.0)
            alpha = color.a * _opacity(_prop(prim, "flood-opacity"))
            shadows.append(
                Shadow(
                    kind=ShadowKind.DROP,
                    dx=_number(prim.get("dx"), 2.0),
                    dy=_number(prim.get("dy"), 2.0),
                    blur=_number(prim.get("stdDeviation"), 2.0) * 2,
                    color=RGBA(color.r, color.g, color.b, alpha),
                )
            )
        elif tag == "feMorphology":
            radius = _number(prim.get("radius"))
            pending["spread"] = -radius if prim.get("operator") == "erode" else radius
        elif tag == "feOffset":
            pending["dx"] = _number(prim.get("dx"))
            pending["dy"] = _number(prim.get("dy"))
            pending["started"] = True
        elif tag == "feGaussianBlur" and pending.get("started"):
            pending["blur"] = _number(prim.get("stdDeviation")) * 2
        elif tag == "feComposite" and pending.get("started"):
            if prim.get("operator") == "arithmetic" and _number(prim.get("k2")) < 0:
                pending["inner"] = True
        elif tag == "feColorMatrix" and pending.get("started"):
            values = [float(v) for v in _NUMBER_RE.findall(prim.get("values", ""))]
            if len(values) != 20:
                continue
            shadows.append(
                Shadow(
                    kind=ShadowKind.INNER if pending.get("inner") else ShadowKind.DROP,
                    dx=float(pending.get("dx", 0.0)),
                    dy=float(pending.get("dy", 0.0)),
                    blur=float(pending.get("blur", 0.0)),
                    spread=float(pending.get("spread", 0.0)),
                    color=RGBA.from_floats(values[4], values[9], values[14], values[18]),
                )
            )
            pending = {}
    return shadows
