"""Write Android VectorDrawable XML from a composed drawable tree.

Generated elements are named ``<kind>_<n>`` from a counter the caller passes
in; the next free value is returned with the XML so consecutive conversions
can share one namespace without any module state. Same tree + same starting
counter → byte-identical XML.
"""

from __future__ import annotations

from dataclasses import dataclass
from xml.sax.saxutils import quoteattr

from figvector.engine.composer import Drawable, GradientPaint, GroupNode, Node, PathNode
from figvector.engine.reprojection import ContainerNode, LinearPrimitive, RadialPrimitive
from figvector.utils.color import to_android_hex
from figvector.utils.math_helpers import format_number

ANDROID_NS = "http://schemas.android.com/apk/res/android"
AAPT_NS = "http://schemas.android.com/aapt"

_INDENT = "    "


@dataclass(frozen=True)
class EmitResult:
    xml: str
    next_id: int
    warnings: tuple[str, ...] = ()


class _Writer:
    def __init__(self, next_id: int, decimals: int) -> None:
        self.lines: list[str] = []
        self.next_id = next_id
        self.decimals = decimals

    def n(self, value: float) -> str:
        return format_number(value, self.decimals)

    def name(self, kind: str) -> str:
        name = f"{kind}_{self.next_id}"
        self.next_id += 1
        return name

    def open(self, depth: int, tag: str, attrs: list[tuple[str, str]], close: str = ">") -> None:
        pad = _INDENT * depth
        if not attrs:
            self.lines.append(f"{pad}<{tag}{close}")
            return
        self.lines.append(f"{pad}<{tag}")
        for i, (key, value) in enumerate(attrs):
            end = close if i == len(attrs) - 1 else ""
            self.lines.append(f"{pad}{_INDENT}{key}={quoteattr(value)}{end}")


def emit_vector(drawable: Drawable, next_id: int = 1, decimals: int = 4) -> EmitResult:
    """Serialize ``drawable``; element names start at ``next_id``."""
    w = _Writer(next_id, decimals)
    left, top, right, bottom = drawable.inset
    viewport_w = drawable.width + left + right
    viewport_h = drawable.height + top + bottom
    viewport_w = viewport_w if viewport_w > 0 else 1.0
    viewport_h = viewport_h if viewport_h > 0 else 1.0

    attrs = [
        ("xmlns:android", ANDROID_NS),
        ("xmlns:aapt", AAPT_NS),
        ("android:name", drawable.name),
        ("android:width", f"{w.n(viewport_w)}dp"),
        ("android:height", f"{w.n(viewport_h)}dp"),
        ("android:viewportWidth", w.n(viewport_w)),
        ("android:viewportHeight", w.n(viewport_h)),
    ]
    if drawable.alpha < 1.0:
        attrs.append(("android:alpha", w.n(drawable.alpha)))

    w.lines.append('<?xml version="1.0" encoding="utf-8"?>')
    w.open(0, "vector", attrs)

    depth = 1
    shifted = left > 0 or top > 0
    if shifted:
        w.open(1, "group", [
            ("android:name", w.name("group")),
            ("android:translateX", w.n(left)),
            ("android:translateY", w.n(top)),
        ])
        depth = 2

    for child in drawable.children:
        _write_node(w, child, depth)

    if shifted:
        w.lines.append(f"{_INDENT}</group>")
    w.lines.append("</vector>")
    return EmitResult(xml="\n".join(w.lines) + "\n", next_id=w.next_id, warnings=drawable.warnings)


def _write_node(w: _Writer, node: Node, depth: int) -> None:
    if isinstance(node, PathNode):
        _write_path(w, node, depth)
        return

    attrs = [("android:name", w.name("group"))]
    if node.container is not None:
        attrs.extend(_container_attrs(w, node.container))
    w.open(depth, "group", attrs)
    if node.clip_path is not None:
        w.open(depth + 1, "clip-path", [
            ("android:name", w.name("clip")),
            ("android:pathData", node.clip_path),
        ], close=" />")
    for child in node.children:
        _write_node(w, child, depth + 1)
    w.lines.append(f"{_INDENT * depth}</group>")


def _container_attrs(w: _Writer, c: ContainerNode) -> list[tuple[str, str]]:
    """Only non-default attributes, in a fixed order."""
    attrs: list[tuple[str, str]] = []
    if c.translate_x != 0:
        attrs.append(("android:translateX", w.n(c.translate_x)))
    if c.translate_y != 0:
        attrs.append(("android:translateY", w.n(c.translate_y)))
    if c.rotation != 0:
        attrs.append(("android:rotation", w.n(c.rotation)))
    if c.scale_x != 1:
        attrs.append(("android:scaleX", w.n(c.scale_x)))
    if c.scale_y != 1:
        attrs.append(("android:scaleY", w.n(c.scale_y)))
    return attrs


def _write_path(w: _Writer, node: PathNode, depth: int) -> None:
    attrs = [("android:name", w.name("path")), ("android:pathData", node.path_data)]
    if node.even_odd:
        attrs.append(("android:fillType", "evenOdd"))
    if node.fill_alpha < 1.0:
        attrs.append(("android:fillAlpha", w.n(max(0.0, node.fill_alpha))))

    if not isinstance(node.paint, GradientPaint):
        attrs.append(("android:fillColor", to_android_hex(node.paint)))
        w.open(depth, "path", attrs, close=" />")
        return

    w.open(depth, "path", attrs)
    pad = _INDENT * (depth + 1)
    w.lines.append(f'{pad}<aapt:attr name="android:fillColor">')
    w.open(depth + 2, "gradient", _gradient_attrs(w, node.paint))
    for stop in node.paint.stops:
        w.open(depth + 3, "item", [
            ("android:color", to_android_hex(stop.color)),
            ("android:offset", w.n(stop.offset / 100)),
        ], close=" />")
    w.lines.append(f"{pad}{_INDENT}</gradient>")
    w.lines.append(f"{pad}</aapt:attr>")
    w.lines.append(f"{_INDENT * depth}</path>")


def _gradient_attrs(w: _Writer, paint: GradientPaint) -> list[tuple[str, str]]:
    primitive = paint.primitive
    attrs = [("android:type", paint.kind)]
    if isinstance(primitive, LinearPrimitive):
        attrs += [
            ("android:startX", w.n(primitive.start[0])),
            ("android:startY", w.n(primitive.start[1])),
            ("android:endX", w.n(primitive.end[0])),
            ("android:endY", w.n(primitive.end[1])),
        ]
    else:
        attrs += [
            ("android:centerX", w.n(primitive.center[0])),
            ("android:centerY", w.n(primitive.center[1])),
        ]
        if isinstance(primitive, RadialPrimitive):
            attrs.append(("android:gradientRadius", w.n(primitive.radius)))
    return attrs
