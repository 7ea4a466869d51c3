"""CSS paste adapter — a design tool's "copy as CSS" block → Layer.

Only what a layer export contains is read: size, corner radii, opacity,
background layers and box shadows. CSS lists background layers topmost
first; they are reversed here into bottommost-first fill order.
"""

from __future__ import annotations

import logging
import math
import re

from figvector.adapters.base import ParseError, parse_with_fallback
from figvector.engine.model import (
    ColorStop,
    CornerRadii,
    Fill,
    FillKind,
    GradientDescriptor,
    GradientFamily,
    Layer,
    Shadow,
    ShadowKind,
    ShapeEnvelope,
)
from figvector.utils.affine import AffineTransform, aspect_baked_rotation
from figvector.utils.color import ColorParseError, clamp_unit, parse_color

logger = logging.getLogger(__name__)

ADAPTER_NAME = "css"

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_GRADIENT_RE = re.compile(r"^(repeating-)?(linear|radial|conic)-gradient\((.*)\)$", re.S | re.I)
_LENGTH_RE = re.compile(r"^([-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?)(px|%|deg|rad|turn|grad)?$", re.I)

_SIDE_ANGLES = {"top": 0.0, "right": 90.0, "bottom": 180.0, "left": 270.0}
_FAMILIES = {
    "linear": GradientFamily.LINEAR,
    "radial": GradientFamily.RADIAL,
    "conic": GradientFamily.ANGULAR,
}


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split on ``separator`` outside parentheses. Whitespace splits collapse runs."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        is_sep = ch.isspace() if separator == " " else ch == separator
        if is_sep and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def parse_declarations(css_text: str) -> dict[str, str]:
    """Declarations of the first rule (or of a bare declaration list). Later wins."""
    text = _COMMENT_RE.sub("", css_text)
    if "{" in text:
        text = text.split("{", 1)[1]
    text = text.split("}", 1)[0]

    declarations: dict[str, str] = {}
    for decl in split_top_level(text, ";"):
        if ":" not in decl:
            continue
        name, value = decl.split(":", 1)
        value = re.sub(r"\s*!important\s*$", "", value.strip(), flags=re.I)
        declarations[name.strip().lower()] = value
    return declarations


def _length(token: str, reference: float = 0.0) -> float:
    """px/unitless number, or a percentage of ``reference``. Raises ValueError."""
    match = _LENGTH_RE.match(token.strip())
    if not match:
        raise ValueError(f"not a length: {token!r}")
    value = float(match.group(1))
    unit = (match.group(2) or "").lower()
    if unit == "%":
        return value * reference / 100
    if unit in ("", "px"):
        return value
    raise ValueError(f"not a length: {token!r}")


def _is_length(token: str) -> bool:
    try:
        _length(token)
    except ValueError:
        return False
    return True


def _angle(token: str) -> float:
    """Angle in degrees. Raises ValueError."""
    match = _LENGTH_RE.match(token.strip())
    if not match:
        raise ValueError(f"not an angle: {token!r}")
    value = float(match.group(1))
    unit = (match.group(2) or "").lower()
    if unit == "deg" or (unit == "" and value == 0):
        return value
    if unit == "rad":
        return math.degrees(value)
    if unit == "turn":
        return value * 360
    if unit == "grad":
        return value * 0.9
    raise ValueError(f"not an angle: {token!r}")


def _is_angle(token: str) -> bool:
    try:
        _angle(token)
    except ValueError:
        return False
    return True


def parse_css_layer(css_text: str, name: str = "CSS Layer") -> Layer:
    """Parse pasted CSS. Raises ParseError when the size is missing or invalid."""
    decls = parse_declarations(css_text)
    try:
        width = _length(decls["width"])
        height = _length(decls["height"])
    except KeyError as e:
        raise ParseError(ADAPTER_NAME, f"missing {e.args[0]} declaration") from e
    except ValueError as e:
        raise ParseError(ADAPTER_NAME, str(e)) from e
    if width < 0 or height < 0:
        raise ParseError(ADAPTER_NAME, f"negative size {width}x{height}")

    notes: list[str] = []
    radii = _border_radius(decls.get("border-radius", "0"), width, height, notes)
    envelope = ShapeEnvelope(width, height, radii)

    opacity = 1.0
    if "opacity" in decls:
        try:
            opacity = clamp_unit(_length(decls["opacity"], 1.0))
        except ValueError:
            notes.append(f"opacity ignored: {decls['opacity']!r}")

    layers_top_first: list[str] = []
    for prop in ("background", "background-image"):
        if prop in decls:
            layers_top_first.extend(split_top_level(decls[prop]))
    if "background-color" in decls:
        layers_top_first.append(decls["background-color"])

    adapter = CssGradientAdapter(width, height)
    fills: list[Fill] = []
    for item in reversed(layers_top_first):
        fill = _background_fill(item, adapter, notes)
        if fill is not None:
            fills.append(fill)

    shadows = _box_shadows(decls.get("box-shadow", ""), notes)

    logger.info(
        "Parsed CSS layer: %.1fx%.1f, %d fills, %d shadows",
        width, height, len(fills), len(shadows),
    )
    return Layer(
        envelope=envelope,
        fills=tuple(fills),
        shadows=tuple(shadows),
        opacity=opacity,
        name=name,
        notes=tuple(notes),
    )


def _border_radius(value: str, width: float, height: float, notes: list[str]) -> CornerRadii:
    # Elliptical radii after "/" are approximated by their horizontal part
    tokens = value.split("/")[0].split()
    try:
        radii = [_length(t, min(width, height)) for t in tokens]
    except ValueError:
        notes.append(f"border-radius ignored: {value!r}")
        return CornerRadii()
    if len(radii) == 1:
        return CornerRadii.uniform(radii[0])
    if len(radii) == 2:
        return CornerRadii(radii[0], radii[1], radii[0], radii[1])
    if len(radii) == 3:
        return CornerRadii(radii[0], radii[1], radii[2], radii[1])
    if len(radii) == 4:
        return CornerRadii(*radii)
    notes.append(f"border-radius ignored: {value!r}")
    return CornerRadii()


def _background_fill(item: str, adapter: CssGradientAdapter, notes: list[str]) -> Fill | None:
    match = _GRADIENT_RE.match(item.strip())
    if match:
        family = _FAMILIES[match.group(2).lower()]
        result = parse_with_fallback(
            [(adapter, item.strip())],
            family=family,
            stops=_salvage_stops(match.group(3), family == GradientFamily.ANGULAR),
        )
        if result.used_default:
            notes.append(f"{result.errors[-1]}; identity transform used")
        return Fill(FillKind.GRADIENT, result.descriptor)

    # Shorthand layers may mix the color with position/repeat keywords
    for token in [item.strip()] + split_top_level(item, " "):
        try:
            return Fill(FillKind.SOLID, parse_color(token))
        except ColorParseError:
            continue
    logger.warning("Skipping background layer %r", item)
    notes.append(f"background layer skipped: {item!r}")
    return None


def _salvage_stops(body: str, angular: bool) -> tuple[ColorStop, ...]:
    args = split_top_level(body)
    for start in (0, 1):
        try:
            return parse_color_stops(args[start:], 1.0, angular)
        except (ValueError, ColorParseError):
            continue
    return ()


def parse_color_stops(
    args: list[str], line_length: float, angular: bool = False,
) -> tuple[ColorStop, ...]:
    """CSS color-stop list → stops in percent, with missing positions filled in.

    Raises ValueError/ColorParseError on malformed stops.
    """
    colors: list = []
    positions: list[float | None] = []
    for arg in args:
        tokens = split_top_level(arg, " ")
        if not tokens:
            continue
        if len(tokens) == 1 and (_is_length(tokens[0]) or _is_angle(tokens[0])):
            # Interpolation hint; the target interpolates linearly anyway
            continue
        color = parse_color(tokens[0])
        stop_positions = [_stop_position(t, line_length, angular) for t in tokens[1:3]]
        if not stop_positions:
            colors.append(color)
            positions.append(None)
        for pos in stop_positions:
            colors.append(color)
            positions.append(pos)

    if not colors:
        raise ValueError("gradient has no color stops")
    return tuple(ColorStop(c, p) for c, p in zip(colors, _fill_positions(positions)))


def _stop_position(token: str, line_length: float, angular: bool) -> float:
    if token.endswith("%"):
        return float(token[:-1])
    if angular:
        return _angle(token) / 360 * 100
    return _length(token) / max(line_length, 1e-9) * 100


def _fill_positions(positions: list[float | None]) -> list[float]:
    """CSS fixup: ends default to 0/100, positions never decrease, gaps spread evenly."""
    filled = list(positions)
    if filled[0] is None:
        filled[0] = 0.0
    if filled[-1] is None:
        filled[-1] = 100.0 if len(filled) > 1 else 0.0

    running = filled[0]
    for i, pos in enumerate(filled):
        if pos is not None:
            running = max(running, pos)
            filled[i] = running

    i = 0
    while i < len(filled):
        if filled[i] is not None:
            i += 1
            continue
        j = i
        while filled[j] is None:
            j += 1
        lo, hi = filled[i - 1], filled[j]
        span = j - i + 1
        for k in range(i, j):
            filled[k] = lo + (hi - lo) * (k - i + 1) / span
        i = j
    return [float(p) for p in filled]  # type: ignore[arg-type]


class CssGradientAdapter:
    """``parse(gradient_text)`` → shape-local GradientDescriptor, or ParseError."""

    name = "css-gradient"

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def parse(self, raw: str) -> GradientDescriptor | ParseError:
        match = _GRADIENT_RE.match(raw.strip())
        if not match:
            return ParseError(self.name, f"not a gradient: {raw[:40]!r}")
        kind = match.group(2).lower()
        args = split_top_level(match.group(3))
        if not args:
            return ParseError(self.name, f"empty {kind}-gradient()")
        try:
            if kind == "linear":
                return self._linear(args)
            if kind == "radial":
                return self._radial(args)
            return self._conic(args)
        except (ValueError, ColorParseError) as e:
            return ParseError(self.name, f"{kind}-gradient: {e}")

    def _linear(self, args: list[str]) -> GradientDescriptor:
        w, h = self.width, self.height
        first = args[0].strip().lower()
        angle = 180.0
        if first.startswith("to "):
            angle = self._side_angle(first[3:].split())
            args = args[1:]
        elif _is_angle(first) and not _is_length(first):
            angle = _angle(first)
            args = args[1:]

        theta = math.radians(angle)
        # Gradient line through the center, long enough to touch opposite corners
        length = abs(w * math.sin(theta)) + abs(h * math.cos(theta))
        dx, dy = math.sin(theta) * length, -math.cos(theta) * length
        sx, sy = w / 2 - dx / 2, h / 2 - dy / 2
        stops = parse_color_stops(args, length)
        return GradientDescriptor(
            family=GradientFamily.LINEAR,
            stops=stops,
            transform=AffineTransform(dx, dy, -dy, dx, sx, sy),
        )

    def _side_angle(self, words: list[str]) -> float:
        unknown = [word for word in words if word not in _SIDE_ANGLES]
        if unknown or not 1 <= len(words) <= 2:
            raise ValueError(f"bad direction 'to {' '.join(words)}'")
        if len(words) == 1:
            return _SIDE_ANGLES[words[0]]
        sx = 1.0 if "right" in words else -1.0 if "left" in words else 0.0
        sy = 1.0 if "bottom" in words else -1.0 if "top" in words else 0.0
        if sx == 0 or sy == 0:
            raise ValueError(f"bad direction 'to {' '.join(words)}'")
        # Corner directions are perpendicular to the diagonal between the other two corners
        return math.degrees(math.atan2(sx * self.height, -sy * self.width))

    def _position(self, tokens: list[str]) -> tuple[float, float]:
        w, h = self.width, self.height
        keywords = {"left": ("x", 0.0), "right": ("x", w), "top": ("y", 0.0), "bottom": ("y", h)}
        if not tokens:
            return (w / 2, h / 2)
        x: float | None = None
        y: float | None = None
        pending: list[str] = []
        for token in tokens[:2]:
            if token in keywords:
                axis, value = keywords[token]
                if axis == "x":
                    x = value
                else:
                    y = value
            elif token != "center":
                pending.append(token)
        for token in pending:
            if x is None:
                x = _length(token, w)
            else:
                y = _length(token, h)
        return (w / 2 if x is None else x, h / 2 if y is None else y)

    def _radial(self, args: list[str]) -> GradientDescriptor:
        w, h = self.width, self.height
        tokens = split_top_level(args[0].lower(), " ")
        shape_tokens: list[str] = []
        position_tokens: list[str] = []
        has_config = False
        try:
            parse_color(tokens[0])
        except ColorParseError:
            has_config = True
        if has_config:
            if "at" in tokens:
                at = tokens.index("at")
                shape_tokens, position_tokens = tokens[:at], tokens[at + 1:]
            else:
                shape_tokens = tokens
            args = args[1:]

        cx, cy = self._position(position_tokens)
        circle = "circle" in shape_tokens
        sizes = [t for t in shape_tokens if t not in ("circle", "ellipse")]
        lengths = [t for t in sizes if _is_length(t)]
        keyword = next((t for t in sizes if not _is_length(t)), "farthest-corner")

        if lengths:
            rx = _length(lengths[0], w)
            ry = _length(lengths[1], h) if len(lengths) > 1 else rx
        else:
            rx, ry = self._radial_extent(keyword, cx, cy, circle)

        stops = parse_color_stops(args, rx)
        return GradientDescriptor(
            family=GradientFamily.RADIAL,
            stops=stops,
            transform=AffineTransform(rx, 0.0, 0.0, ry, cx, cy),
        )

    def _radial_extent(self, keyword: str, cx: float, cy: float, circle: bool) -> tuple[float, float]:
        w, h = self.width, self.height
        side_x = (min(cx, w - cx), max(cx, w - cx))
        side_y = (min(cy, h - cy), max(cy, h - cy))
        closest = keyword.startswith("closest")
        if keyword not in ("closest-side", "farthest-side", "closest-corner", "farthest-corner"):
            raise ValueError(f"unknown radial size {keyword!r}")

        if keyword.endswith("side"):
            if circle:
                r = min(side_x[0], side_y[0]) if closest else max(side_x[1], side_y[1])
                return (r, r)
            return (side_x[0], side_y[0]) if closest else (side_x[1], side_y[1])

        corner_x = side_x[0] if closest else side_x[1]
        corner_y = side_y[0] if closest else side_y[1]
        if circle:
            r = math.hypot(corner_x, corner_y)
            return (r, r)
        # Ellipse through the corner with the side-based aspect ratio
        return (corner_x * math.sqrt(2), corner_y * math.sqrt(2))

    def _conic(self, args: list[str]) -> GradientDescriptor:
        tokens = split_top_level(args[0].lower(), " ")
        start = 0.0
        position_tokens: list[str] = []
        if tokens[0] in ("from", "at"):
            if "from" in tokens:
                at = tokens.index("from") + 1
                if at >= len(tokens) or tokens[at] == "at":
                    raise ValueError("missing angle after 'from'")
                start = _angle(tokens[at])
            if "at" in tokens:
                position_tokens = tokens[tokens.index("at") + 1:]
            args = args[1:]

        cx, cy = self._position(position_tokens)
        stops = parse_color_stops(args, 1.0, angular=True)
        return GradientDescriptor(
            family=GradientFamily.ANGULAR,
            stops=stops,
            transform=aspect_baked_rotation(start, self.width, self.height, cx, cy),
        )


def _box_shadows(value: str, notes: list[str]) -> list[Shadow]:
    shadows: list[Shadow] = []
    if not value or value.strip().lower() == "none":
        return shadows
    for item in split_top_level(value):
        tokens = split_top_level(item, " ")
        inset = "inset" in (t.lower() for t in tokens)
        lengths: list[float] = []
        color = None
        try:
            for token in tokens:
                if token.lower() == "inset":
                    continue
                if _is_length(token):
                    lengths.append(_length(token))
                else:
                    color = parse_color(token)
        except ColorParseError as e:
            logger.warning("Skipping box-shadow %r: %s", item, e)
            notes.append(f"box-shadow skipped: {e}")
            continue
        if len(lengths) < 2 or len(lengths) > 4:
            notes.append(f"box-shadow skipped: {item!r}")
            continue
        lengths += [0.0] * (4 - len(lengths))
        kwargs = {"color": color} if color is not None else {}
        shadows.append(
            Shadow(
                kind=ShadowKind.INNER if inset else ShadowKind.DROP,
                dx=lengths[0],
                dy=lengths[1],
                blur=max(0.0, lengths[2]),
                spread=lengths[3],
                **kwargs,
            )
        )
    return shadows
