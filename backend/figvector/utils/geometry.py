"""Leaf-node geometry helpers — outlines, fill regions, path bounds. No engine imports."""

from __future__ import annotations

from svgpathtools import parse_path

from figvector.utils.math_helpers import format_number


def is_degenerate(width: float, height: float) -> bool:
    """Zero-area (or negative) outline: nothing to clip."""
    return not (width > 0 and height > 0)


def clamp_radii(
    width: float, height: float, radii: tuple[float, float, float, float],
) -> tuple[float, float, float, float]:
    """Clamp (tl, tr, br, bl) to [0, min(w, h) / 2]."""
    limit = max(0.0, min(width, height) / 2)
    return tuple(max(0.0, min(r, limit)) for r in radii)  # type: ignore[return-value]


def rounded_rect_path(
    width: float,
    height: float,
    radii: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0),
    origin: tuple[float, float] = (0.0, 0.0),
    decimals: int = 2,
) -> str:
    """Rounded rectangle outline with four independent corner radii.

    Corners with a zero radius become plain right angles instead of
    degenerate arcs.
    """
    tl, tr, br, bl = clamp_radii(width, height, radii)
    x0, y0 = origin
    x1, y1 = x0 + width, y0 + height

    def n(v: float) -> str:
        return format_number(v, decimals)

    def arc(r: float, x: float, y: float) -> str:
        return f" A{n(r)},{n(r)} 0 0 1 {n(x)},{n(y)}" if r > 0 else ""

    return (
        f"M{n(x0 + tl)},{n(y0)}"
        f" H{n(x1 - tr)}{arc(tr, x1, y0 + tr)}"
        f" V{n(y1 - br)}{arc(br, x1 - br, y1)}"
        f" H{n(x0 + bl)}{arc(bl, x0, y1 - bl)}"
        f" V{n(y0 + tl)}{arc(tl, x0 + tl, y0)}"
        " Z"
    )


def rect_path(x: float, y: float, width: float, height: float, decimals: int = 2) -> str:
    def n(v: float) -> str:
        return format_number(v, decimals)

    return f"M{n(x)},{n(y)} h{n(width)} v{n(height)} h{n(-width)} z"


def coverage_rect_path(cx: float, cy: float, side: float, decimals: int = 2) -> str:
    """Square of ``side`` centered on (cx, cy), used as an oversized fill region."""
    half = side / 2
    return rect_path(cx - half, cy - half, side, side, decimals)


def path_bounds(d: str) -> tuple[float, float, float, float]:
    """Compute (xmin, ymin, xmax, ymax) of SVG path data.

    Raises ValueError for empty or unparseable data.
    """
    try:
        path = parse_path(d)
    except Exception as e:
        raise ValueError(f"Unparseable path data: {e}") from e
    if len(path) == 0:
        raise ValueError("Empty path data")
    xmin, xmax, ymin, ymax = path.bbox()
    return (float(xmin), float(ymin), float(xmax), float(ymax))


def path_start(d: str) -> tuple[float, float] | None:
    """First point of the path, or None when it has no segments."""
    try:
        path = parse_path(d)
    except Exception:
        return None
    if len(path) == 0:
        return None
    start = path[0].start
    return (float(start.real), float(start.imag))
