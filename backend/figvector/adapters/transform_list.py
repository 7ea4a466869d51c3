"""Transform-list adapter — ``translate(..) rotate(..) scale(..) matrix(..)`` text.

Functions are folded left to right by post-multiplication from identity,
the same order an SVG renderer applies them.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from figvector.adapters.base import ParseError
from figvector.engine.model import ColorStop, GradientDescriptor, GradientFamily
from figvector.utils.affine import (
    IDENTITY,
    AffineTransform,
    aspect_baked_rotation,
    normalized_rotation,
    rotation,
    scaling,
    translation,
)

ADAPTER_NAME = "transform-list"

_FUNC_RE = re.compile(r"\s*([A-Za-z]+)\s*\(([^()]*)\)\s*,?")
_ARG_SPLIT_RE = re.compile(r"\s*,\s*|\s+")

# function -> allowed argument counts
_ARITY: dict[str, tuple[int, ...]] = {
    "matrix": (6,),
    "translate": (1, 2),
    "scale": (1, 2),
    "rotate": (1, 3),
}


def parse_transform_list(text: str) -> AffineTransform:
    """Fold a transform list into one matrix. Raises ParseError when malformed."""
    result = IDENTITY
    pos = 0
    text = text or ""
    while pos < len(text):
        if not text[pos:].strip():
            break
        match = _FUNC_RE.match(text, pos)
        if not match:
            raise ParseError(ADAPTER_NAME, f"unexpected text at {pos}: {text[pos:pos + 20]!r}")
        name = match.group(1).lower()
        args = _parse_args(name, match.group(2))
        result = result.then(_function_matrix(name, args))
        pos = match.end()
    return result


def _parse_args(name: str, body: str) -> list[float]:
    if name not in _ARITY:
        raise ParseError(ADAPTER_NAME, f"unsupported transform function {name!r}")
    tokens = [t for t in _ARG_SPLIT_RE.split(body.strip()) if t]
    try:
        args = [float(t) for t in tokens]
    except ValueError as e:
        raise ParseError(ADAPTER_NAME, f"bad number in {name}(): {e}") from e
    if len(args) not in _ARITY[name]:
        raise ParseError(ADAPTER_NAME, f"{name}() takes {_ARITY[name]} arguments, got {len(args)}")
    if not all(math.isfinite(v) for v in args):
        raise ParseError(ADAPTER_NAME, f"non-finite argument in {name}()")
    return args


def _function_matrix(name: str, args: list[float]) -> AffineTransform:
    if name == "matrix":
        return AffineTransform(*args)
    if name == "translate":
        return translation(args[0], args[1] if len(args) > 1 else 0.0)
    if name == "scale":
        return scaling(args[0], args[1] if len(args) > 1 else None)
    if len(args) == 3:
        return rotation(args[0], args[1], args[2])
    return rotation(args[0])


@dataclass(frozen=True)
class TransformListSource:
    family: GradientFamily
    transform: str
    stops: tuple[ColorStop, ...] = ()
    # Viewport position of the shape's top-left corner
    bounds_offset: tuple[float, float] = (0.0, 0.0)


class TransformListAdapter:
    """Produce shape-local descriptors from transform-list text.

    ``width``/``height`` are the shape's size, needed to undo the bounding-box
    squash baked into angular gradients.
    """

    name = ADAPTER_NAME

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def parse(self, raw: TransformListSource) -> GradientDescriptor | ParseError:
        try:
            matrix = parse_transform_list(raw.transform)
        except ParseError as e:
            return e

        ox, oy = raw.bounds_offset
        matrix = matrix.translated(-ox, -oy)
        if raw.family == GradientFamily.ANGULAR and self.width > 0 and self.height > 0:
            angle = normalized_rotation(matrix, self.width, self.height)
            matrix = aspect_baked_rotation(angle, self.width, self.height, matrix.tx, matrix.ty)

        return GradientDescriptor(
            family=raw.family,
            stops=raw.stops,
            transform=matrix,
            source_bounds_offset=raw.bounds_offset,
        )
