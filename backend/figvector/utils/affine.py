"""2D affine matrix algebra. No engine imports.

Matrices use the SVG layout::

    | a  c  tx |
    | b  d  ty |
    | 0  0  1  |

so a point (x, y) maps to (a·x + c·y + tx, b·x + d·y + ty).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class AffineTransform:
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @property
    def rotation_degrees(self) -> float:
        """Angle of the primary (x) axis, atan2(b, a) in degrees."""
        return math.degrees(math.atan2(self.b, self.a))

    @property
    def scale_x(self) -> float:
        return math.hypot(self.a, self.b)

    @property
    def scale_y(self) -> float:
        return math.hypot(self.c, self.d)

    def to_array(self) -> NDArray[np.float64]:
        """3x3 homogeneous matrix."""
        return np.array(
            [
                [self.a, self.c, self.tx],
                [self.b, self.d, self.ty],
                [0.0, 0.0, 1.0],
            ],
            dtype=np.float64,
        )

    @classmethod
    def from_array(cls, m: NDArray[np.float64]) -> AffineTransform:
        return cls(
            a=float(m[0, 0]),
            b=float(m[1, 0]),
            c=float(m[0, 1]),
            d=float(m[1, 1]),
            tx=float(m[0, 2]),
            ty=float(m[1, 2]),
        )

    def then(self, other: AffineTransform) -> AffineTransform:
        """Post-multiply: ``self · other`` (other is applied to points first)."""
        return compose(self, other)

    def translated(self, dx: float, dy: float) -> AffineTransform:
        """Shift the transform's output by (dx, dy), i.e. ``T(dx, dy) · self``."""
        return AffineTransform(self.a, self.b, self.c, self.d, self.tx + dx, self.ty + dy)

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (
            self.a * x + self.c * y + self.tx,
            self.b * x + self.d * y + self.ty,
        )

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.a, self.b, self.c, self.d, self.tx, self.ty))


IDENTITY = AffineTransform()


@dataclass(frozen=True)
class Decomposition:
    """Translation + rotation + non-uniform scale extracted from a matrix."""

    rotation: float
    scale_x: float
    scale_y: float
    tx: float
    ty: float


def compose(first: AffineTransform, second: AffineTransform) -> AffineTransform:
    """Matrix product ``first · second``.

    Folding a transform list left to right with this function reproduces the
    SVG application order: ``translate(..) rotate(..)`` means points are
    rotated first, then translated.
    """
    return AffineTransform.from_array(first.to_array() @ second.to_array())


def compose_all(*transforms: AffineTransform) -> AffineTransform:
    result = IDENTITY
    for t in transforms:
        result = compose(result, t)
    return result


def decompose(m: AffineTransform) -> Decomposition:
    """Split into rotation (degrees), axis scales (always >= 0) and translation.

    Skew is not represented; the secondary axis only contributes its length.
    """
    return Decomposition(
        rotation=m.rotation_degrees,
        scale_x=m.scale_x,
        scale_y=m.scale_y,
        tx=m.tx,
        ty=m.ty,
    )


def translation(tx: float, ty: float = 0.0) -> AffineTransform:
    return AffineTransform(tx=tx, ty=ty)


def rotation(degrees: float, cx: float = 0.0, cy: float = 0.0) -> AffineTransform:
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    rot = AffineTransform(cos, sin, -sin, cos, 0.0, 0.0)
    if cx == 0.0 and cy == 0.0:
        return rot
    return compose_all(translation(cx, cy), rot, translation(-cx, -cy))


def scaling(sx: float, sy: float | None = None) -> AffineTransform:
    if sy is None:
        sy = sx
    return AffineTransform(sx, 0.0, 0.0, sy, 0.0, 0.0)


def apply_to_points(m: AffineTransform, points: NDArray[np.float64]) -> NDArray[np.float64]:
    """Map an Nx2 array of points through the transform."""
    if len(points) == 0:
        return np.empty((0, 2))
    homogeneous = np.hstack([points, np.ones((len(points), 1))])
    return (m.to_array() @ homogeneous.T).T[:, :2]


def normalize_degrees(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = math.fmod(degrees, 360.0)
    if wrapped < 0:
        wrapped += 360.0
    # fmod can return 360.0 - tiny for tiny negatives
    if wrapped >= 360.0:
        wrapped -= 360.0
    return wrapped


def normalized_rotation(m: AffineTransform, width: float, height: float) -> float:
    """Primary-axis angle after dividing out a baked-in width/height squash.

    Angular gradients are stored as a circle squashed to the shape's bounding
    box, so ``atan2(b, a)`` is skewed whenever width != height. Normalizing
    the axis first recovers the true angle: ``atan2(b / h, a / w)``.
    """
    if width <= 0 or height <= 0:
        return m.rotation_degrees
    return math.degrees(math.atan2(m.b / height, m.a / width))


def aspect_baked_rotation(
    degrees: float, width: float, height: float, cx: float = 0.0, cy: float = 0.0,
) -> AffineTransform:
    """Canonical angular transform: rotation ``degrees`` squashed to (width, height)."""
    rad = math.radians(degrees)
    cos, sin = math.cos(rad), math.sin(rad)
    return AffineTransform(cos * width, sin * height, -sin * width, cos * height, cx, cy)
