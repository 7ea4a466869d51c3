"""Layer model — the normalized values every adapter produces and the engine consumes.

All types are frozen: a Layer is built once per conversion request and never
mutated. Changes (e.g. a rotated gradient) produce a new value through
``dataclasses.replace``.

Fill order convention: index 0 is the BOTTOMMOST fill, matching the target's
paint order. Adapters normalize to this order; nothing downstream reverses.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from figvector.utils.affine import IDENTITY, AffineTransform
from figvector.utils.color import RGBA


class GradientFamily(str, enum.Enum):
    LINEAR = "linear"
    RADIAL = "radial"
    ANGULAR = "angular"
    DIAMOND = "diamond"


class FillKind(str, enum.Enum):
    SOLID = "solid"
    GRADIENT = "gradient"


class ShadowKind(str, enum.Enum):
    DROP = "drop"
    INNER = "inner"


@dataclass(frozen=True)
class ColorStop:
    color: RGBA
    # Percent. May fall outside [0, 100]; resolver clips before emission.
    offset: float


@dataclass(frozen=True)
class GradientDescriptor:
    """A gradient in shape-local coordinates.

    ``transform`` maps gradient unit space into the shape's coordinate space:

    - linear: (0, 0) is the start point, (1, 0) the end point
    - radial/diamond: the unit circle becomes the gradient ellipse
    - angular: (tx, ty) is the center; the primary axis holds the start angle
      (0 = twelve o'clock) with the shape's aspect ratio baked in

    ``source_bounds_offset`` records the viewport → shape shift the adapter
    already subtracted from the translation.
    """

    family: GradientFamily
    stops: tuple[ColorStop, ...] = ()
    transform: AffineTransform = IDENTITY
    source_bounds_offset: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class Fill:
    kind: FillKind
    value: RGBA | GradientDescriptor
    opacity: float = 1.0
    visible: bool = True

    @property
    def gradient(self) -> GradientDescriptor | None:
        return self.value if isinstance(self.value, GradientDescriptor) else None

    @property
    def color(self) -> RGBA | None:
        return self.value if isinstance(self.value, RGBA) else None


@dataclass(frozen=True)
class CornerRadii:
    tl: float = 0.0
    tr: float = 0.0
    br: float = 0.0
    bl: float = 0.0

    @classmethod
    def uniform(cls, radius: float) -> CornerRadii:
        return cls(radius, radius, radius, radius)

    def expanded(self, amount: float) -> CornerRadii:
        """Grow (or shrink, for negative amounts) every rounded corner, floored at 0.

        Square corners stay square.
        """
        def grow(r: float) -> float:
            return max(0.0, r + amount) if r > 0 else 0.0

        return CornerRadii(grow(self.tl), grow(self.tr), grow(self.br), grow(self.bl))


@dataclass(frozen=True)
class ShapeEnvelope:
    width: float
    height: float
    corner_radii: CornerRadii = field(default_factory=CornerRadii)

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def max_dimension(self) -> float:
        return max(self.width, self.height)


@dataclass(frozen=True)
class Shadow:
    kind: ShadowKind
    dx: float = 0.0
    dy: float = 0.0
    blur: float = 0.0
    spread: float = 0.0
    color: RGBA = RGBA(0, 0, 0, 0.25)
    visible: bool = True


@dataclass(frozen=True)
class Layer:
    envelope: ShapeEnvelope
    fills: tuple[Fill, ...] = ()
    shadows: tuple[Shadow, ...] = ()
    opacity: float = 1.0
    name: str = "Layer"
    # Recoverable problems met while adapting the source (bad gradients, skipped effects)
    notes: tuple[str, ...] = ()

    @property
    def visible_fills(self) -> tuple[Fill, ...]:
        return tuple(f for f in self.fills if f.visible)

    @property
    def topmost_fill(self) -> Fill | None:
        visible = self.visible_fills
        return visible[-1] if visible else None
