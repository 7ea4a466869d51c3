"""Gradient re-projection — arbitrary affine gradients → nested simple transforms.

The target only knows three primitives: an axis-free linear ramp (start/end
points), a centered circular radial and a centered sweep. Everything else
(ellipses, rotation, diamond, aspect-baked angular) is rebuilt by wrapping
one of those in containers that each translate, rotate or scale.

Containers are listed outer → inner, so the composed matrix is
``C0 · C1 · … · Cn`` applied to the primitive's local coordinates.

Coverage: the leaf region is drawn far larger than the shape (at least 4x its
largest side *after* the containers' scale), and one clip path around the
whole fill stack trims it. Rotation never exposes an unfilled corner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from figvector.engine.config import ConversionConfig
from figvector.engine.model import GradientDescriptor, GradientFamily, ShapeEnvelope
from figvector.utils.affine import (
    IDENTITY,
    AffineTransform,
    apply_to_points,
    compose_all,
    decompose,
    normalized_rotation,
    rotation,
    scaling,
    translation,
)
from figvector.utils.math_helpers import at_least

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContainerNode:
    """One nested group. Applies scale, then rotation, then translation."""

    translate_x: float = 0.0
    translate_y: float = 0.0
    rotation: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    def to_transform(self) -> AffineTransform:
        return compose_all(
            translation(self.translate_x, self.translate_y),
            rotation(self.rotation),
            scaling(self.scale_x, self.scale_y),
        )

    @property
    def min_scale(self) -> float:
        return min(abs(self.scale_x), abs(self.scale_y))


@dataclass(frozen=True)
class LinearPrimitive:
    start: tuple[float, float]
    end: tuple[float, float]


@dataclass(frozen=True)
class RadialPrimitive:
    center: tuple[float, float]
    radius: float


@dataclass(frozen=True)
class SweepPrimitive:
    center: tuple[float, float]


Primitive = LinearPrimitive | RadialPrimitive | SweepPrimitive


@dataclass(frozen=True)
class GradientTree:
    containers: tuple[ContainerNode, ...]
    primitive: Primitive
    # Oversized square fill region, in the primitive's local coordinates
    region_center: tuple[float, float]
    region_side: float
    notes: tuple[str, ...] = ()

    @property
    def composed(self) -> AffineTransform:
        return compose_all(*(c.to_transform() for c in self.containers))


def reproject(
    descriptor: GradientDescriptor,
    envelope: ShapeEnvelope,
    config: ConversionConfig | None = None,
) -> GradientTree:
    """Map one gradient onto containers + a target primitive."""
    config = config or ConversionConfig()
    notes: list[str] = []

    m = descriptor.transform
    if not m.is_finite():
        logger.warning("Non-finite %s gradient transform, using identity", descriptor.family.value)
        notes.append(f"{descriptor.family.value} gradient had a non-finite transform; identity used")
        m = IDENTITY

    if descriptor.family == GradientFamily.LINEAR:
        containers, primitive = _linear(m, config, notes)
    elif descriptor.family == GradientFamily.ANGULAR:
        containers, primitive = _angular(m, envelope, config)
    else:
        extra = config.diamond_rotation if descriptor.family == GradientFamily.DIAMOND else 0.0
        containers, primitive = _radial(m, extra, config, notes)

    center, side = _coverage_region(containers, envelope, config)
    return GradientTree(
        containers=containers,
        primitive=primitive,
        region_center=center,
        region_side=side,
        notes=tuple(notes),
    )


def _linear(
    m: AffineTransform, config: ConversionConfig, notes: list[str],
) -> tuple[tuple[ContainerNode, ...], LinearPrimitive]:
    # Native primitive takes arbitrary endpoints: no decomposition needed
    start = m.apply(0.0, 0.0)
    end = m.apply(1.0, 0.0)
    if start == end:
        logger.warning("Linear gradient has zero length, nudging end point")
        notes.append("linear gradient had zero length; end point nudged")
        end = (start[0] + config.min_scale, start[1])
    return (), LinearPrimitive(start=start, end=end)


def _radial(
    m: AffineTransform,
    extra_rotation: float,
    config: ConversionConfig,
    notes: list[str],
) -> tuple[tuple[ContainerNode, ...], RadialPrimitive]:
    dec = decompose(m)
    if dec.scale_x < config.min_scale:
        logger.warning("Radial scale_x %.3g below minimum, substituting %.3g", dec.scale_x, config.min_scale)
        notes.append("radial gradient had a zero radius; minimum radius used")
    radius = at_least(dec.scale_x, config.min_scale)
    aspect = at_least(dec.scale_y / radius, config.min_scale)

    # Scale innermost: the ellipse's own axis, not the canvas axis, gets rotated
    containers = (
        ContainerNode(translate_x=dec.tx, translate_y=dec.ty),
        ContainerNode(rotation=dec.rotation + extra_rotation),
        ContainerNode(scale_y=aspect),
    )
    return containers, RadialPrimitive(center=(0.0, 0.0), radius=radius)


def _angular(
    m: AffineTransform,
    envelope: ShapeEnvelope,
    config: ConversionConfig,
) -> tuple[tuple[ContainerNode, ...], SweepPrimitive]:
    width = at_least(envelope.width, config.min_scale)
    height = at_least(envelope.height, config.min_scale)
    angle = normalized_rotation(m, width, height)

    # Source squashes the sweep to the bounding box in shape axes, so the
    # squash sits outside the rotation.
    containers = (
        ContainerNode(translate_x=m.tx, translate_y=m.ty),
        ContainerNode(scale_y=at_least(height / width, config.min_scale)),
        ContainerNode(rotation=angle + config.sweep_angle_offset),
    )
    return containers, SweepPrimitive(center=(0.0, 0.0))


def _coverage_region(
    containers: tuple[ContainerNode, ...],
    envelope: ShapeEnvelope,
    config: ConversionConfig,
) -> tuple[tuple[float, float], float]:
    """Square region that, once transformed, covers the shape with margin."""
    rendered_side = config.effective_coverage * at_least(envelope.max_dimension, 1.0)
    cx, cy = envelope.center
    if not containers:
        return (cx, cy), rendered_side

    # Rotation preserves lengths; the cumulative scale's smallest factor
    # bounds how much the region can shrink on screen.
    shrink = 1.0
    for node in containers:
        shrink *= at_least(node.min_scale, config.min_scale)
    side = rendered_side / min(shrink, 1.0)

    composed = compose_all(*(c.to_transform() for c in containers))
    inverse = AffineTransform.from_array(np.linalg.inv(composed.to_array()))
    local = apply_to_points(inverse, np.array([[cx, cy]]))[0]
    return (float(local[0]), float(local[1])), side
