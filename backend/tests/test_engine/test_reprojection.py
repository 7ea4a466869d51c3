"""Tests for gradient re-projection onto target primitives."""

import math

import numpy as np
import pytest

from figvector.engine.config import ConversionConfig
from figvector.engine.model import GradientDescriptor, GradientFamily, ShapeEnvelope
from figvector.engine.reprojection import (
    LinearPrimitive,
    RadialPrimitive,
    SweepPrimitive,
    reproject,
)
from figvector.utils.affine import (
    AffineTransform,
    aspect_baked_rotation,
    compose_all,
    rotation,
    scaling,
    translation,
)

from tests.conftest import RED_TO_BLUE


def _desc(family, transform):
    return GradientDescriptor(family=family, stops=RED_TO_BLUE, transform=transform)


def test_linear_maps_unit_endpoints():
    m = AffineTransform(100, 0, 0, 100, 0, 50)
    tree = reproject(_desc(GradientFamily.LINEAR, m), ShapeEnvelope(100, 100))
    assert tree.containers == ()
    assert isinstance(tree.primitive, LinearPrimitive)
    assert tree.primitive.start == (0, 50)
    assert tree.primitive.end == (100, 50)


def test_linear_zero_length_is_nudged():
    m = AffineTransform(0, 0, 0, 0, 10, 10)
    tree = reproject(_desc(GradientFamily.LINEAR, m), ShapeEnvelope(100, 100))
    assert tree.primitive.start != tree.primitive.end
    assert tree.notes


def test_radial_nesting_reproduces_ellipse():
    m = compose_all(translation(100, 32), rotation(90), scaling(32, 100))
    tree = reproject(_desc(GradientFamily.RADIAL, m), ShapeEnvelope(200, 64))
    outer, middle, inner = tree.containers
    assert (outer.translate_x, outer.translate_y) == pytest.approx((100, 32))
    assert middle.rotation == pytest.approx(90)
    assert inner.scale_y == pytest.approx(100 / 32)
    assert isinstance(tree.primitive, RadialPrimitive)
    assert tree.primitive.radius == pytest.approx(32)

    rebuilt = tree.composed.then(scaling(tree.primitive.radius))
    for point in [(1, 0), (0, 1), (-0.5, 0.25)]:
        assert rebuilt.apply(*point) == pytest.approx(m.apply(*point))


def test_radial_two_to_one_ellipse():
    m = AffineTransform(100, 0, 0, 50, 100, 50)
    tree = reproject(_desc(GradientFamily.RADIAL, m), ShapeEnvelope(200, 100))
    outer, middle, inner = tree.containers
    assert (outer.translate_x, outer.translate_y) == pytest.approx((100, 50))
    assert middle.rotation == pytest.approx(0)
    assert inner.scale_y == pytest.approx(0.5)
    assert tree.primitive.radius == pytest.approx(100)


def test_diamond_is_rotated_radial():
    m = AffineTransform(50, 0, 0, 50, 50, 50)
    tree = reproject(_desc(GradientFamily.DIAMOND, m), ShapeEnvelope(100, 100))
    assert tree.containers[1].rotation == pytest.approx(45)
    assert isinstance(tree.primitive, RadialPrimitive)


def test_zero_matrix_stays_finite():
    tree = reproject(_desc(GradientFamily.RADIAL, AffineTransform(0, 0, 0, 0, 0, 0)), ShapeEnvelope(100, 100))
    config = ConversionConfig()
    assert tree.primitive.radius == config.min_scale
    assert tree.containers[2].scale_y == config.min_scale
    assert math.isfinite(tree.region_side)
    assert all(math.isfinite(v) for v in tree.region_center)
    assert tree.notes


def test_non_finite_transform_uses_identity():
    m = AffineTransform(float("nan"), 0, 0, 1, 0, 0)
    tree = reproject(_desc(GradientFamily.LINEAR, m), ShapeEnvelope(10, 10))
    assert tree.primitive.start == (0, 0)
    assert tree.primitive.end == (1, 0)
    assert "non-finite" in tree.notes[0]


def test_angular_on_wide_shape():
    m = AffineTransform(300, 10, -10, 50, 150, 25)
    tree = reproject(_desc(GradientFamily.ANGULAR, m), ShapeEnvelope(300, 50))
    origin, squash, turn = tree.containers
    assert (origin.translate_x, origin.translate_y) == (150, 25)
    assert squash.scale_y == pytest.approx(50 / 300)
    expected = math.degrees(math.atan2(10 / 50, 300 / 300))
    assert turn.rotation == pytest.approx(expected - 90)
    assert isinstance(tree.primitive, SweepPrimitive)


def test_sweep_starts_at_twelve_oclock():
    m = aspect_baked_rotation(0.0, 100, 100, 50, 50)
    tree = reproject(_desc(GradientFamily.ANGULAR, m), ShapeEnvelope(100, 100))
    x, y = tree.composed.apply(1, 0)
    assert (x - 50, y - 50) == pytest.approx((0, -1))


@pytest.mark.parametrize(
    "family,transform,size",
    [
        (GradientFamily.LINEAR, rotation(37).then(scaling(80)), (200, 100)),
        (GradientFamily.RADIAL, compose_all(translation(10, 90), rotation(30), scaling(5, 400)), (120, 40)),
        (GradientFamily.RADIAL, AffineTransform(0, 0, 0, 0, 0, 0), (100, 100)),
        (GradientFamily.DIAMOND, scaling(0.5, 2), (64, 64)),
        (GradientFamily.ANGULAR, aspect_baked_rotation(123, 300, 50, 10, 10), (300, 50)),
        (GradientFamily.ANGULAR, aspect_baked_rotation(-45, 20, 400, 0, 400), (20, 400)),
    ],
)
def test_fill_region_covers_shape(family, transform, size):
    width, height = size
    tree = reproject(_desc(family, transform), ShapeEnvelope(width, height))
    inverse = np.linalg.inv(tree.composed.to_array())
    corners = np.array([[0, 0, 1], [width, 0, 1], [width, height, 1], [0, height, 1]], dtype=float)
    local = (inverse @ corners.T).T[:, :2]
    half = tree.region_side / 2
    cx, cy = tree.region_center
    assert np.all(np.abs(local[:, 0] - cx) <= half)
    assert np.all(np.abs(local[:, 1] - cy) <= half)


def test_coverage_factor_has_floor():
    config = ConversionConfig(coverage_factor=1.0)
    tree = reproject(_desc(GradientFamily.LINEAR, scaling(10)), ShapeEnvelope(50, 20), config)
    assert tree.region_side == pytest.approx(4.0 * 50)
