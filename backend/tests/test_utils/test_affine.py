"""Tests for affine matrix algebra."""

import math

import numpy as np
import pytest

from figvector.utils.affine import (
    IDENTITY,
    AffineTransform,
    apply_to_points,
    aspect_baked_rotation,
    compose,
    compose_all,
    decompose,
    normalize_degrees,
    normalized_rotation,
    rotation,
    scaling,
    translation,
)


@pytest.mark.parametrize("theta", [0, 45, 90, 135, 180, 225, 270, 315])
def test_rotation_round_trip(theta):
    dec = decompose(rotation(theta))
    diff = (normalize_degrees(dec.rotation) - theta + 180.0) % 360.0 - 180.0
    assert abs(diff) < 1e-9
    assert dec.scale_x == pytest.approx(1.0)
    assert dec.scale_y == pytest.approx(1.0)


def test_compose_applies_right_operand_first():
    # translate(10 0) rotate(90): rotate the point, then translate it
    m = compose(translation(10, 0), rotation(90))
    x, y = m.apply(1, 0)
    assert x == pytest.approx(10.0)
    assert y == pytest.approx(1.0)


def test_compose_all_matches_nested_compose():
    t, r, s = translation(5, -3), rotation(30), scaling(2, 0.5)
    a = compose_all(t, r, s)
    b = compose(compose(t, r), s)
    assert np.allclose(a.to_array(), b.to_array())


def test_then_is_post_multiplication():
    m = translation(1, 2).then(scaling(3))
    assert m.apply(1, 1) == pytest.approx((4.0, 5.0))


def test_scales_never_negative():
    dec = decompose(AffineTransform(-2, 0, 0, -3, 0, 0))
    assert dec.scale_x == pytest.approx(2.0)
    assert dec.scale_y == pytest.approx(3.0)
    assert abs(dec.rotation) == pytest.approx(180.0)


def test_zero_matrix_decomposes_without_error():
    dec = decompose(AffineTransform(0, 0, 0, 0, 4, 5))
    assert dec.scale_x == 0.0
    assert dec.scale_y == 0.0
    assert math.isfinite(dec.rotation)
    assert (dec.tx, dec.ty) == (4, 5)


def test_rotation_about_center_keeps_center_fixed():
    m = rotation(90, 50, 50)
    assert m.apply(50, 50) == pytest.approx((50.0, 50.0))
    assert m.apply(100, 50) == pytest.approx((50.0, 100.0))


def test_translated_adds_to_translation_only():
    m = AffineTransform(2, 0, 0, 2, 10, 20).translated(-10, -5)
    assert (m.a, m.d, m.tx, m.ty) == (2, 2, 0, 15)


def test_apply_to_points():
    pts = apply_to_points(translation(1, 1), np.array([[0.0, 0.0], [2.0, 3.0]]))
    assert pts.tolist() == [[1.0, 1.0], [3.0, 4.0]]
    assert apply_to_points(IDENTITY, np.empty((0, 2))).shape == (0, 2)


def test_normalize_degrees():
    assert normalize_degrees(-90) == pytest.approx(270.0)
    assert normalize_degrees(720) == 0.0
    assert 0.0 <= normalize_degrees(-1e-18) < 360.0


def test_normalized_rotation_divides_out_aspect():
    m = AffineTransform(300, 10, 0, 0, 0, 0)
    angle = normalized_rotation(m, 300, 50)
    assert angle == pytest.approx(math.degrees(math.atan2(10 / 50, 300 / 300)))
    assert angle != pytest.approx(math.degrees(math.atan2(10, 300)))


def test_aspect_baked_rotation_round_trips():
    m = aspect_baked_rotation(33.0, 300, 50, 150, 25)
    assert normalized_rotation(m, 300, 50) == pytest.approx(33.0)
    assert (m.tx, m.ty) == (150, 25)


def test_is_finite():
    assert IDENTITY.is_finite()
    assert not AffineTransform(float("nan")).is_finite()
