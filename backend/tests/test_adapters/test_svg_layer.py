"""Tests for the SVG paste adapter."""

import pytest

from figvector.adapters.base import ParseError
from figvector.adapters.svg_layer import parse_svg_layer
from figvector.engine.model import FillKind, GradientFamily, ShadowKind
from figvector.utils.color import RGBA

from tests.conftest import BUTTON_SVG, PILL_SVG


def test_button_envelope_from_first_shape():
    layer = parse_svg_layer(BUTTON_SVG)
    assert (layer.envelope.width, layer.envelope.height) == (300, 56)
    assert layer.envelope.corner_radii.tl == 12
    assert layer.name == "Imported Shape"


def test_button_linear_is_shape_local():
    layer = parse_svg_layer(BUTTON_SVG)
    assert len(layer.fills) == 1
    desc = layer.fills[0].gradient
    assert desc.family == GradientFamily.LINEAR
    assert desc.source_bounds_offset == (10, 8)
    assert desc.transform.apply(0, 0) == pytest.approx((0.0, 28.0))
    assert desc.transform.apply(1, 0) == pytest.approx((300.0, 28.0))
    assert [s.offset for s in desc.stops] == [0, 100]
    assert desc.stops[0].color == RGBA(255, 0, 0, 1.0)


def test_button_drop_shadow_from_filter_chain():
    shadows = parse_svg_layer(BUTTON_SVG).shadows
    assert len(shadows) == 1
    shadow = shadows[0]
    assert shadow.kind == ShadowKind.DROP
    assert (shadow.dx, shadow.dy, shadow.blur) == (0, 4, 10)
    assert shadow.color.a == pytest.approx(0.25)
    assert shadow.color.is_black


def test_pill_keeps_fill_order_and_radius():
    layer = parse_svg_layer(PILL_SVG)
    assert layer.envelope.width == pytest.approx(200)
    assert layer.envelope.height == pytest.approx(64)
    assert layer.envelope.corner_radii.tl == pytest.approx(16)
    assert [f.kind for f in layer.fills] == [FillKind.SOLID, FillKind.GRADIENT]
    assert layer.fills[0].color == RGBA(0x1E, 0x1E, 0x1E, 1.0)
    assert layer.fills[1].opacity == pytest.approx(0.5)


def test_pill_radial_transform_list():
    desc = parse_svg_layer(PILL_SVG).topmost_fill.gradient
    assert desc.family == GradientFamily.RADIAL
    m = desc.transform
    assert (m.tx, m.ty) == pytest.approx((100, 32))
    assert m.scale_x == pytest.approx(32)
    assert m.scale_y == pytest.approx(100)
    assert m.rotation_degrees == pytest.approx(90)
    assert desc.stops[-1].color.a == 0


def test_pill_inner_shadow():
    shadows = parse_svg_layer(PILL_SVG).shadows
    assert len(shadows) == 1
    shadow = shadows[0]
    assert shadow.kind == ShadowKind.INNER
    assert (shadow.dy, shadow.blur) == (4, 4)
    assert shadow.color == RGBA(255, 255, 255, 0.5)


def test_bounding_box_gradient_and_title():
    svg = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 50">
    <title>Chip</title>
    <rect x="20" y="10" width="60" height="30" fill="url(#g)"/>
    <defs><linearGradient id="g" x1="0" y1="0" x2="0" y2="1">
      <stop offset="0%" stop-color="red"/><stop offset="100%" stop-color="blue"/>
    </linearGradient></defs>
    </svg>'''
    layer = parse_svg_layer(svg)
    assert layer.name == "Chip"
    m = layer.fills[0].gradient.transform
    assert m.apply(0, 0) == pytest.approx((0, 0))
    assert m.apply(1, 0) == pytest.approx((0, 30))


def test_bad_gradient_transform_falls_back_to_geometry():
    svg = '''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
    <rect width="100" height="100" fill="url(#g)"/>
    <radialGradient id="g" cx="50" cy="50" r="25" gradientUnits="userSpaceOnUse"
        gradientTransform="skewX(30)">
      <stop stop-color="#fff"/><stop offset="1" stop-color="#000"/>
    </radialGradient>
    </svg>'''
    layer = parse_svg_layer(svg)
    m = layer.fills[0].gradient.transform
    assert (m.tx, m.ty, m.a, m.d) == pytest.approx((50, 50, 25, 25))
    assert any("skewx" in note.lower() for note in layer.notes)


def test_fe_drop_shadow():
    svg = '''<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">
    <filter id="f"><feDropShadow dx="1" dy="3" stdDeviation="2" flood-color="#FF0000" flood-opacity="0.5"/></filter>
    <rect width="10" height="10" fill="black" filter="url(#f)"/>
    </svg>'''
    (shadow,) = parse_svg_layer(svg).shadows
    assert (shadow.dx, shadow.dy, shadow.blur) == (1, 3, 4)
    assert shadow.color == RGBA(255, 0, 0, 0.5)


@pytest.mark.parametrize(
    "svg",
    [
        "<svg",
        '<g xmlns="http://www.w3.org/2000/svg"/>',
        '<svg xmlns="http://www.w3.org/2000/svg"><rect width="1" height="1" fill="none"/></svg>',
    ],
)
def test_unusable_svg_raises(svg):
    with pytest.raises(ParseError):
        parse_svg_layer(svg)
