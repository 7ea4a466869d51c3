"""Tests for document composition."""

import pytest

from figvector.adapters.css_layer import parse_css_layer
from figvector.adapters.svg_layer import parse_svg_layer
from figvector.engine.composer import GradientPaint, GroupNode, PathNode, compose_document
from figvector.engine.config import ConversionConfig
from figvector.engine.model import (
    ColorStop,
    Fill,
    FillKind,
    GradientFamily,
    Layer,
    Shadow,
    ShadowKind,
    ShapeEnvelope,
)
from figvector.utils.affine import aspect_baked_rotation
from figvector.utils.color import RGBA

from tests.conftest import BUTTON_SVG, PILL_SVG, RED, gradient_layer


def _clip_group(drawable) -> GroupNode:
    groups = [c for c in drawable.children if isinstance(c, GroupNode) and c.clip_path]
    assert len(groups) == 1
    return groups[0]


def test_drop_shadow_paints_below_clip_group():
    drawable = compose_document(parse_svg_layer(BUTTON_SVG))
    shadow, clip = drawable.children
    assert isinstance(shadow, PathNode)
    assert shadow.paint == RGBA(0, 0, 0, 0.25)
    assert shadow.fill_alpha == pytest.approx(ConversionConfig().shadow_blur_alpha)
    assert shadow.path_data.startswith("M12,4 ")
    assert clip.clip_path.startswith("M12,0 H288 A12,12")


def test_drop_shadow_expands_viewport():
    drawable = compose_document(parse_svg_layer(BUTTON_SVG))
    assert drawable.inset == (0, 0, 0, 4)


def test_linear_fill_needs_no_containers():
    clip = _clip_group(compose_document(parse_svg_layer(BUTTON_SVG)))
    (fill,) = clip.children
    assert isinstance(fill, PathNode)
    assert isinstance(fill.paint, GradientPaint)
    assert fill.paint.kind == "linear"


def test_fill_order_then_inner_shadow():
    clip = _clip_group(compose_document(parse_svg_layer(PILL_SVG)))
    solid, radial, inner = clip.children
    assert isinstance(solid, PathNode) and solid.paint == RGBA(0x1E, 0x1E, 0x1E, 1.0)
    assert isinstance(radial, GroupNode) and radial.container is not None
    leaf = radial.children[0].children[0].children[0]
    assert leaf.paint.kind == "radial"
    # Fill opacity folded into the stop alphas
    assert leaf.paint.stops[0].color.a == pytest.approx(0.5)
    assert inner.even_odd
    assert inner.paint == RGBA(255, 255, 255, 0.5)


def test_inner_shadow_hole_is_offset():
    layer = Layer(
        envelope=ShapeEnvelope(100, 50),
        fills=(Fill(FillKind.SOLID, RED),),
        shadows=(Shadow(ShadowKind.INNER, dx=2, dy=3, spread=1),),
    )
    inner = _clip_group(compose_document(layer)).children[-1]
    frame, hole = inner.path_data.split(" M")
    assert frame.startswith("M-105,-105")
    assert hole.startswith("3,4 ")
    assert inner.fill_alpha == 1.0


def test_degenerate_envelope_skips_clip():
    layer = Layer(envelope=ShapeEnvelope(0, 40), fills=(Fill(FillKind.SOLID, RED),))
    drawable = compose_document(layer)
    (group,) = drawable.children
    assert group.clip_path is None


def test_hidden_fills_and_shadows_skipped():
    layer = Layer(
        envelope=ShapeEnvelope(10, 10),
        fills=(Fill(FillKind.SOLID, RED), Fill(FillKind.SOLID, RED, visible=False)),
        shadows=(Shadow(ShadowKind.DROP, dy=2, visible=False),),
    )
    drawable = compose_document(layer)
    (clip,) = drawable.children
    assert len(clip.children) == 1
    assert drawable.inset == (0, 0, 0, 0)


def test_layer_opacity_on_root():
    drawable = compose_document(parse_css_layer("width: 10px; height: 10px; opacity: 0.5; background: red"))
    assert drawable.alpha == 0.5


def test_sweep_stop_limit_reduces_to_endpoints():
    stops = (
        ColorStop(RED, 0),
        ColorStop(RGBA(0, 255, 0, 1.0), 50),
        ColorStop(RGBA(0, 0, 255, 1.0), 100),
    )
    layer = gradient_layer(GradientFamily.ANGULAR, aspect_baked_rotation(0, 100, 100, 50, 50), stops)
    drawable = compose_document(layer, ConversionConfig(sweep_max_stops=2))
    sweep = _clip_group(drawable).children[0]
    leaf = sweep.children[0].children[0].children[0]
    assert leaf.paint.kind == "sweep"
    assert [s.offset for s in leaf.paint.stops] == [0, 100]
    assert any("angular" in w for w in drawable.warnings)


def test_blur_layers_make_concentric_copies():
    layer = Layer(
        envelope=ShapeEnvelope(20, 20),
        shadows=(Shadow(ShadowKind.DROP, blur=8),),
    )
    drawable = compose_document(layer, ConversionConfig(shadow_blur_layers=3))
    copies = [c for c in drawable.children if isinstance(c, PathNode)]
    assert len(copies) == 3
    assert copies[0].path_data.startswith("M-4,-4")
    assert copies[-1].path_data.startswith("M0,0")
    assert drawable.inset == (4, 4, 4, 4)


def test_square_shape_shadow_keeps_square_corners():
    layer = Layer(envelope=ShapeEnvelope(20, 20), shadows=(Shadow(ShadowKind.DROP, blur=8),))
    drawable = compose_document(layer, ConversionConfig(shadow_blur_layers=3))
    copies = [c for c in drawable.children if isinstance(c, PathNode)]
    assert copies
    assert all(" A" not in c.path_data for c in copies)


def test_gradient_fill_without_descriptor_raises():
    layer = Layer(envelope=ShapeEnvelope(10, 10), fills=(Fill(FillKind.GRADIENT, None),))
    with pytest.raises(ValueError, match="carries no gradient"):
        compose_document(layer)
