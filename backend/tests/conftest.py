"""Shared test fixtures."""

from __future__ import annotations

import pytest

from figvector.engine.model import (
    ColorStop,
    Fill,
    FillKind,
    GradientDescriptor,
    GradientFamily,
    Layer,
    ShapeEnvelope,
)
from figvector.utils.affine import IDENTITY, AffineTransform
from figvector.utils.color import RGBA


# Design-tool exports as they arrive from a paste

BUTTON_SVG = '''<svg width="320" height="80" viewBox="0 0 320 80" fill="none" xmlns="http://www.w3.org/2000/svg">
<g filter="url(#filter0_d)">
<rect x="10" y="8" width="300" height="56" rx="12" fill="url(#paint0_linear)"/>
</g>
<defs>
<filter id="filter0_d" x="0" y="0" width="320" height="80" filterUnits="userSpaceOnUse" color-interpolation-filters="sRGB">
<feFlood flood-opacity="0" result="BackgroundImageFix"/>
<feColorMatrix in="SourceAlpha" type="matrix" values="0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 127 0" result="hardAlpha"/>
<feOffset dy="4"/>
<feGaussianBlur stdDeviation="5"/>
<feComposite in2="hardAlpha" operator="out"/>
<feColorMatrix type="matrix" values="0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0.25 0"/>
<feBlend mode="normal" in2="BackgroundImageFix" result="effect1_dropShadow"/>
<feBlend mode="normal" in="SourceGraphic" in2="effect1_dropShadow" result="shape"/>
</filter>
<linearGradient id="paint0_linear" x1="10" y1="36" x2="310" y2="36" gradientUnits="userSpaceOnUse">
<stop stop-color="#FF0000"/>
<stop offset="1" stop-color="#0000FF"/>
</linearGradient>
</defs>
</svg>'''

PILL_SVG = '''<svg width="200" height="64" viewBox="0 0 200 64" fill="none" xmlns="http://www.w3.org/2000/svg">
<g filter="url(#filter0_i)">
<path d="M16 0H184C192.837 0 200 7.16344 200 16V48C200 56.8366 192.837 64 184 64H16C7.16344 64 0 56.8366 0 48V16C0 7.16344 7.16344 0 16 0Z" fill="#1E1E1E"/>
<path d="M16 0H184C192.837 0 200 7.16344 200 16V48C200 56.8366 192.837 64 184 64H16C7.16344 64 0 56.8366 0 48V16C0 7.16344 7.16344 0 16 0Z" fill="url(#paint0_radial)" fill-opacity="0.5"/>
</g>
<defs>
<filter id="filter0_i" x="0" y="0" width="200" height="68" filterUnits="userSpaceOnUse" color-interpolation-filters="sRGB">
<feFlood flood-opacity="0" result="BackgroundImageFix"/>
<feBlend mode="normal" in="SourceGraphic" in2="BackgroundImageFix" result="shape"/>
<feColorMatrix in="SourceAlpha" type="matrix" values="0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0 127 0" result="hardAlpha"/>
<feOffset dy="4"/>
<feGaussianBlur stdDeviation="2"/>
<feComposite in2="hardAlpha" operator="arithmetic" k2="-1" k3="1"/>
<feColorMatrix type="matrix" values="0 0 0 0 1 0 0 0 0 1 0 0 0 0 1 0 0 0 0.5 0"/>
<feBlend mode="normal" in2="shape" result="effect1_innerShadow"/>
</filter>
<radialGradient id="paint0_radial" cx="0" cy="0" r="1" gradientUnits="userSpaceOnUse" gradientTransform="translate(100 32) rotate(90) scale(32 100)">
<stop stop-color="white"/>
<stop offset="1" stop-color="white" stop-opacity="0"/>
</radialGradient>
</defs>
</svg>'''

CARD_CSS = '''.card {
  width: 200px;
  height: 100px;
  border-radius: 8px;
  background: linear-gradient(90deg, #FF0000 0%, #0000FF 100%);
  box-shadow: 0px 4px 4px rgba(0, 0, 0, 0.25), inset 0 2px 0 #FFFFFF;
}'''

LAYERED_CSS = '''width: 120px;
height: 40px;
border-radius: 4px 8px;
opacity: 0.8;
background: linear-gradient(180deg, rgba(255, 255, 255, 0.2) 0%, rgba(255, 255, 255, 0) 100%), #3366FF;'''

STRUCTURED_LAYER = {
    "name": "Badge",
    "width": 300,
    "height": 50,
    "cornerRadius": 25,
    "fills": [
        {
            "type": "SOLID",
            "color": {"r": 0.2, "g": 0.4, "b": 1.0, "a": 1.0},
        },
        {
            "type": "GRADIENT_ANGULAR",
            "transform": {"a": 300, "b": 10, "c": -10, "d": 50, "tx": 150, "ty": 25},
            "stops": [
                {"r": 1, "g": 0, "b": 0, "a": 1, "position": 0},
                {"r": 0, "g": 1, "b": 0, "a": 1, "position": 0.5},
                {"r": 0, "g": 0, "b": 1, "a": 1, "position": 1},
            ],
        },
    ],
    "effects": [
        {
            "type": "DROP_SHADOW",
            "offset": {"x": 0, "y": 2},
            "radius": 4,
            "color": {"r": 0, "g": 0, "b": 0, "a": 0.3},
        },
    ],
}

RED = RGBA(255, 0, 0, 1.0)
BLUE = RGBA(0, 0, 255, 1.0)
RED_TO_BLUE = (ColorStop(RED, 0.0), ColorStop(BLUE, 100.0))


def gradient_layer(
    family: GradientFamily = GradientFamily.LINEAR,
    transform: AffineTransform = IDENTITY,
    stops: tuple[ColorStop, ...] = RED_TO_BLUE,
    width: float = 100.0,
    height: float = 100.0,
) -> Layer:
    """One-fill layer around a single gradient."""
    descriptor = GradientDescriptor(family=family, stops=stops, transform=transform)
    return Layer(
        envelope=ShapeEnvelope(width, height),
        fills=(Fill(FillKind.GRADIENT, descriptor),),
        name="Gradient",
    )


@pytest.fixture
def button_svg() -> str:
    return BUTTON_SVG


@pytest.fixture
def card_css() -> str:
    return CARD_CSS


@pytest.fixture
def structured_layer() -> dict:
    return STRUCTURED_LAYER
