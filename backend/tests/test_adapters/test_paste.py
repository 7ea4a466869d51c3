"""Tests for pasted-text format detection."""

import pytest

from figvector.adapters.paste import detect_format, parse_source

from tests.conftest import BUTTON_SVG, CARD_CSS


@pytest.mark.parametrize(
    "text,expected",
    [
        (BUTTON_SVG, "svg"),
        ("  <?xml version='1.0'?><svg/>", "svg"),
        (CARD_CSS, "css"),
        ("width: 10px; height: 10px;", "css"),
    ],
)
def test_detect_format(text, expected):
    assert detect_format(text) == expected


def test_auto_parses_either_kind():
    assert parse_source(BUTTON_SVG).envelope.width == 300
    assert parse_source(CARD_CSS).envelope.width == 200


def test_explicit_format_wins():
    assert parse_source(CARD_CSS, "css").name == "CSS Layer"
