"""Pasted text → Layer, picking the SVG or CSS adapter."""

from __future__ import annotations

import logging
from typing import Literal

from figvector.adapters.css_layer import parse_css_layer
from figvector.adapters.svg_layer import parse_svg_layer
from figvector.engine.model import Layer

logger = logging.getLogger(__name__)

SourceFormat = Literal["auto", "svg", "css"]

_SVG_NS = "http://www.w3.org/2000/svg"


def detect_format(source: str) -> Literal["svg", "css"]:
    """SVG when the text starts with markup or names the SVG namespace."""
    head = source.lstrip()
    if head.startswith("<") or _SVG_NS in source or "<svg" in source[:512]:
        return "svg"
    return "css"


def parse_source(source: str, source_format: SourceFormat = "auto") -> Layer:
    """Raises ParseError when the chosen adapter cannot build a layer."""
    if source_format == "auto":
        source_format = detect_format(source)
        logger.debug("Detected %s source", source_format)
    if source_format == "svg":
        return parse_svg_layer(source)
    return parse_css_layer(source)
