"""figvector conversion engine — layer model, gradient re-projection, composition."""

from figvector.engine.config import ConversionConfig
from figvector.engine.model import GradientDescriptor, GradientFamily, Layer
from figvector.engine.reprojection import GradientTree, reproject
from figvector.engine.composer import Drawable, compose_document
from figvector.engine.pipeline import ConversionResult, Converter, create_converter

__all__ = [
    "ConversionConfig",
    "GradientDescriptor",
    "GradientFamily",
    "Layer",
    "GradientTree",
    "reproject",
    "Drawable",
    "compose_document",
    "ConversionResult",
    "Converter",
    "create_converter",
]
