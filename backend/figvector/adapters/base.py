"""Adapter interface — every gradient source produces a GradientDescriptor or a ParseError.

Adapters fail soft: ``parse`` returns the error instead of raising it, and
``parse_with_fallback`` walks a chain of attempts before settling on an
identity-transform default. One bad gradient never aborts a conversion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from figvector.engine.model import ColorStop, GradientDescriptor, GradientFamily
from figvector.utils.affine import IDENTITY

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Malformed adapter input."""

    def __init__(self, adapter: str, reason: str) -> None:
        super().__init__(f"{adapter}: {reason}")
        self.adapter = adapter
        self.reason = reason


class GradientAdapter(Protocol):
    name: str

    def parse(self, raw: Any) -> GradientDescriptor | ParseError: ...


@dataclass(frozen=True)
class FallbackResult:
    descriptor: GradientDescriptor
    errors: tuple[ParseError, ...] = ()
    used_default: bool = False


def parse_with_fallback(
    attempts: Sequence[tuple[GradientAdapter, Any]],
    family: GradientFamily = GradientFamily.LINEAR,
    stops: Sequence[ColorStop] = (),
) -> FallbackResult:
    """Try each (adapter, raw) pair in order; the first descriptor wins.

    When every attempt fails the result is an identity-transform descriptor
    of ``family`` carrying whatever ``stops`` the caller could salvage.
    """
    errors: list[ParseError] = []
    for adapter, raw in attempts:
        result = adapter.parse(raw)
        if isinstance(result, GradientDescriptor):
            if errors:
                logger.info("Adapter %s succeeded after %d failure(s)", adapter.name, len(errors))
            return FallbackResult(result, tuple(errors))
        logger.warning("Adapter %s failed: %s", adapter.name, result.reason)
        errors.append(result)

    logger.warning("All adapters failed, using identity %s gradient", family.value)
    return FallbackResult(
        GradientDescriptor(family=family, stops=tuple(stops), transform=IDENTITY),
        tuple(errors),
        used_default=True,
    )
