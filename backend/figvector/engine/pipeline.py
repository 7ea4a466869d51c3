"""Conversion orchestrator — Layer → composed tree → target XML."""

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any, Literal

from figvector.engine.composer import Drawable, compose_document
from figvector.engine.config import ConversionConfig
from figvector.engine.model import Layer
from figvector.svg.shape_emitter import emit_shape
from figvector.svg.vector_emitter import EmitResult, emit_vector

logger = logging.getLogger(__name__)

Target = Literal["vector", "shape"]
TARGETS: tuple[str, ...] = ("vector", "shape")


@dataclass(frozen=True)
class ConversionResult:
    xml: str
    next_id: int
    warnings: tuple[str, ...]
    elapsed_ms: float


class Converter:
    """Runs one layer through composition and emission.

    Holds only its configuration, so one instance can serve any number of
    conversions; the id counter travels in and out of ``run``.
    """

    def __init__(self, config: ConversionConfig | None = None) -> None:
        self.config = config or ConversionConfig()

    def run(self, layer: Layer, target: Target = "vector", next_id: int = 1) -> ConversionResult:
        """Convert ``layer`` to ``target`` XML."""
        start = time.perf_counter()
        result: ConversionResult | None = None
        for progress in self.run_streaming(layer, target, next_id):
            if progress["status"] == "done":
                result = progress["result"]
        if result is None:
            raise RuntimeError("conversion finished without a result")

        logger.info(
            "Converted %r to %s in %.1fms (%d warnings)",
            layer.name, target, (time.perf_counter() - start) * 1000, len(result.warnings),
        )
        return result

    def run_streaming(
        self, layer: Layer, target: Target = "vector", next_id: int = 1,
    ) -> Generator[dict[str, Any], None, None]:
        """Run the conversion, yielding a progress dict per step.

        The final dict has ``status == "done"`` and carries the
        ``ConversionResult`` under ``result``.
        """
        if target not in TARGETS:
            raise ValueError(f"Unknown target {target!r}, expected one of {TARGETS}")

        start = time.perf_counter()
        steps = ["compose", "emit"] if target == "vector" else ["emit"]
        total = len(steps)
        drawable: Drawable | None = None
        emitted: EmitResult | None = None

        for i, step in enumerate(steps):
            yield {"step": step, "index": i, "total": total, "elapsed_ms": 0.0, "status": "running"}
            t0 = time.perf_counter()
            if step == "compose":
                drawable = compose_document(layer, self.config)
            elif target == "vector":
                emitted = emit_vector(drawable, next_id, self.config.decimal_places)
            else:
                emitted = emit_shape(layer, self.config, next_id)
            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)
            logger.debug("  %s completed in %.1fms", step, elapsed_ms)
            yield {"step": step, "index": i, "total": total, "elapsed_ms": elapsed_ms, "status": "ok"}

        if emitted is None:
            raise RuntimeError("emit step produced no output")
        yield {
            "step": "done",
            "index": total,
            "total": total,
            "elapsed_ms": round((time.perf_counter() - start) * 1000, 1),
            "status": "done",
            "result": ConversionResult(
                xml=emitted.xml,
                next_id=emitted.next_id,
                warnings=emitted.warnings,
                elapsed_ms=round((time.perf_counter() - start) * 1000, 1),
            ),
        }


def create_converter(config: ConversionConfig | None = None) -> Converter:
    """Factory function for creating a converter instance."""
    return Converter(config=config)
