"""POST /api/convert — pasted layer → drawable XML."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException

from figvector.adapters.base import ParseError
from figvector.adapters.paste import parse_source
from figvector.adapters.structured_layer import parse_structured_layer
from figvector.dependencies import get_converter
from figvector.engine.model import Layer
from figvector.engine.pipeline import Converter
from figvector.models.requests import ConvertRequest, StructuredConvertRequest
from figvector.models.responses import ConvertResponse

router = APIRouter()


def _convert(layer: Layer, converter: Converter, target: str, next_id: int, start: float) -> ConvertResponse:
    result = converter.run(layer, target=target, next_id=next_id)
    elapsed = (time.perf_counter() - start) * 1000
    return ConvertResponse(
        xml=result.xml,
        next_id=result.next_id,
        warnings=list(result.warnings),
        layer_name=layer.name,
        processing_time_ms=round(elapsed, 1),
    )


@router.post("/convert", response_model=ConvertResponse)
async def convert(req: ConvertRequest, converter: Converter = Depends(get_converter)) -> ConvertResponse:
    start = time.perf_counter()
    try:
        layer = parse_source(req.source, req.format)
    except ParseError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _convert(layer, converter, req.target, req.next_id, start)


@router.post("/convert/structured", response_model=ConvertResponse)
async def convert_structured(
    req: StructuredConvertRequest, converter: Converter = Depends(get_converter),
) -> ConvertResponse:
    start = time.perf_counter()
    try:
        layer = parse_structured_layer(req)
    except ParseError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return _convert(layer, converter, req.target, req.next_id, start)
