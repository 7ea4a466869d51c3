"""
figvector command line — convert pasted layer files to Android drawables.

Usage:
  figvector button.svg                         # prints VectorDrawable XML
  figvector button.css -o button.xml           # saves it
  figvector card.svg --target shape            # three-stop shape drawable
  figvector exports/ -o res/drawable/          # batch: one shared id counter
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from figvector.adapters.base import ParseError
from figvector.adapters.paste import parse_source
from figvector.adapters.structured_layer import parse_structured_layer
from figvector.config import settings
from figvector.engine.config import ConversionConfig
from figvector.engine.model import Layer
from figvector.engine.pipeline import TARGETS, ConversionResult, create_converter

logger = logging.getLogger(__name__)

INPUT_EXTENSIONS = (".svg", ".css", ".json")


def load_layer(path: str) -> Layer:
    """Read one input file. Raises ParseError for unusable content."""
    with open(path, encoding="utf-8") as f:
        text = f.read()
    if path.lower().endswith(".json"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError("structured-layer", f"invalid JSON: {e}") from e
        return parse_structured_layer(data)
    fmt = "css" if path.lower().endswith(".css") else "auto"
    return parse_source(text, fmt)


def _output_name(path: str) -> str:
    stem = os.path.splitext(os.path.basename(path))[0]
    # Android resource names: lowercase, digits, underscores
    cleaned = "".join(ch if ch.isalnum() else "_" for ch in stem.lower())
    return f"{cleaned or 'drawable'}.xml"


def convert_file(path: str, target: str, next_id: int, config: ConversionConfig) -> ConversionResult:
    layer = load_layer(path)
    return create_converter(config).run(layer, target=target, next_id=next_id)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="figvector — design layers to Android drawables")
    parser.add_argument("input", help="SVG/CSS/JSON file or folder of them")
    parser.add_argument("-o", "--output", help="Output file or folder")
    parser.add_argument("-t", "--target", choices=TARGETS, default="vector")
    parser.add_argument("--next-id", type=int, default=1, help="First generated element id")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.figvector_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = ConversionConfig.from_settings(settings)

    if os.path.isdir(args.input):
        files = sorted(f for f in os.listdir(args.input) if f.lower().endswith(INPUT_EXTENSIONS))
        if not files:
            print("No .svg, .css or .json files found in folder.", file=sys.stderr)
            return 1
        out_dir = args.output or args.input
        os.makedirs(out_dir, exist_ok=True)
        next_id = args.next_id
        failures = 0
        for name in files:
            path = os.path.join(args.input, name)
            try:
                result = convert_file(path, args.target, next_id, config)
            except ParseError as e:
                print(f"  FAILED {name}: {e}", file=sys.stderr)
                failures += 1
                continue
            next_id = result.next_id
            out_path = os.path.join(out_dir, _output_name(name))
            with open(out_path, "w", encoding="utf-8") as f:
                f.write(result.xml)
            print(f"  {name} -> {out_path} ({len(result.warnings)} warnings)")
        print(f"\nDone: {len(files) - failures}/{len(files)} converted.")
        return 1 if failures else 0

    try:
        result = convert_file(args.input, args.target, args.next_id, config)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result.xml)
        print(f"Saved: {args.output}")
    else:
        sys.stdout.write(result.xml)
    return 0


if __name__ == "__main__":
    sys.exit(main())
