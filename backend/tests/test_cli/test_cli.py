"""Tests for the command line converter."""

from __future__ import annotations

import json

from figvector.cli import _output_name, main
from tests.conftest import BUTTON_SVG, CARD_CSS, STRUCTURED_LAYER


def test_single_file_to_stdout(tmp_path, capsys):
    src = tmp_path / "button.svg"
    src.write_text(BUTTON_SVG, encoding="utf-8")
    assert main([str(src)]) == 0
    out = capsys.readouterr().out
    assert out.startswith('<?xml version="1.0" encoding="utf-8"?>\n<vector')


def test_single_file_shape_target(tmp_path):
    src = tmp_path / "card.css"
    src.write_text(CARD_CSS, encoding="utf-8")
    dest = tmp_path / "card.xml"
    assert main([str(src), "-o", str(dest), "--target", "shape"]) == 0
    assert "<shape" in dest.read_text(encoding="utf-8")


def test_folder_shares_id_counter(tmp_path):
    (tmp_path / "a.css").write_text(CARD_CSS, encoding="utf-8")
    (tmp_path / "b.json").write_text(json.dumps(STRUCTURED_LAYER), encoding="utf-8")
    out_dir = tmp_path / "out"
    assert main([str(tmp_path), "-o", str(out_dir), "--next-id", "100"]) == 0
    first = (out_dir / "a.xml").read_text(encoding="utf-8")
    second = (out_dir / "b.xml").read_text(encoding="utf-8")
    assert 'android:name="path_100"' in first
    assert 'android:name="path_100"' not in second


def test_bad_file_returns_error(tmp_path, capsys):
    src = tmp_path / "broken.json"
    src.write_text("{not json", encoding="utf-8")
    assert main([str(src)]) == 1
    assert "invalid JSON" in capsys.readouterr().err


def test_empty_folder(tmp_path):
    assert main([str(tmp_path)]) == 1


def test_output_name():
    assert _output_name("exports/Primary Button.svg") == "primary_button.xml"
