"""Unit tests for MappingExporter."""

import json
from pathlib import Path
from typing import Callable

import pytest

from notemap.mapping_exporter import MappingExporter
from notemap.mapping_models import NoteEntry, SheetInfo
from notemap.mapping_renderers import CompactJsonRenderer, PrettyJsonRenderer
from notemap.note_mapping import NoteMappingBuilder


def test_default_format_is_pretty_json() -> None:
    exporter = MappingExporter()
    assert exporter.output_format == "json"
    assert isinstance(exporter.renderer, PrettyJsonRenderer)


def test_compact_format_selects_compact_renderer() -> None:
    assert isinstance(MappingExporter(" JSON-Compact ").renderer, CompactJsonRenderer)


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported output format 'xml'"):
        MappingExporter("xml")


def test_export_writes_document(tmp_path: Path, scenario_builder: NoteMappingBuilder) -> None:
    out = tmp_path / "score.json"
    written = MappingExporter().export(scenario_builder.build(), out)
    assert written
    assert json.loads(out.read_text(encoding="utf-8"))["divisions"] == 480


def test_export_writes_compact_document(
    tmp_path: Path,
    scenario_builder: NoteMappingBuilder,
) -> None:
    out = tmp_path / "score.json"
    MappingExporter("json-compact").export(scenario_builder.build(), out)
    assert "\n" not in out.read_text(encoding="utf-8")


def test_export_skips_empty_mapping(tmp_path: Path) -> None:
    builder = NoteMappingBuilder()
    builder.add_sheet(SheetInfo(1, 2000, 3000))
    out = tmp_path / "blank.json"
    assert not MappingExporter().export(builder.build(), out)
    assert not out.exists()


def test_export_raises_on_unwritable_path(
    tmp_path: Path,
    scenario_builder: NoteMappingBuilder,
) -> None:
    with pytest.raises(OSError):
        MappingExporter().export(scenario_builder.build(), tmp_path / "missing" / "x.json")


def test_export_leaves_no_file_when_encoding_fails(
    tmp_path: Path,
    scenario_builder: NoteMappingBuilder,
    make_note: Callable[..., NoteEntry],
) -> None:
    scenario_builder.add_note(make_note(global_note_index=1, voice="\udc80"))
    out = tmp_path / "score.json"
    with pytest.raises(UnicodeEncodeError):
        MappingExporter().export(scenario_builder.build(), out)
    assert not out.exists()
