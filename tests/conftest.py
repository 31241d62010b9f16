"""Shared sample records for the note mapping tests."""

from dataclasses import replace
from typing import Any, Callable

import pytest

from notemap.mapping_models import (
    Bounds,
    KeySignatureInfo,
    MeasureInfo,
    NoteEntry,
    Point,
    SheetInfo,
    StaffInfo,
    SystemInfo,
    TempoInfo,
    TimeSignatureInfo,
)
from notemap.note_mapping import NoteMappingBuilder


def _middle_c() -> NoteEntry:
    return NoteEntry(
        0, 0, "P1", "1", 1, "1", 0, 1, 0,
        False, False, False, False, False,
        "C", 4, 0, 60, 60, 261.63,
        "quarter", 0, 1, None,
        0, 480, 0.0, 1.0, 480, 1.0,
        Bounds(15, 30, 20, 40), Point(25, 50), Bounds(15, 30, 20, 40), 20, 80,
    )


@pytest.fixture
def make_note() -> Callable[..., NoteEntry]:
    """Factory for notes derived from a quarter-note middle C."""

    def _make(**overrides: Any) -> NoteEntry:
        return replace(_middle_c(), **overrides)

    return _make


@pytest.fixture
def scenario_builder() -> NoteMappingBuilder:
    """One sheet, one system, one 4/4 measure and one middle C."""
    builder = NoteMappingBuilder()
    builder.set_divisions(480)
    builder.add_sheet(SheetInfo(1, 2000, 3000))
    builder.add_system(SystemInfo(0, 1, bounds=Bounds(10, 10, 500, 200)))
    builder.add_measure(
        MeasureInfo(
            "P1", "1", 1, 0, 0, 0.0, 1920, 4.0,
            bounds=Bounds(10, 10, 500, 200),
            staves=[StaffInfo(0, 20, 80)],
        )
    )
    builder.add_tempo(TempoInfo("P1", "1", 0, 60.0, "quarter"))
    builder.add_time_signature(TimeSignatureInfo("P1", "1", 4, 4))
    builder.add_key_signature(KeySignatureInfo("P1", "1", 0, None))
    builder.add_note(_middle_c())
    return builder
