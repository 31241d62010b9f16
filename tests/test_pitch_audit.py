"""Unit tests for PitchAuditor (require music21)."""

from typing import Callable

import pytest

from notemap.mapping_models import NoteEntry
from notemap.note_mapping import NoteMapping, NoteMappingBuilder
from notemap.pitch_audit import PitchAuditor, PitchMismatch

pytest.importorskip("music21")


def _mapping_of(*notes: NoteEntry) -> NoteMapping:
    builder = NoteMappingBuilder()
    for note in notes:
        builder.add_note(note)
    return builder.build()


def test_negative_tolerance_is_rejected() -> None:
    with pytest.raises(ValueError):
        PitchAuditor(tolerance_cents=-1.0)


def test_notated_frequency_of_a4(make_note: Callable[..., NoteEntry]) -> None:
    note = make_note(step="A", octave=4)
    assert PitchAuditor().notated_frequency(note) == pytest.approx(440.0)


def test_notated_frequency_honours_alter(make_note: Callable[..., NoteEntry]) -> None:
    note = make_note(step="B", octave=3, alter=-1)
    assert PitchAuditor().notated_frequency(note) == pytest.approx(233.08, abs=0.01)


def test_matching_frequency_passes(make_note: Callable[..., NoteEntry]) -> None:
    assert PitchAuditor().audit(_mapping_of(make_note())) == []


def test_wrong_octave_is_reported(make_note: Callable[..., NoteEntry]) -> None:
    note = make_note(expected_frequency=523.25)
    mismatches = PitchAuditor().audit(_mapping_of(note))
    assert len(mismatches) == 1
    assert mismatches[0].cents == pytest.approx(1200.0, abs=0.5)
    assert mismatches[0].pitch_name == "C4"


def test_rests_are_skipped(make_note: Callable[..., NoteEntry]) -> None:
    rest = make_note(is_rest=True, step=None, expected_frequency=0.0)
    assert PitchAuditor().audit(_mapping_of(rest)) == []


def test_tolerance_is_respected(make_note: Callable[..., NoteEntry]) -> None:
    # 261.63 Hz vs C#4 (277.18 Hz) is about 100 cents flat.
    note = make_note(alter=1)
    assert len(PitchAuditor(tolerance_cents=50.0).audit(_mapping_of(note))) == 1
    assert PitchAuditor(tolerance_cents=150.0).audit(_mapping_of(note)) == []


def test_pitch_name_spells_accidentals(make_note: Callable[..., NoteEntry]) -> None:
    mismatch = PitchMismatch(note=make_note(step="E", alter=-1), notated_frequency=1.0, cents=0.0)
    assert mismatch.pitch_name == "E-4"
