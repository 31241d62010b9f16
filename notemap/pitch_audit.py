"""PitchAuditor: cross-checks expected note frequencies against notated pitch."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

from notemap.mapping_models import NoteEntry
from notemap.note_mapping import NoteMapping

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_CENTS = 50.0  # a quarter tone
CENTS_PER_OCTAVE = 1200


@dataclass(frozen=True)
class PitchMismatch:
    """
    A note whose expected frequency disagrees with its spelled pitch.

    Attributes:
        note:              The offending note entry.
        notated_frequency: Equal-tempered frequency of step/octave/alter (Hz).
        cents:             Signed distance from notated to expected frequency.
    """

    note: NoteEntry
    notated_frequency: float
    cents: float

    @property
    def pitch_name(self) -> str:
        """Spelled pitch, e.g. 'C#4' or 'B-3'."""
        accidental = "#" * self.note.alter if self.note.alter > 0 else "-" * -self.note.alter
        return f"{self.note.step}{accidental}{self.note.octave}"


class PitchAuditor:
    """
    Compare each note's ``expected_frequency`` with the frequency music21
    derives from its ``step``, ``octave`` and ``alter``.

    Rests, unpitched notes and notes without an expected frequency are
    skipped. Anything further apart than *tolerance_cents* is reported; a
    singing assessment fed from such a note would score against the wrong
    target.
    """

    def __init__(self, tolerance_cents: float = DEFAULT_TOLERANCE_CENTS) -> None:
        """
        Args:
            tolerance_cents: Largest accepted deviation, in cents.
        """
        if tolerance_cents < 0:
            raise ValueError(f"tolerance_cents must be non-negative, got {tolerance_cents}.")
        self.tolerance_cents = tolerance_cents

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_pitch(self, note: NoteEntry) -> Any:
        from music21 import pitch

        result = pitch.Pitch()
        result.step = str(note.step).upper()
        result.octave = note.octave
        if note.alter:
            result.accidental = pitch.Accidental(note.alter)
        return result

    def _is_pitched(self, note: NoteEntry) -> bool:
        return not note.is_rest and bool(note.step) and note.expected_frequency > 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def notated_frequency(self, note: NoteEntry) -> float:
        """Equal-tempered frequency (A4 = 440 Hz) of the note's spelled pitch."""
        return float(self._build_pitch(note).frequency)

    def audit(self, mapping: NoteMapping) -> list[PitchMismatch]:
        """
        Return every pitched note whose expected frequency is out of tolerance.

        Raises:
            ValueError: If a note's step cannot be read as a pitch name.
        """
        mismatches: list[PitchMismatch] = []
        for note in mapping.notes:
            if not self._is_pitched(note):
                continue

            try:
                notated = self.notated_frequency(note)
            except Exception as exc:  # music21 raises its own exception types
                raise ValueError(
                    f"Note {note.global_note_index}: cannot read pitch "
                    f"step={note.step!r} octave={note.octave} alter={note.alter}: {exc}"
                ) from exc

            cents = CENTS_PER_OCTAVE * math.log2(note.expected_frequency / notated)
            if abs(cents) > self.tolerance_cents:
                mismatch = PitchMismatch(note=note, notated_frequency=notated, cents=cents)
                logger.warning(
                    "Note %d (%s): expected %.2f Hz, notated %.2f Hz (%+.1f cents)",
                    note.global_note_index,
                    mismatch.pitch_name,
                    note.expected_frequency,
                    notated,
                    cents,
                )
                mismatches.append(mismatch)

        logger.debug("Pitch audit checked %d note(s)", len(mapping.notes))
        return mismatches
