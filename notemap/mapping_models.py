"""Data models for note-to-pixel mapping records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

DEFAULT_MODE = "major"


@dataclass(frozen=True)
class Bounds:
    """A pixel rectangle on a sheet image."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Bounds extent must be non-negative, got width={self.width}, height={self.height}."
            )


@dataclass(frozen=True)
class Point:
    """A pixel location on a sheet image."""

    x: int
    y: int


@dataclass(frozen=True)
class SheetInfo:
    """One scanned page and its source image size."""

    sheet_number: int
    image_width: int
    image_height: int

    def __post_init__(self) -> None:
        if self.image_width < 0 or self.image_height < 0:
            raise ValueError(
                f"Sheet {self.sheet_number} image size must be non-negative, "
                f"got {self.image_width}x{self.image_height}."
            )


@dataclass(frozen=True)
class SystemInfo:
    """A system (one line of music across all parts) located on a sheet."""

    system_index: int
    sheet_number: int
    bounds: Bounds


@dataclass(frozen=True)
class StaffInfo:
    """Vertical extent of one staff inside a measure."""

    staff_index: int
    top_y: int
    bottom_y: int


@dataclass(frozen=True)
class MeasureInfo:
    """
    One measure of one part, with its timing and location.

    Timing is given twice: in divisions and in playback seconds.
    """

    part_id: str
    measure_number: str
    sheet_number: int
    system_index: int
    cumulative_time_offset: int
    cumulative_time_seconds: float
    measure_duration: int
    measure_duration_seconds: float
    bounds: Bounds
    staves: Sequence[StaffInfo] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "staves", tuple(self.staves))


@dataclass(frozen=True)
class TempoInfo:
    """A tempo mark at a (part, measure) location."""

    part_id: str
    measure_number: str
    time_offset: int
    bpm: float
    beat_unit: str


@dataclass(frozen=True)
class TimeSignatureInfo:
    """A time signature at a (part, measure) location."""

    part_id: str
    measure_number: str
    numerator: int
    denominator: int


@dataclass(frozen=True)
class KeySignatureInfo:
    """A key signature at a (part, measure) location."""

    part_id: str
    measure_number: str
    fifths: int
    mode: str | None = DEFAULT_MODE

    def __post_init__(self) -> None:
        if self.mode is None:
            object.__setattr__(self, "mode", DEFAULT_MODE)


@dataclass(frozen=True)
class NoteEntry:
    """
    A recognized note (or rest) with its notation context and pixel geometry.

    Attributes are grouped as follows:

    - identity: ``note_index`` .. ``system_index``
    - flags: ``is_rest`` .. ``is_tied_stop``
    - pitch: ``step`` .. ``expected_frequency`` (meaningless for rests)
    - notation: ``note_type`` .. ``beam_group_id`` (``None`` when unbeamed)
    - timing in divisions and seconds, including tied durations
    - geometry: note ``bounds``, ``center``, ``chord_bounds`` and the
      enclosing staff's vertical extent
    """

    # Positioning
    note_index: int
    global_note_index: int
    part_id: str
    measure_number: str
    staff: int
    voice: str
    note_index_in_chord: int
    sheet_number: int
    system_index: int

    # Note properties
    is_rest: bool
    is_grace: bool
    is_measure_rest: bool
    is_tied_start: bool
    is_tied_stop: bool

    # Pitch
    step: str | None
    octave: int
    alter: int
    absolute_pitch: int
    integer_pitch: int
    expected_frequency: float

    # Duration/Type
    note_type: str
    dots: int
    stem_direction: int
    beam_group_id: int | None

    # Time
    time_offset: int
    duration: int
    time_offset_seconds: float
    duration_seconds: float
    tied_duration: int
    tied_duration_seconds: float

    # Geometry
    bounds: Bounds
    center: Point
    chord_bounds: Bounds
    staff_top_y: int
    staff_bottom_y: int

    def __post_init__(self) -> None:
        if self.note_index < 0 or self.note_index_in_chord < 0:
            raise ValueError(
                f"Note {self.global_note_index}: local indexes must be non-negative, "
                f"got note_index={self.note_index}, "
                f"note_index_in_chord={self.note_index_in_chord}."
            )
