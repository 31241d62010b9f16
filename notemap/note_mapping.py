"""NoteMapping: accumulates note mapping facts during export and snapshots them."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from notemap.mapping_models import (
    KeySignatureInfo,
    MeasureInfo,
    NoteEntry,
    SheetInfo,
    SystemInfo,
    TempoInfo,
    TimeSignatureInfo,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteMapping:
    """
    Immutable snapshot of every mapping fact collected during one export pass.

    Each sequence keeps the order in which the facts were added.
    """

    divisions: int = 0
    tempos: tuple[TempoInfo, ...] = ()
    time_signatures: tuple[TimeSignatureInfo, ...] = ()
    key_signatures: tuple[KeySignatureInfo, ...] = ()
    sheets: tuple[SheetInfo, ...] = ()
    systems: tuple[SystemInfo, ...] = ()
    measures: tuple[MeasureInfo, ...] = ()
    notes: tuple[NoteEntry, ...] = ()

    def is_empty(self) -> bool:
        """True when no note was recorded, whatever else was."""
        return not self.notes

    def to_json(self, compact: bool = False) -> str:
        """Serialize this mapping to a JSON document."""
        from notemap.mapping_renderers import CompactJsonRenderer, PrettyJsonRenderer

        renderer = CompactJsonRenderer() if compact else PrettyJsonRenderer()
        return renderer.render(self)

    def check_references(self) -> list[str]:
        """
        Report facts that point at sheets, systems or measures never recorded.

        Also reports notes whose ``global_note_index`` does not strictly
        increase. Nothing here is enforced: the exporter that fills the
        mapping owns its consistency, and consumers are expected to skip what
        they cannot resolve.

        Returns:
            Human-readable problem descriptions, empty when consistent.
        """
        problems: list[str] = []
        sheet_numbers = {sheet.sheet_number for sheet in self.sheets}
        system_indexes = {system.system_index for system in self.systems}
        locations = {(m.part_id, m.measure_number) for m in self.measures}

        for system in self.systems:
            if system.sheet_number not in sheet_numbers:
                problems.append(
                    f"system {system.system_index}: unknown sheet {system.sheet_number}"
                )

        for measure in self.measures:
            label = f"measure {measure.part_id}/{measure.measure_number}"
            if measure.sheet_number not in sheet_numbers:
                problems.append(f"{label}: unknown sheet {measure.sheet_number}")
            if measure.system_index not in system_indexes:
                problems.append(f"{label}: unknown system {measure.system_index}")

        events: list[tuple[str, TempoInfo | TimeSignatureInfo | KeySignatureInfo]] = [
            *(("tempo", t) for t in self.tempos),
            *(("time signature", t) for t in self.time_signatures),
            *(("key signature", k) for k in self.key_signatures),
        ]
        for kind, event in events:
            if (event.part_id, event.measure_number) not in locations:
                problems.append(
                    f"{kind} at {event.part_id}/{event.measure_number}: unknown measure"
                )

        previous: int | None = None
        for note in self.notes:
            label = f"note {note.global_note_index}"
            if note.sheet_number not in sheet_numbers:
                problems.append(f"{label}: unknown sheet {note.sheet_number}")
            if note.system_index not in system_indexes:
                problems.append(f"{label}: unknown system {note.system_index}")
            if (note.part_id, note.measure_number) not in locations:
                problems.append(
                    f"{label}: unknown measure {note.part_id}/{note.measure_number}"
                )
            if previous is not None and note.global_note_index <= previous:
                problems.append(
                    f"{label}: global note index not increasing (previous {previous})"
                )
            previous = note.global_note_index

        if problems:
            logger.debug("Found %d unresolved mapping reference(s)", len(problems))
        return problems


class NoteMappingBuilder:
    """
    Append-only collector filled by the score exporter, one call per fact.

    Usage:

        builder = NoteMappingBuilder()
        builder.set_divisions(480)
        builder.add_sheet(SheetInfo(1, 2000, 3000))
        ...
        if not builder.is_empty():
            document = builder.build().to_json()

    No call validates or deduplicates; consistency between the sequences is
    the caller's job (see ``NoteMapping.check_references``).
    """

    def __init__(self) -> None:
        self._divisions = 0
        self._tempos: list[TempoInfo] = []
        self._time_signatures: list[TimeSignatureInfo] = []
        self._key_signatures: list[KeySignatureInfo] = []
        self._sheets: list[SheetInfo] = []
        self._systems: list[SystemInfo] = []
        self._measures: list[MeasureInfo] = []
        self._notes: list[NoteEntry] = []

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_divisions(self, divisions: int) -> None:
        """Set the number of divisions per quarter note."""
        self._divisions = divisions

    def add_sheet(self, sheet: SheetInfo) -> None:
        self._sheets.append(sheet)

    def add_system(self, system: SystemInfo) -> None:
        self._systems.append(system)

    def add_measure(self, measure: MeasureInfo) -> None:
        self._measures.append(measure)

    def add_tempo(self, tempo: TempoInfo) -> None:
        self._tempos.append(tempo)

    def add_time_signature(self, time_signature: TimeSignatureInfo) -> None:
        self._time_signatures.append(time_signature)

    def add_key_signature(self, key_signature: KeySignatureInfo) -> None:
        self._key_signatures.append(key_signature)

    def add_note(self, note: NoteEntry) -> None:
        self._notes.append(note)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        """True when no note has been added yet."""
        return not self._notes

    def build(self, validate: bool = False) -> NoteMapping:
        """
        Snapshot the collected facts into an immutable NoteMapping.

        Args:
            validate: Check cross references before returning.

        Raises:
            ValueError: If ``validate`` is set and references do not resolve.
        """
        mapping = NoteMapping(
            divisions=self._divisions,
            tempos=tuple(self._tempos),
            time_signatures=tuple(self._time_signatures),
            key_signatures=tuple(self._key_signatures),
            sheets=tuple(self._sheets),
            systems=tuple(self._systems),
            measures=tuple(self._measures),
            notes=tuple(self._notes),
        )
        logger.debug(
            "Built note mapping: %d note(s), %d measure(s), %d system(s), %d sheet(s)",
            len(mapping.notes),
            len(mapping.measures),
            len(mapping.systems),
            len(mapping.sheets),
        )
        if validate:
            problems = mapping.check_references()
            if problems:
                raise ValueError("Inconsistent note mapping: " + "; ".join(problems))
        return mapping

    def to_json(self) -> str:
        """Build the current snapshot and render it as pretty JSON."""
        return self.build().to_json()
