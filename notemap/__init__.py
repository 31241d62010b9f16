"""notemap: links recognized score notes to their notation position and sheet pixels."""

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
from notemap.note_mapping import NoteMapping, NoteMappingBuilder

__version__ = "0.1.0"

__all__ = [
    "Bounds",
    "KeySignatureInfo",
    "MeasureInfo",
    "NoteEntry",
    "NoteMapping",
    "NoteMappingBuilder",
    "Point",
    "SheetInfo",
    "StaffInfo",
    "SystemInfo",
    "TempoInfo",
    "TimeSignatureInfo",
    "__version__",
]
