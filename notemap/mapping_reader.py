"""Read note mapping documents back into records."""

from __future__ import annotations

import json
import logging
import types
from dataclasses import fields
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

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
from notemap.mapping_renderers import camel_case
from notemap.note_mapping import NoteMapping

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Record type of each nested record-valued field.
_NESTED: dict[str, type] = {
    "bounds": Bounds,
    "chordBounds": Bounds,
    "center": Point,
}

_LISTS: dict[str, type] = {
    "tempos": TempoInfo,
    "timeSignatures": TimeSignatureInfo,
    "keySignatures": KeySignatureInfo,
    "sheets": SheetInfo,
    "systems": SystemInfo,
    "measures": MeasureInfo,
    "notes": NoteEntry,
}


@lru_cache(maxsize=None)
def _scalar_hints(record_type: type) -> dict[str, tuple[type, ...]]:
    """Accepted scalar types per field, for fields holding plain values."""
    hints: dict[str, tuple[type, ...]] = {}
    for name, hint in get_type_hints(record_type).items():
        if get_origin(hint) in (Union, types.UnionType):
            hints[name] = get_args(hint)
        elif hint in (bool, int, float, str):
            hints[name] = (hint,)
    return hints


def _matches(value: Any, expected: type) -> bool:
    if expected is bool:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if expected is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected)


def _check_scalar(value: Any, accepted: tuple[type, ...], path: str) -> None:
    """
    Raise unless ``value`` fits one of the ``accepted`` types.

    An int is accepted for a float, a bool never stands for an int, and
    ``null`` is accepted for optional and string fields only.
    """
    if value is None and (type(None) in accepted or str in accepted):
        return
    if any(_matches(value, expected) for expected in accepted if expected is not type(None)):
        return
    names = " or ".join(t.__name__ for t in accepted if t is not type(None))
    raise ValueError(f"{path}: expected {names}, got {type(value).__name__}.")


def _parse_record(record_type: type[R], data: Any, path: str) -> R:
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected an object, got {type(data).__name__}.")

    values: dict[str, Any] = {}
    scalar_hints = _scalar_hints(record_type)
    for field in fields(record_type):  # type: ignore[arg-type]
        key = camel_case(field.name)
        if key not in data:
            raise ValueError(f"{path}: missing key '{key}'.")
        value = data[key]
        if key in _NESTED:
            value = _parse_record(_NESTED[key], value, f"{path}.{key}")
        elif key == "staves":
            value = tuple(
                _parse_record(StaffInfo, item, f"{path}.staves[{i}]")
                for i, item in enumerate(_require_list(value, f"{path}.staves"))
            )
        elif field.name in scalar_hints:
            _check_scalar(value, scalar_hints[field.name], f"{path}.{key}")
        values[field.name] = value

    try:
        return record_type(**values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{path}: {exc}") from exc


def _require_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{path}: expected a list, got {type(value).__name__}.")
    return value


def read_mapping(text: str) -> NoteMapping:
    """
    Parse a mapping document produced by one of the renderers.

    Args:
        text: JSON document text (pretty or compact).

    Returns:
        A NoteMapping equal, field by field, to the one that was rendered.

    Raises:
        ValueError: If the text is not JSON or does not follow the schema.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Mapping document must be a JSON object.")
    if "divisions" not in data:
        raise ValueError("missing key 'divisions'.")
    _check_scalar(data["divisions"], (int,), "divisions")

    sequences: dict[str, tuple[Any, ...]] = {}
    for key, record_type in _LISTS.items():
        if key not in data:
            raise ValueError(f"missing key '{key}'.")
        items = _require_list(data[key], key)
        sequences[key] = tuple(
            _parse_record(record_type, item, f"{key}[{i}]") for i, item in enumerate(items)
        )

    mapping = NoteMapping(
        divisions=data["divisions"],
        tempos=sequences["tempos"],
        time_signatures=sequences["timeSignatures"],
        key_signatures=sequences["keySignatures"],
        sheets=sequences["sheets"],
        systems=sequences["systems"],
        measures=sequences["measures"],
        notes=sequences["notes"],
    )
    logger.debug("Read note mapping with %d note(s)", len(mapping.notes))
    return mapping


def load_mapping(path: str | Path) -> NoteMapping:
    """
    Read a mapping document from disk.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the content is not a valid mapping document.
    """
    with open(path, encoding="utf-8") as fh:
        return read_mapping(fh.read())
