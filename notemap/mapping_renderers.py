"""Renderer implementations for note mapping documents."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import fields, is_dataclass
from functools import lru_cache
from typing import Any, get_type_hints

from notemap.mapping_models import Bounds, Point
from notemap.note_mapping import NoteMapping

#: Top-level keys of a mapping document, in emission order.
TOP_LEVEL_KEYS: tuple[str, ...] = (
    "divisions",
    "tempos",
    "timeSignatures",
    "keySignatures",
    "sheets",
    "systems",
    "measures",
    "notes",
)

# Geometry records are written on one line in pretty output.
_INLINE_RECORDS = (Bounds, Point)


class InlineObject(dict):
    """A document node that pretty rendering keeps on a single line."""


def camel_case(name: str) -> str:
    """Turn an attribute name such as ``staff_top_y`` into ``staffTopY``."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@lru_cache(maxsize=None)
def _float_fields(record_type: type) -> frozenset[str]:
    hints = get_type_hints(record_type)
    return frozenset(name for name, hint in hints.items() if hint is float)


def _to_node(value: Any, as_float: bool = False) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _record_to_node(value)
    if isinstance(value, (list, tuple)):
        return [_to_node(item) for item in value]
    if as_float and value is not None:
        return float(value)
    return value


def _record_to_node(record: Any) -> dict[str, Any]:
    """
    Render one record field by field, in declaration order.

    Float-typed fields are always emitted as floats so that ``4`` handed in
    for a duration in seconds still reads ``4.0``. ``None`` stays ``None``
    and renders as ``null``.
    """
    node: dict[str, Any] = InlineObject() if isinstance(record, _INLINE_RECORDS) else {}
    float_fields = _float_fields(type(record))
    for field in fields(record):
        node[camel_case(field.name)] = _to_node(
            getattr(record, field.name), as_float=field.name in float_fields
        )
    return node


def to_document_tree(mapping: NoteMapping) -> dict[str, Any]:
    """Build the ordered document tree shared by every renderer."""
    tree = _record_to_node(mapping)
    return {key: tree[key] for key in TOP_LEVEL_KEYS}


class MappingRenderer(ABC):
    """Abstract note mapping renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, mapping: NoteMapping) -> str:
        """Render a mapping into a file content string."""


class PrettyJsonRenderer(MappingRenderer):
    """
    Render a mapping as indented JSON.

    Every nesting level adds ``INDENT`` spaces. Geometry sub-records
    (``bounds``, ``center``, ``chordBounds``) stay on one line:

        "bounds": {"x": 10, "y": 10, "width": 500, "height": 200}
    """

    INDENT: int = 2

    @property
    def default_extension(self) -> str:
        return ".json"

    def render(self, mapping: NoteMapping) -> str:
        return self._format(to_document_tree(mapping), level=0)

    def _format(self, node: Any, level: int) -> str:
        if isinstance(node, InlineObject):
            return json.dumps(node, ensure_ascii=False, separators=(", ", ": "))

        closing = " " * (self.INDENT * level)
        padding = " " * (self.INDENT * (level + 1))

        if isinstance(node, dict):
            if not node:
                return "{}"
            items = [
                f"{padding}{self._scalar(key)}: {self._format(value, level + 1)}"
                for key, value in node.items()
            ]
            return "{\n" + ",\n".join(items) + "\n" + closing + "}"

        if isinstance(node, list):
            if not node:
                return "[]"
            items = [f"{padding}{self._format(item, level + 1)}" for item in node]
            return "[\n" + ",\n".join(items) + "\n" + closing + "]"

        return self._scalar(node)

    def _scalar(self, value: Any) -> str:
        # json escapes backslash, quote and control characters; None -> null.
        return json.dumps(value, ensure_ascii=False)


class CompactJsonRenderer(MappingRenderer):
    """Render a mapping as JSON without insignificant whitespace."""

    @property
    def default_extension(self) -> str:
        return ".json"

    def render(self, mapping: NoteMapping) -> str:
        return json.dumps(to_document_tree(mapping), ensure_ascii=False, separators=(",", ":"))
