"""MappingExporter: writes a note mapping as a JSON document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final

from notemap.mapping_renderers import CompactJsonRenderer, MappingRenderer, PrettyJsonRenderer
from notemap.note_mapping import NoteMapping

logger = logging.getLogger(__name__)

DEFAULT_FORMAT: Final[str] = "json"
SUPPORTED_FORMATS: Final[set[str]] = {"json", "json-compact"}


class MappingExporter:
    """
    Write a note mapping to disk via a pluggable renderer.

    Supported formats:
    - ``json``: indented document, geometry records on one line.
    - ``json-compact``: same document without insignificant whitespace.

    A mapping without notes (e.g. a blank page) produces no file at all.
    """

    def __init__(self, output_format: str = DEFAULT_FORMAT) -> None:
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.renderer = self._build_renderer(normalized)

    def _build_renderer(self, output_format: str) -> MappingRenderer:
        if output_format == "json-compact":
            return CompactJsonRenderer()
        return PrettyJsonRenderer()

    def render(self, mapping: NoteMapping) -> str:
        return self.renderer.render(mapping)

    def export(self, mapping: NoteMapping, output_path: str | Path) -> bool:
        """
        Render the mapping and write it to disk.

        Returns:
            True if a file was written, False if the mapping holds no notes.

        Raises:
            OSError: If the output file cannot be written.
            UnicodeEncodeError: If the document holds text UTF-8 cannot encode.
        """
        if mapping.is_empty():
            logger.info("No notes in mapping, skipping export to %s", output_path)
            return False

        # Nothing is written unless the whole document encodes.
        content = self.render(mapping).encode("utf-8")
        with open(output_path, "wb") as fh:
            fh.write(content)

        logger.debug("Wrote %d note(s) to %s", len(mapping.notes), output_path)
        return True
