# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Output-file maps: externally supplied output locations per input file.

The document is a JSON object keyed by input path (the empty string is the
global entry). Each value maps an output-kind name (`object`, `swiftmodule`,
`swift-dependencies`, ...) to a destination path.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from swiftdriver.core.diagnostics import DiagnosticsEngine
from swiftdriver.core.errors import DriverError
from swiftdriver.core.file_types import FileType
from swiftdriver.core.virtual_path import VirtualPath

logger = logging.getLogger(__name__)

GLOBAL_ENTRY = ""


class OutputFileMap:
	def __init__(self, entries: Mapping[str, Mapping[FileType, VirtualPath]] | None = None) -> None:
		self._entries: dict[str, dict[FileType, VirtualPath]] = {
			key: dict(outputs) for key, outputs in (entries or {}).items()
		}

	@classmethod
	def load(cls, file: Path | str, diagnostics: DiagnosticsEngine) -> "OutputFileMap":
		"""
		Read and validate an output-file map.

		An unreadable file or a document that is not a nested JSON object is a
		structural failure. Individual bad entries are reported as diagnostics
		and skipped.
		"""
		path = Path(file)
		try:
			raw = path.read_text(encoding="utf-8")
		except OSError as err:
			raise DriverError("output-file-map", f"unable to read output file map: {err}", path=str(path)) from err
		try:
			doc = json.loads(raw)
		except json.JSONDecodeError as err:
			raise DriverError("output-file-map", f"malformed output file map: {err}", path=str(path)) from err
		return cls.from_json(doc, diagnostics, source=str(path))

	@classmethod
	def from_json(cls, doc: Any, diagnostics: DiagnosticsEngine, *, source: str = "<memory>") -> "OutputFileMap":
		if not isinstance(doc, dict):
			raise DriverError("output-file-map", "output file map must be a JSON object", path=source)
		entries: dict[str, dict[FileType, VirtualPath]] = {}
		for input_key, outputs in doc.items():
			if not isinstance(outputs, dict):
				raise DriverError(
					"output-file-map",
					f"entry for '{input_key}' must be a JSON object",
					path=source,
				)
			entry: dict[FileType, VirtualPath] = {}
			for kind_name, dest in outputs.items():
				kind = FileType.from_map_key(kind_name)
				if kind is None:
					diagnostics.warning(
						f"output file map '{source}' has an unknown output kind '{kind_name}'",
						code="output-file-map-kind",
						phase="output-file-map",
					)
					continue
				if not isinstance(dest, str) or not dest:
					diagnostics.error(
						f"output file map '{source}' has an invalid entry for '{kind_name}'",
						code="output-file-map-entry",
						phase="output-file-map",
					)
					continue
				entry[kind] = VirtualPath.from_string(dest)
			entries[input_key] = entry
		logger.debug("loaded output file map %s with %d entries", source, len(entries))
		return cls(entries)

	@property
	def entries(self) -> dict[str, dict[FileType, VirtualPath]]:
		return {key: dict(outputs) for key, outputs in self._entries.items()}

	def get_output(self, input_file: VirtualPath | str, output_type: FileType) -> VirtualPath:
		"""Look up one output; a missing input or kind raises DriverError (no defaulting)."""
		key = _key(input_file)
		outputs = self._entries.get(key)
		if outputs is None:
			raise DriverError("output-file-map", f"no output file map entry for input '{key}'", path=key)
		found = outputs.get(output_type)
		if found is None:
			raise DriverError(
				"output-file-map",
				f"no '{output_type.map_key}' output for input '{key}' in output file map",
				path=key,
			)
		return found

	def existing_output(self, input_file: VirtualPath | str, output_type: FileType) -> VirtualPath | None:
		"""Like get_output, but None when the map has no such entry."""
		return self._entries.get(_key(input_file), {}).get(output_type)

	def __contains__(self, input_file: object) -> bool:
		if not isinstance(input_file, (str, VirtualPath)):
			return False
		return _key(input_file) in self._entries

	def __len__(self) -> int:
		return len(self._entries)


def _key(input_file: VirtualPath | str) -> str:
	if isinstance(input_file, VirtualPath):
		return str(input_file)
	return input_file


__all__ = ["OutputFileMap", "GLOBAL_ENTRY"]
