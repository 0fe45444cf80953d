# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
File kinds flowing through planning and the typed path wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .virtual_path import VirtualPath


class FileType(Enum):
	"""Enum value is the file extension (empty for linked images)."""

	SWIFT = "swift"
	OBJECT = "o"
	SWIFT_MODULE = "swiftmodule"
	SWIFT_DOCUMENTATION = "swiftdoc"
	DEPENDENCIES = "d"
	SWIFT_DEPS = "swiftdeps"
	AUTOLINK = "autolink"
	OBJC_HEADER = "h"
	DSYM = "dSYM"
	IMAGE = ""

	@property
	def map_key(self) -> str:
		"""Key used for this kind inside an output-file map entry."""
		return _MAP_KEYS[self]

	@classmethod
	def from_map_key(cls, key: str) -> "FileType | None":
		return _BY_MAP_KEY.get(key)

	@classmethod
	def from_extension(cls, extension: str | None) -> "FileType | None":
		if not extension:
			return None
		for ft in cls:
			if ft.value == extension:
				return ft
		return None


_MAP_KEYS: dict[FileType, str] = {
	FileType.SWIFT: "swift",
	FileType.OBJECT: "object",
	FileType.SWIFT_MODULE: "swiftmodule",
	FileType.SWIFT_DOCUMENTATION: "swiftdoc",
	FileType.DEPENDENCIES: "dependencies",
	FileType.SWIFT_DEPS: "swift-dependencies",
	FileType.AUTOLINK: "autolink",
	FileType.OBJC_HEADER: "objc-header",
	FileType.DSYM: "dSYM",
	FileType.IMAGE: "image",
}
_BY_MAP_KEY: dict[str, FileType] = {key: ft for ft, key in _MAP_KEYS.items()}


@dataclass(frozen=True)
class TypedVirtualPath:
	"""A VirtualPath tagged with the kind of file it holds."""

	file: VirtualPath
	type: FileType

	def __str__(self) -> str:
		return str(self.file)


__all__ = ["FileType", "TypedVirtualPath"]
