# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Virtual paths: the closed set of file references the driver plans with.

A VirtualPath never touches the filesystem. Equality is structural and
kind-sensitive, so `temporary("a.o")` and `relative("a.o")` are distinct.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum, auto

from .errors import DriverError


class PathKind(Enum):
	RELATIVE = auto()
	ABSOLUTE = auto()
	# Lives under the build-scoped scratch directory; never kept by callers.
	TEMPORARY = auto()
	STANDARD_INPUT = auto()
	STANDARD_OUTPUT = auto()


@dataclass(frozen=True)
class VirtualPath:
	kind: PathKind
	name: str = ""

	@classmethod
	def relative(cls, path: str) -> "VirtualPath":
		if not path or path.startswith("/"):
			raise DriverError("invalid-path", f"not a relative path: '{path}'", path=path)
		return cls(PathKind.RELATIVE, posixpath.normpath(path))

	@classmethod
	def absolute(cls, path: str) -> "VirtualPath":
		if not path.startswith("/"):
			raise DriverError("invalid-path", f"not an absolute path: '{path}'", path=path)
		return cls(PathKind.ABSOLUTE, posixpath.normpath(path))

	@classmethod
	def temporary(cls, path: str) -> "VirtualPath":
		if not path or path.startswith("/"):
			raise DriverError("invalid-path", f"temporary paths must be relative: '{path}'", path=path)
		return cls(PathKind.TEMPORARY, posixpath.normpath(path))

	@classmethod
	def from_string(cls, path: str) -> "VirtualPath":
		"""`-` means standard input; anything else is absolute or relative by shape."""
		if path == "-":
			return STANDARD_INPUT
		if path.startswith("/"):
			return cls.absolute(path)
		return cls.relative(path)

	@property
	def is_temporary(self) -> bool:
		return self.kind is PathKind.TEMPORARY

	@property
	def is_standard_stream(self) -> bool:
		return self.kind in (PathKind.STANDARD_INPUT, PathKind.STANDARD_OUTPUT)

	@property
	def basename(self) -> str:
		if self.is_standard_stream:
			return "-"
		return posixpath.basename(self.name)

	@property
	def basename_without_ext(self) -> str:
		base = self.basename
		stem, _ext = posixpath.splitext(base)
		return stem

	@property
	def extension(self) -> str | None:
		if self.is_standard_stream:
			return None
		_stem, ext = posixpath.splitext(self.basename)
		return ext[1:] if ext else None

	@property
	def parent_directory(self) -> "VirtualPath | None":
		"""Directory holding this path, or None when it has no directory part."""
		if self.is_standard_stream:
			return None
		parent = posixpath.dirname(self.name)
		if not parent:
			return None
		return VirtualPath(self.kind, parent)

	def appending(self, component: str) -> "VirtualPath":
		if self.is_standard_stream:
			raise DriverError("invalid-path", "cannot append to a standard stream path")
		return VirtualPath(self.kind, posixpath.normpath(posixpath.join(self.name, component)))

	def sibling(self, filename: str) -> "VirtualPath":
		"""Same directory and kind, different file name."""
		parent = self.parent_directory
		if parent is None:
			return VirtualPath(self.kind, filename)
		return parent.appending(filename)

	def replacing_extension(self, extension: str) -> "VirtualPath":
		if self.is_standard_stream:
			raise DriverError("invalid-path", "cannot rename a standard stream path")
		stem, _ext = posixpath.splitext(self.name)
		return VirtualPath(self.kind, f"{stem}.{extension}" if extension else stem)

	def resolved_in(self, working_directory: "VirtualPath | None") -> "VirtualPath":
		"""Anchor a relative path under `working_directory`; other kinds are returned unchanged."""
		if working_directory is None or self.kind is not PathKind.RELATIVE:
			return self
		return working_directory.appending(self.name)

	def __str__(self) -> str:
		if self.is_standard_stream:
			return "-"
		return self.name


STANDARD_INPUT = VirtualPath(PathKind.STANDARD_INPUT)
STANDARD_OUTPUT = VirtualPath(PathKind.STANDARD_OUTPUT)


__all__ = ["PathKind", "VirtualPath", "STANDARD_INPUT", "STANDARD_OUTPUT"]
