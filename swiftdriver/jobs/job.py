# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Planned jobs: one external tool invocation each.

A command line is a sequence of `Flag` (literal text) and `PathArg` (a
VirtualPath whose kind is kept) elements. Jobs are immutable and have all
of their outputs declared up front.
"""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from swiftdriver.core.file_types import TypedVirtualPath
from swiftdriver.core.virtual_path import PathKind, VirtualPath
from swiftdriver.toolchain import Tool


class JobKind(Enum):
	COMPILE = "compile"
	MERGE_MODULE = "merge-module"
	AUTOLINK_EXTRACT = "autolink-extract"
	LINK = "link"
	GENERATE_DSYM = "generate-dsym"
	INTERPRET = "interpret"
	REPL = "repl"
	PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class Flag:
	text: str

	def __str__(self) -> str:
		return self.text


@dataclass(frozen=True)
class PathArg:
	path: VirtualPath
	# Rendered directly before the path, e.g. "@" for a response file.
	prefix: str = ""

	def __str__(self) -> str:
		return self.prefix + str(self.path)


ArgTemplate = Flag | PathArg


def render_path(path: VirtualPath, temporary_directory: str | None = None) -> str:
	if path.kind is PathKind.TEMPORARY and temporary_directory is not None:
		return os.path.join(temporary_directory, path.name)
	return str(path)


@dataclass(frozen=True)
class Job:
	kind: JobKind
	tool: Tool
	command_line: tuple[ArgTemplate, ...] = ()
	inputs: tuple[TypedVirtualPath, ...] = ()
	outputs: tuple[TypedVirtualPath, ...] = ()

	def arguments(self, temporary_directory: str | None = None) -> list[str]:
		"""Concrete argv (without the executable); temporaries land under `temporary_directory`."""
		out: list[str] = []
		for arg in self.command_line:
			if isinstance(arg, PathArg):
				out.append(arg.prefix + render_path(arg.path, temporary_directory))
			else:
				out.append(arg.text)
		return out

	def description(self, temporary_directory: str | None = None) -> str:
		argv = [self.tool.path, *self.arguments(temporary_directory)]
		return " ".join(shlex.quote(a) for a in argv)

	def to_dict(self) -> dict[str, Any]:
		return {
			"kind": self.kind.value,
			"tool": self.tool.name,
			"executable": self.tool.path,
			"arguments": self.arguments(),
			"inputs": [_typed_to_dict(p) for p in self.inputs],
			"outputs": [_typed_to_dict(p) for p in self.outputs],
		}


def _typed_to_dict(p: TypedVirtualPath) -> dict[str, Any]:
	return {"path": str(p.file), "kind": p.file.kind.name.lower(), "type": p.type.map_key}


@dataclass
class CommandLine:
	"""Mutable builder used while a job is being assembled."""

	args: list[ArgTemplate] = field(default_factory=list)

	def flag(self, text: str) -> "CommandLine":
		self.args.append(Flag(text))
		return self

	def flags(self, texts: Iterable[str]) -> "CommandLine":
		for text in texts:
			self.args.append(Flag(text))
		return self

	def path(self, path: VirtualPath) -> "CommandLine":
		self.args.append(PathArg(path))
		return self

	def paths(self, paths: Iterable[VirtualPath]) -> "CommandLine":
		for p in paths:
			self.args.append(PathArg(p))
		return self

	def option_path(self, spelling: str, path: VirtualPath) -> "CommandLine":
		return self.flag(spelling).path(path)

	def freeze(self) -> tuple[ArgTemplate, ...]:
		return tuple(self.args)


__all__ = ["JobKind", "Flag", "PathArg", "ArgTemplate", "Job", "CommandLine", "render_path"]
