# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Toolchains: which external executable runs which job.

`SWIFT_DRIVER_<TOOL>_EXEC` in the environment overrides the executable for a
tool (`SWIFT_DRIVER_LD_EXEC`, `SWIFT_DRIVER_SWIFT_AUTOLINK_EXTRACT_EXEC`, ...).
Without an override the bare tool name is used and the executor resolves it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from swiftdriver.core.triple import PlatformFamily, Triple

logger = logging.getLogger(__name__)

FRONTEND = "swift"
DARWIN_LINKER = "ld"
DARWIN_ARCHIVER = "libtool"
UNIX_LINKER = "clang"
UNIX_ARCHIVER = "ar"
AUTOLINK_EXTRACT = "swift-autolink-extract"
DSYMUTIL = "dsymutil"
INDENT = "swift-indent"


@dataclass(frozen=True)
class Tool:
	"""An external executable: `name` is the logical tool, `path` what gets run."""

	name: str
	path: str

	def __str__(self) -> str:
		return self.path


def override_variable(tool_name: str) -> str:
	return "SWIFT_DRIVER_" + tool_name.upper().replace("-", "_") + "_EXEC"


class Toolchain:
	def __init__(self, triple: Triple | None, env: Mapping[str, str] | None = None) -> None:
		self.triple = triple
		self._env = dict(env or {})

	@property
	def family(self) -> PlatformFamily | None:
		return self.triple.family if self.triple is not None else None

	def tool(self, name: str) -> Tool:
		override = self._env.get(override_variable(name))
		if override:
			logger.debug("tool %s overridden by environment: %s", name, override)
			return Tool(name=name, path=override)
		return Tool(name=name, path=name)

	@property
	def frontend(self) -> Tool:
		return self.tool(FRONTEND)

	@property
	def linker(self) -> Tool:
		return self.tool(DARWIN_LINKER if self.family is PlatformFamily.DARWIN else UNIX_LINKER)

	@property
	def static_archiver(self) -> Tool:
		return self.tool(DARWIN_ARCHIVER if self.family is PlatformFamily.DARWIN else UNIX_ARCHIVER)

	@property
	def autolink_extractor(self) -> Tool:
		return self.tool(AUTOLINK_EXTRACT)

	@property
	def dsym_generator(self) -> Tool:
		return self.tool(DSYMUTIL)

	@property
	def indent(self) -> Tool:
		return self.tool(INDENT)


__all__ = ["Tool", "Toolchain", "override_variable"]
