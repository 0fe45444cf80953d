# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Option definitions understood by the driver.

Each option has a stable spelling and a shape (`OptionKind`) that decides how
its value is read from the argument list. Groups support "last option of the
group wins" queries (output modes, debug levels).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from .parsed_options import ParsedOptions


class OptionKind(Enum):
	FLAG = auto()                # -color-diagnostics
	JOINED = auto()              # -I=wibble, -debug-info-format=dwarf
	SEPARATE = auto()            # -module-name main
	JOINED_OR_SEPARATE = auto()  # -Ifoo / -I foo
	COMMA_JOINED = auto()        # -sanitize=a,b,c


# Group names.
MODES = "modes"
DEBUG_LEVELS = "g"
LINKER = "linker"
FRONTEND = "frontend"


@dataclass(frozen=True)
class Option:
	spelling: str
	kind: OptionKind
	groups: frozenset[str] = field(default_factory=frozenset)
	# Value names a file; resolved against -working-directory.
	is_path: bool = False
	# Canonical spelling when this spelling is only an alternate form.
	alias_of: str | None = None
	# COMMA_JOINED only: whether `a,,b` keeps the empty segment.
	allow_empty_segments: bool = False
	help: str = ""

	@property
	def identity(self) -> str:
		return self.alias_of or self.spelling

	def in_group(self, group: str) -> bool:
		return group in self.groups


def _opt(spelling: str, kind: OptionKind, *groups: str, **kwargs) -> Option:
	return Option(spelling=spelling, kind=kind, groups=frozenset(groups), **kwargs)


F = OptionKind.FLAG
J = OptionKind.JOINED
S = OptionKind.SEPARATE
JS = OptionKind.JOINED_OR_SEPARATE
CJ = OptionKind.COMMA_JOINED

DEFAULT_OPTIONS: tuple[Option, ...] = (
	# Driver modes.
	_opt("--driver-mode=", J, help="Set the driver mode (swift, swiftc, swift-autolink-extract, swift-indent)"),
	_opt("-frontend", F, help="Run the compiler front end directly"),
	_opt("-modulewrap", F, help="Wrap a module for a debugger"),
	_opt("-repl", F, MODES, help="REPL mode"),
	# Output modes.
	_opt("-emit-executable", F, MODES, help="Emit a linked executable"),
	_opt("-emit-library", F, MODES, help="Emit a linked library"),
	_opt("-emit-object", F, MODES, help="Emit object files only"),
	_opt("-c", F, MODES, alias_of="-emit-object"),
	_opt("-typecheck", F, MODES, help="Type-check only"),
	_opt("-emit-module", F, help="Emit an importable module"),
	_opt("-emit-module-path", S, is_path=True, help="Emit an importable module to <path>"),
	_opt("-emit-module-doc-path", S, is_path=True, help="Emit module documentation to <path>"),
	_opt("-emit-dependencies", F, help="Emit make-style dependencies"),
	_opt("-static", F, help="Make this module statically linkable"),
	_opt("-o", JS, is_path=True, help="Write output to <file>"),
	_opt("-output-file-map", S, is_path=True, help="Per-input output locations (JSON)"),
	_opt("-module-name", S, help="Name of the module to build"),
	_opt("-parse-as-library", F, help="Parse input files as library code"),
	_opt("-parse-stdlib", F, help="Parse input files as the standard library"),
	_opt("-whole-module-optimization", F, help="Compile all inputs together"),
	_opt("-wmo", F, alias_of="-whole-module-optimization"),
	_opt("-no-whole-module-optimization", F, help="Compile inputs separately"),
	_opt("-enable-testing", F, FRONTEND, help="Allow @testable imports of this module"),
	# Debug info.
	_opt("-g", F, DEBUG_LEVELS, help="Emit full debug info"),
	_opt("-gnone", F, DEBUG_LEVELS, help="Emit no debug info"),
	_opt("-gline-tables-only", F, DEBUG_LEVELS, help="Emit line tables only"),
	_opt("-gdwarf-types", F, DEBUG_LEVELS, help="Emit DWARF type info only"),
	_opt("-debug-info-format=", J, help="Debug info format (dwarf, codeview)"),
	# Diagnostics / environment.
	_opt("-color-diagnostics", F, FRONTEND, help="Print colored diagnostics"),
	_opt("-no-color-diagnostics", F, FRONTEND, help="Do not print colored diagnostics"),
	_opt("-working-directory", S, is_path=True, help="Resolve relative paths against <dir>"),
	_opt("-working-directory=", J, is_path=True, alias_of="-working-directory"),
	_opt("-target", S, help="Generate code for the given target triple"),
	_opt("-sdk", S, FRONTEND, is_path=True, help="SDK to compile against"),
	# Search paths and forwarded inputs.
	_opt("-I", JS, FRONTEND, is_path=True, help="Add an import search path"),
	_opt("-I=", J, FRONTEND, is_path=True, help="Add an import search path (joined form)"),
	_opt("-F", JS, FRONTEND, is_path=True, help="Add a framework search path"),
	_opt("-L", JS, LINKER, is_path=True, help="Add a library search path"),
	_opt("-l", JS, LINKER, help="Link against library <name>"),
	_opt("-api-diff-data-file", S, FRONTEND, is_path=True, help="API diff data file"),
	_opt("-import-objc-header", S, is_path=True, help="Implicitly import an Objective-C header"),
	_opt("-sanitize=", CJ, FRONTEND, help="Enable runtime sanitizers"),
	# Passthrough wrappers.
	_opt("-Xfrontend", S, help="Pass <arg> to the front end"),
	_opt("-Xlinker", S, LINKER, help="Pass <arg> to the linker"),
)


class OptionTable:
	"""Lookup structure over a fixed sequence of options."""

	TERMINATOR = "--"

	def __init__(self, options: tuple[Option, ...] = DEFAULT_OPTIONS) -> None:
		self._by_spelling: dict[str, Option] = {}
		for opt in options:
			if opt.spelling in self._by_spelling:
				raise ValueError(f"duplicate option spelling '{opt.spelling}'")
			self._by_spelling[opt.spelling] = opt
		# Longest first so `-I=` beats `-I` for `-I=wibble`.
		self._prefixed = sorted(
			(o for o in options if o.kind in (OptionKind.JOINED, OptionKind.JOINED_OR_SEPARATE, OptionKind.COMMA_JOINED)),
			key=lambda o: len(o.spelling),
			reverse=True,
		)

	@property
	def options(self) -> list[Option]:
		return list(self._by_spelling.values())

	def get(self, spelling: str) -> Option | None:
		return self._by_spelling.get(spelling)

	def lookup(self, token: str) -> Option | None:
		"""Find the option a raw token starts with (exact spelling first, then longest joined prefix)."""
		exact = self._by_spelling.get(token)
		if exact is not None:
			return exact
		for opt in self._prefixed:
			if token.startswith(opt.spelling):
				return opt
		return None

	def parse(self, args: list[str]) -> ParsedOptions:
		from .parsed_options import parse_arguments

		return parse_arguments(self, args)


__all__ = [
	"OptionKind",
	"Option",
	"OptionTable",
	"DEFAULT_OPTIONS",
	"MODES",
	"DEBUG_LEVELS",
	"LINKER",
	"FRONTEND",
]
