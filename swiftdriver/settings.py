# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Mode and settings resolution.

Each stage reads the parsed options plus the results of the stages before it:

  invocation -> driver kind
             -> compiler mode
             -> output kinds (compiler / linker)
             -> debug-info level + format
             -> module name + module output

Invalid combinations with a sensible fallback are reported to the
DiagnosticsEngine; only an unknown driver identity raises DriverError.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from enum import Enum, auto

from swiftdriver.core.diagnostics import DiagnosticsEngine
from swiftdriver.core.errors import invalid_driver_name
from swiftdriver.core.file_types import FileType, TypedVirtualPath
from swiftdriver.core.virtual_path import PathKind, VirtualPath
from swiftdriver.options import DEBUG_LEVELS, MODES, ParsedOptions

logger = logging.getLogger(__name__)

DRIVER_MODE_PREFIX = "--driver-mode="
STDLIB_MODULE_NAME = "Swift"
FALLBACK_MODULE_NAME = "main"
REPL_MODULE_NAME = "REPL"
LIBRARY_PREFIX = "lib"


class DriverKind(Enum):
	INTERACTIVE = auto()
	BATCH = auto()
	FRONTEND = auto()
	MODULE_WRAP = auto()
	AUTOLINK_EXTRACT = auto()
	INDENT = auto()

	@property
	def is_passthrough(self) -> bool:
		"""Kinds whose arguments go to a single tool without being planned."""
		return self not in (DriverKind.INTERACTIVE, DriverKind.BATCH)


_DRIVER_NAMES: dict[str, DriverKind] = {
	"swift": DriverKind.INTERACTIVE,
	"swiftc": DriverKind.BATCH,
	"swift-frontend": DriverKind.FRONTEND,
	"swift-autolink-extract": DriverKind.AUTOLINK_EXTRACT,
	"swift-indent": DriverKind.INDENT,
}

_SUBCOMMANDS: dict[str, DriverKind] = {
	"-frontend": DriverKind.FRONTEND,
	"-modulewrap": DriverKind.MODULE_WRAP,
}


class CompilerMode(Enum):
	STANDARD_COMPILE = auto()  # one compile job per input
	SINGLE_COMPILE = auto()    # all inputs in one job (whole-module)
	IMMEDIATE = auto()
	REPL = auto()


class LinkOutputType(Enum):
	EXECUTABLE = auto()
	DYNAMIC_LIBRARY = auto()
	STATIC_LIBRARY = auto()


class DebugInfoLevel(Enum):
	AST_TYPES = auto()
	DWARF_TYPES = auto()
	LINE_TABLES = auto()


class DebugInfoFormat(Enum):
	DWARF = "dwarf"
	CODEVIEW = "codeview"


_DEBUG_LEVEL_FLAGS: dict[str, DebugInfoLevel | None] = {
	"-g": DebugInfoLevel.AST_TYPES,
	"-gdwarf-types": DebugInfoLevel.DWARF_TYPES,
	"-gline-tables-only": DebugInfoLevel.LINE_TABLES,
	"-gnone": None,
}

DEBUG_LEVEL_SPELLINGS: dict[DebugInfoLevel, str] = {
	level: spelling for spelling, level in _DEBUG_LEVEL_FLAGS.items() if level is not None
}


class ModuleOutputKind(Enum):
	TOP_LEVEL = auto()  # durable artifact the user asked for
	AUXILIARY = auto()  # temporary, consumed later in the build


@dataclass(frozen=True)
class ModuleOutput:
	kind: ModuleOutputKind
	path: VirtualPath

	@classmethod
	def top_level(cls, path: VirtualPath) -> "ModuleOutput":
		return cls(ModuleOutputKind.TOP_LEVEL, path)

	@classmethod
	def auxiliary(cls, path: VirtualPath) -> "ModuleOutput":
		return cls(ModuleOutputKind.AUXILIARY, path)


@dataclass(frozen=True)
class OutputKinds:
	compiler: FileType | None
	linker: LinkOutputType | None


def _driver_name(executable: str) -> str:
	base = posixpath.basename(executable.replace("\\", "/"))
	if base.endswith(".exe"):
		base = base[: -len(".exe")]
	return base


def split_invocation(args: list[str]) -> tuple[DriverKind, list[str]]:
	"""
	Resolve the driver kind and return it with the remaining arguments.

	`args[0]` is the executable. A leading `--driver-mode=<name>` overrides the
	executable name and is consumed. A `-frontend`/`-modulewrap` subcommand is
	detected but left in place for the passthrough job.
	"""
	if not args:
		raise invalid_driver_name("")
	name = _driver_name(args[0])
	rest = list(args[1:])
	if rest and rest[0].startswith(DRIVER_MODE_PREFIX):
		name = rest.pop(0)[len(DRIVER_MODE_PREFIX):]
	kind = _DRIVER_NAMES.get(name)
	if kind is None:
		raise invalid_driver_name(name)
	if kind in (DriverKind.INTERACTIVE, DriverKind.BATCH) and rest and rest[0] in _SUBCOMMANDS:
		kind = _SUBCOMMANDS[rest[0]]
	logger.debug("driver kind %s from invocation %r", kind.name, name)
	return kind, rest


def determine_driver_kind(args: list[str]) -> DriverKind:
	kind, _rest = split_invocation(args)
	return kind


def compute_compiler_mode(kind: DriverKind, parsed: ParsedOptions, inputs: list[TypedVirtualPath]) -> CompilerMode | None:
	if kind is DriverKind.INTERACTIVE:
		return CompilerMode.IMMEDIATE if inputs else CompilerMode.REPL
	if kind is not DriverKind.BATCH:
		return None
	if parsed.contains("-repl"):
		return CompilerMode.REPL
	if parsed.last_wins("-whole-module-optimization", "-no-whole-module-optimization"):
		return CompilerMode.SINGLE_COMPILE
	return CompilerMode.STANDARD_COMPILE


def compute_output_kinds(kind: DriverKind, parsed: ParsedOptions) -> OutputKinds:
	if kind is not DriverKind.BATCH:
		return OutputKinds(compiler=None, linker=None)
	mode = parsed.last_in_group(MODES)
	mode_name = mode.identity if mode is not None else None
	if mode_name is None:
		if parsed.has_any("-emit-module", "-emit-module-path"):
			return OutputKinds(compiler=FileType.SWIFT_MODULE, linker=None)
		return OutputKinds(compiler=FileType.OBJECT, linker=LinkOutputType.EXECUTABLE)
	if mode_name == "-emit-executable":
		return OutputKinds(compiler=FileType.OBJECT, linker=LinkOutputType.EXECUTABLE)
	if mode_name == "-emit-library":
		linker = LinkOutputType.STATIC_LIBRARY if parsed.contains("-static") else LinkOutputType.DYNAMIC_LIBRARY
		return OutputKinds(compiler=FileType.OBJECT, linker=linker)
	if mode_name == "-emit-object":
		return OutputKinds(compiler=FileType.OBJECT, linker=None)
	# -typecheck, -repl
	return OutputKinds(compiler=None, linker=None)


def compute_debug_info(
	parsed: ParsedOptions,
	diagnostics: DiagnosticsEngine,
) -> tuple[DebugInfoLevel | None, DebugInfoFormat]:
	"""
	Debug level comes from the last `-g*` flag, except that any
	`-gline-tables-only` downgrades full `-g`. The format defaults to DWARF.
	"""
	level: DebugInfoLevel | None = None
	last_g = parsed.last_in_group(DEBUG_LEVELS)
	if last_g is not None:
		level = _DEBUG_LEVEL_FLAGS[last_g.identity or ""]
	if level is DebugInfoLevel.AST_TYPES and parsed.contains("-gline-tables-only"):
		level = DebugInfoLevel.LINE_TABLES

	fmt = DebugInfoFormat.DWARF
	format_arg = parsed.last("-debug-info-format=")
	if format_arg is not None:
		try:
			fmt = DebugInfoFormat(format_arg.value)
		except ValueError:
			diagnostics.error(
				f"invalid value '{format_arg.value}' in '-debug-info-format='",
				code="invalid-value",
				phase="settings",
			)
		if last_g is None:
			diagnostics.error(
				"option '-debug-info-format=' is missing a required argument (-g)",
				code="missing-required-argument",
				phase="settings",
			)
	if fmt is not DebugInfoFormat.DWARF and level is DebugInfoLevel.DWARF_TYPES and last_g is not None:
		diagnostics.error(
			f"argument '{fmt.value}' is not allowed with '{last_g.option.spelling}'",
			code="argument-not-allowed-with",
			phase="settings",
		)
	return level, fmt


def compute_module_name(
	parsed: ParsedOptions,
	diagnostics: DiagnosticsEngine,
	*,
	compiler_mode: CompilerMode | None,
	outputs: OutputKinds,
	inputs: list[TypedVirtualPath],
) -> str:
	explicit = parsed.last_value("-module-name")
	if explicit is not None:
		if explicit == STDLIB_MODULE_NAME and not parsed.contains("-parse-stdlib"):
			diagnostics.error(
				f'module name "{explicit}" is reserved for the standard library',
				code="reserved-module-name",
				phase="settings",
			)
		elif not explicit.isidentifier():
			diagnostics.error(
				f'module name "{explicit}" is not a valid identifier',
				code="bad-module-name",
				phase="settings",
			)
		return explicit

	if compiler_mode is CompilerMode.REPL:
		return REPL_MODULE_NAME

	name = FALLBACK_MODULE_NAME
	output = parsed.last_value("-o")
	if len(inputs) == 1:
		if inputs[0].file.kind is not PathKind.STANDARD_INPUT:
			name = inputs[0].file.basename_without_ext
	elif output is not None and (outputs.linker is not None or outputs.compiler is FileType.SWIFT_MODULE):
		name = VirtualPath.from_string(output).basename_without_ext
		is_library = outputs.linker in (LinkOutputType.DYNAMIC_LIBRARY, LinkOutputType.STATIC_LIBRARY)
		if is_library and name.startswith(LIBRARY_PREFIX) and len(name) > len(LIBRARY_PREFIX):
			name = name[len(LIBRARY_PREFIX):]

	if not name.isidentifier() or name == STDLIB_MODULE_NAME:
		logger.debug("derived module name %r is unusable; falling back to %s", name, FALLBACK_MODULE_NAME)
		return FALLBACK_MODULE_NAME
	return name


def _file_output_value(parsed: ParsedOptions, name: str, diagnostics: DiagnosticsEngine) -> str | None:
	"""Value of a path option that must name a file; `-` is diagnosed and ignored."""
	value = parsed.last_value(name)
	if value == "-":
		diagnostics.error(
			f"'{name}' cannot write to standard output",
			code="invalid-value",
			phase="settings",
		)
		return None
	return value


def compute_module_output(
	parsed: ParsedOptions,
	diagnostics: DiagnosticsEngine,
	*,
	module_name: str,
	outputs: OutputKinds,
	debug_level: DebugInfoLevel | None,
	working_directory: VirtualPath | None,
) -> ModuleOutput | None:
	"""
	Explicit module requests (`-emit-module`, `-emit-module-path`) give a
	durable top-level module. Full debug info for a linked product needs the
	module only as a temporary input of the link.
	"""
	filename = f"{module_name}.{FileType.SWIFT_MODULE.value}"
	if parsed.has_any("-emit-module", "-emit-module-path") or outputs.compiler is FileType.SWIFT_MODULE:
		explicit = _file_output_value(parsed, "-emit-module-path", diagnostics)
		if explicit is not None:
			return ModuleOutput.top_level(VirtualPath.from_string(explicit).resolved_in(working_directory))
		output = parsed.last_value("-o")
		if output is not None and output != "-":
			out_path = VirtualPath.from_string(output).resolved_in(working_directory)
			if outputs.compiler is FileType.SWIFT_MODULE and outputs.linker is None:
				return ModuleOutput.top_level(out_path)
			return ModuleOutput.top_level(out_path.sibling(filename))
		return ModuleOutput.top_level(VirtualPath.relative(filename).resolved_in(working_directory))
	if debug_level is DebugInfoLevel.AST_TYPES and outputs.linker is not None:
		return ModuleOutput.auxiliary(VirtualPath.temporary(filename))
	return None


def compute_module_doc_path(
	parsed: ParsedOptions,
	diagnostics: DiagnosticsEngine,
	module_output: ModuleOutput | None,
	working_directory: VirtualPath | None,
) -> VirtualPath | None:
	if module_output is None:
		return None
	explicit = _file_output_value(parsed, "-emit-module-doc-path", diagnostics)
	if explicit is not None:
		return VirtualPath.from_string(explicit).resolved_in(working_directory)
	return module_output.path.replacing_extension(FileType.SWIFT_DOCUMENTATION.value)


__all__ = [
	"DriverKind",
	"CompilerMode",
	"LinkOutputType",
	"DebugInfoLevel",
	"DebugInfoFormat",
	"DEBUG_LEVEL_SPELLINGS",
	"ModuleOutputKind",
	"ModuleOutput",
	"OutputKinds",
	"split_invocation",
	"determine_driver_kind",
	"compute_compiler_mode",
	"compute_output_kinds",
	"compute_debug_info",
	"compute_module_name",
	"compute_module_output",
	"compute_module_doc_path",
]
