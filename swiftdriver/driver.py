# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Driver entry points.

`Driver` turns one invocation (executable name first, as in `sys.argv`) into
resolved settings; `plan_build()` turns those settings into jobs. `main` is the
command-line wrapper used by `python -m swiftdriver`.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Mapping

from swiftdriver.core.diagnostics import DiagnosticsEngine
from swiftdriver.core.errors import DriverError
from swiftdriver.core.file_types import FileType, TypedVirtualPath
from swiftdriver.core.triple import Triple
from swiftdriver.core.virtual_path import PathKind, VirtualPath
from swiftdriver.jobs import Job, plan_build
from swiftdriver.options import OptionTable, ParsedOptions
from swiftdriver.output_file_map import OutputFileMap
from swiftdriver.response_files import expand_response_files
from swiftdriver.settings import (
	CompilerMode,
	DebugInfoFormat,
	DebugInfoLevel,
	DriverKind,
	LinkOutputType,
	ModuleOutput,
	compute_compiler_mode,
	compute_debug_info,
	compute_module_doc_path,
	compute_module_name,
	compute_module_output,
	compute_output_kinds,
	split_invocation,
)
from swiftdriver.toolchain import Toolchain

logger = logging.getLogger(__name__)


class Driver:
	"""
	Resolved state of one driver invocation.

	Construction raises DriverError for structural failures (unknown driver
	name, unknown option, missing option value, unreadable output-file map,
	unsupported target). Everything else is reported to `diagnostics` and the
	driver continues with a fallback value.
	"""

	def __init__(
		self,
		args: list[str],
		diagnostics: DiagnosticsEngine | None = None,
		env: Mapping[str, str] | None = None,
		option_table: OptionTable | None = None,
	) -> None:
		self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsEngine()
		self.env = dict(os.environ if env is None else env)
		self.option_table = option_table or OptionTable()
		self.arguments = expand_response_files(args, self.diagnostics)
		self.driver_kind, self.raw_arguments = split_invocation(self.arguments)

		self.parsed_options = ParsedOptions()
		self.working_directory: VirtualPath | None = None
		self.input_files: list[TypedVirtualPath] = []
		self.target_triple: Triple | None = None
		self.output_file_map: OutputFileMap | None = None
		self.compiler_mode: CompilerMode | None = None
		self.compiler_output_type: FileType | None = None
		self.linker_output_type: LinkOutputType | None = None
		self.debug_info_level: DebugInfoLevel | None = None
		self.debug_info_format = DebugInfoFormat.DWARF
		self.module_name = ""
		self.module_output: ModuleOutput | None = None
		self.module_doc_path: VirtualPath | None = None

		if self.driver_kind.is_passthrough:
			# Arguments belong to the target tool; the option table does not apply.
			self.toolchain = Toolchain(None, self.env)
			return

		parsed = self.option_table.parse(self.raw_arguments)
		self.parsed_options = parsed
		self.working_directory = self._compute_working_directory()
		self.input_files = self._compute_input_files()
		target = parsed.last_value("-target")
		self.target_triple = Triple.parse(target) if target is not None else Triple.host()
		self.toolchain = Toolchain(self.target_triple, self.env)
		ofm = parsed.last_value("-output-file-map")
		if ofm is not None:
			self.output_file_map = OutputFileMap.load(str(self.resolved_path(ofm)), self.diagnostics)

		self.compiler_mode = compute_compiler_mode(self.driver_kind, parsed, self.input_files)
		outputs = compute_output_kinds(self.driver_kind, parsed)
		self.compiler_output_type = outputs.compiler
		self.linker_output_type = outputs.linker
		self.debug_info_level, self.debug_info_format = compute_debug_info(parsed, self.diagnostics)
		self.module_name = compute_module_name(
			parsed,
			self.diagnostics,
			compiler_mode=self.compiler_mode,
			outputs=outputs,
			inputs=self.input_files,
		)
		self.module_output = compute_module_output(
			parsed,
			self.diagnostics,
			module_name=self.module_name,
			outputs=outputs,
			debug_level=self.debug_info_level,
			working_directory=self.working_directory,
		)
		self.module_doc_path = compute_module_doc_path(
			parsed, self.diagnostics, self.module_output, self.working_directory
		)
		logger.debug(
			"resolved %s: mode=%s compiler=%s linker=%s module=%s",
			self.driver_kind.name,
			self.compiler_mode.name if self.compiler_mode else None,
			self.compiler_output_type.name if self.compiler_output_type else None,
			self.linker_output_type.name if self.linker_output_type else None,
			self.module_name,
		)

	def _compute_working_directory(self) -> VirtualPath | None:
		value = self.parsed_options.last_value("-working-directory")
		if value is None:
			return None
		path = VirtualPath.from_string(value)
		if path.kind is not PathKind.ABSOLUTE:
			# `-` is a directory name here, not standard input.
			path = VirtualPath.absolute(os.path.join(os.getcwd(), value))
		return path

	def _compute_input_files(self) -> list[TypedVirtualPath]:
		files: list[TypedVirtualPath] = []
		for name in self.parsed_options.inputs:
			path = VirtualPath.from_string(name)
			if path.kind is PathKind.STANDARD_INPUT:
				files.append(TypedVirtualPath(path, FileType.SWIFT))
				continue
			# Unknown extensions are handed to the linker as-is.
			file_type = FileType.from_extension(path.extension) or FileType.OBJECT
			files.append(TypedVirtualPath(path.resolved_in(self.working_directory), file_type))
		return files

	def resolved_path(self, value: str) -> VirtualPath:
		"""A path-valued option argument anchored at the working directory."""
		return VirtualPath.from_string(value).resolved_in(self.working_directory)

	def plan_build(self) -> list[Job]:
		return plan_build(self)


def _configure_logging(verbose: bool) -> None:
	logging.basicConfig(
		level=logging.DEBUG if verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
	)


def main(argv: list[str] | None = None) -> int:
	"""
	Plan a build and print it.

	Prints one shell-quoted command line per job. With --json, prints
	{"exit_code", "jobs", "diagnostics"} instead. Structural errors and error
	diagnostics exit with 1.
	"""
	parser = argparse.ArgumentParser(prog="swiftdriver", description="Swift compiler driver: plan build jobs")
	parser.add_argument("--json", action="store_true", help="Print the plan and diagnostics as JSON")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log planning decisions to stderr")
	parser.add_argument("invocation", help="Driver identity (swift, swiftc, swift-autolink-extract, swift-indent)")
	parser.add_argument("arguments", nargs=argparse.REMAINDER, help="Arguments for the driver")
	args = parser.parse_args(argv)
	_configure_logging(args.verbose)

	diagnostics = DiagnosticsEngine()
	try:
		driver = Driver([args.invocation, *args.arguments], diagnostics=diagnostics)
		jobs = driver.plan_build()
	except DriverError as err:
		if args.json:
			print(json.dumps({"exit_code": 1, "jobs": [], "error": err.to_dict(), "diagnostics": [d.to_dict() for d in diagnostics.diagnostics]}))
		else:
			for diag in diagnostics.diagnostics:
				print(str(diag), file=sys.stderr)
			print(f"error: {err.message}", file=sys.stderr)
		return 1

	exit_code = 1 if diagnostics.has_errors else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"jobs": [job.to_dict() for job in jobs],
			"diagnostics": [d.to_dict() for d in diagnostics.diagnostics],
		}
		print(json.dumps(payload))
	else:
		for diag in diagnostics.diagnostics:
			print(str(diag), file=sys.stderr)
		for job in jobs:
			print(job.description())
	return exit_code


__all__ = ["Driver", "main"]
