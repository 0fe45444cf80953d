# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Build planning: resolved driver settings -> ordered job list.

Jobs are appended in dependency order (compile, merge-module, autolink
extraction, link, debug-symbol extraction), so a job only ever consumes
outputs of jobs that precede it in the list.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from swiftdriver.core.file_types import FileType, TypedVirtualPath
from swiftdriver.core.virtual_path import STANDARD_OUTPUT, PathKind, VirtualPath
from swiftdriver.output_file_map import GLOBAL_ENTRY
from swiftdriver.settings import (
	DEBUG_LEVEL_SPELLINGS,
	CompilerMode,
	DriverKind,
	LinkOutputType,
)

from .job import CommandLine, Job, JobKind
from .link import plan_dsym_job, plan_link_job

if TYPE_CHECKING:
	from swiftdriver.driver import Driver

logger = logging.getLogger(__name__)

# Options forwarded to every frontend invocation as `<flag> <resolved path>`.
_FORWARDED_PATH_OPTIONS = {"-I": "-I", "-I=": "-I", "-F": "-F", "-sdk": "-sdk", "-api-diff-data-file": "-api-diff-data-file"}


class BuildPlanner:
	def __init__(self, driver: "Driver") -> None:
		self.driver = driver
		self.jobs: list[Job] = []

	def plan(self) -> list[Job]:
		d = self.driver
		if d.driver_kind.is_passthrough:
			self._add(self._passthrough_job())
			return self.jobs
		if d.compiler_mode is CompilerMode.REPL:
			self._add(self._repl_job())
			return self.jobs
		if d.compiler_mode is CompilerMode.IMMEDIATE:
			self._add(self._interpret_job())
			return self.jobs

		if not d.input_files:
			d.diagnostics.error("no input files", code="no-input-files", phase="planning")
			return self.jobs
		swift_inputs = [i for i in d.input_files if i.type is FileType.SWIFT]
		linked_inputs = self._linked_inputs()

		objects, partial_modules = self._plan_compiles(swift_inputs)
		module = self._plan_merge_module(partial_modules)
		if d.linker_output_type is None:
			return self.jobs

		objects = objects + linked_inputs[FileType.OBJECT]
		autolink = None
		if d.target_triple.requires_autolink_extract:
			autolink = self._plan_autolink_extract(objects)
		link_job = plan_link_job(
			d,
			objects,
			autolink=autolink,
			module=module,
			ast_modules=linked_inputs[FileType.SWIFT_MODULE],
			autolinks=linked_inputs[FileType.AUTOLINK],
		)
		self._add(link_job)

		linked = link_job.outputs[0]
		if (
			d.debug_info_level is not None
			and d.target_triple.is_darwin
			and d.linker_output_type is not LinkOutputType.STATIC_LIBRARY
			and not linked.file.is_standard_stream
		):
			self._add(plan_dsym_job(d, linked))
		return self.jobs

	def _add(self, job: Job) -> None:
		logger.debug("planned %s job: %s", job.kind.value, job.description())
		self.jobs.append(job)

	def _linked_inputs(self) -> dict[FileType, list[TypedVirtualPath]]:
		"""
		Non-Swift inputs the link step consumes, by type.

		Objects go to every link. Darwin executables and dynamic libraries also
		take modules (`-add_ast_path`); ELF ones take autolink files (`@file`).
		Any other input is reported as unused.
		"""
		d = self.driver
		accepted = {FileType.OBJECT: d.linker_output_type is not None}
		links_image = d.linker_output_type in (LinkOutputType.EXECUTABLE, LinkOutputType.DYNAMIC_LIBRARY)
		accepted[FileType.SWIFT_MODULE] = links_image and d.target_triple.is_darwin
		accepted[FileType.AUTOLINK] = links_image and d.target_triple.requires_autolink_extract
		linked: dict[FileType, list[TypedVirtualPath]] = {ft: [] for ft in accepted}
		for inp in d.input_files:
			if inp.type is FileType.SWIFT:
				continue
			if accepted.get(inp.type):
				linked[inp.type].append(inp)
			else:
				d.diagnostics.warning(
					f"input file '{inp.file}' is unused in this build",
					code="unused-input",
					phase="planning",
				)
		return linked

	# Compile jobs.

	def _plan_compiles(self, swift_inputs: list[TypedVirtualPath]) -> tuple[list[TypedVirtualPath], list[TypedVirtualPath]]:
		"""Returns (object outputs, per-file modules that still need merging)."""
		d = self.driver
		if not swift_inputs:
			return [], []
		if d.compiler_mode is CompilerMode.SINGLE_COMPILE:
			primaries: list[int | None] = [None]
		else:
			primaries = list(range(len(swift_inputs)))
		per_file_modules = d.module_output is not None and len(primaries) > 1
		objects: list[TypedVirtualPath] = []
		partial_modules: list[TypedVirtualPath] = []
		for primary in primaries:
			job = self._compile_job(swift_inputs, primary, per_file_modules)
			self._add(job)
			objects.extend(o for o in job.outputs if o.type is FileType.OBJECT)
			if per_file_modules:
				partial_modules.extend(o for o in job.outputs if o.type is FileType.SWIFT_MODULE)
		return objects, partial_modules

	def _mapped(self, source: TypedVirtualPath | None, output_type: FileType) -> VirtualPath | None:
		ofm = self.driver.output_file_map
		if ofm is None:
			return None
		key = GLOBAL_ENTRY if source is None else str(source.file)
		return ofm.existing_output(key, output_type)

	def _object_path(self, stem: str, single_output: bool) -> VirtualPath:
		d = self.driver
		filename = f"{stem}.{FileType.OBJECT.value}"
		if d.linker_output_type is not None:
			return VirtualPath.temporary(filename)
		# Objects are the final product: honor -o for a single object.
		explicit = d.parsed_options.last_value("-o")
		if explicit is not None and single_output:
			return STANDARD_OUTPUT if explicit == "-" else d.resolved_path(explicit)
		return VirtualPath.relative(filename).resolved_in(d.working_directory)

	def _compile_job(self, swift_inputs: list[TypedVirtualPath], primary: int | None, per_file_modules: bool) -> Job:
		d = self.driver
		source = swift_inputs[primary] if primary is not None else None
		if source is not None and source.file.kind is not PathKind.STANDARD_INPUT:
			stem = source.file.basename_without_ext
		else:
			stem = d.module_name
		single_output = primary is None or len(swift_inputs) == 1

		outputs: list[TypedVirtualPath] = []
		primary_output: VirtualPath | None = None
		if d.compiler_output_type is FileType.OBJECT:
			obj = self._mapped(source, FileType.OBJECT) or self._object_path(stem, single_output)
			outputs.append(TypedVirtualPath(obj, FileType.OBJECT))
			primary_output = obj
		if d.module_output is not None:
			if per_file_modules:
				mod = self._mapped(source, FileType.SWIFT_MODULE) or VirtualPath.temporary(f"{stem}.swiftmodule")
				doc = self._mapped(source, FileType.SWIFT_DOCUMENTATION) or VirtualPath.temporary(f"{stem}.swiftdoc")
			else:
				mod = d.module_output.path
				doc = d.module_doc_path or mod.replacing_extension(FileType.SWIFT_DOCUMENTATION.value)
			outputs.append(TypedVirtualPath(mod, FileType.SWIFT_MODULE))
			outputs.append(TypedVirtualPath(doc, FileType.SWIFT_DOCUMENTATION))
			primary_output = primary_output or mod
		if d.parsed_options.contains("-emit-dependencies"):
			deps = self._mapped(source, FileType.DEPENDENCIES)
			if deps is None:
				if primary_output is not None and not primary_output.is_standard_stream:
					deps = primary_output.replacing_extension(FileType.DEPENDENCIES.value)
				else:
					deps = VirtualPath.temporary(f"{stem}.{FileType.DEPENDENCIES.value}")
			outputs.append(TypedVirtualPath(deps, FileType.DEPENDENCIES))
		swift_deps = self._mapped(source, FileType.SWIFT_DEPS)
		if swift_deps is not None:
			outputs.append(TypedVirtualPath(swift_deps, FileType.SWIFT_DEPS))

		cmd = CommandLine()
		cmd.flag("-frontend")
		if d.compiler_output_type is FileType.OBJECT:
			cmd.flag("-c")
		elif d.compiler_output_type is FileType.SWIFT_MODULE:
			cmd.flag("-emit-module")
		else:
			cmd.flag("-typecheck")
		for index, inp in enumerate(swift_inputs):
			if index == primary:
				cmd.flag("-primary-file")
			cmd.path(inp.file)
		self._add_frontend_options(cmd)
		for out in outputs:
			cmd.option_path(_OUTPUT_FLAGS[out.type], out.file)

		return Job(
			kind=JobKind.COMPILE,
			tool=d.toolchain.frontend,
			command_line=cmd.freeze(),
			inputs=tuple(swift_inputs),
			outputs=tuple(outputs),
		)

	def _add_frontend_options(self, cmd: CommandLine) -> None:
		d = self.driver
		parsed = d.parsed_options
		cmd.flag("-target").flag(d.target_triple.triple)
		if parsed.has_any("-color-diagnostics", "-no-color-diagnostics"):
			if parsed.last_wins("-color-diagnostics", "-no-color-diagnostics"):
				cmd.flag("-color-diagnostics")
			else:
				cmd.flag("-no-color-diagnostics")
		for opt in parsed:
			ident = opt.identity
			if ident in _FORWARDED_PATH_OPTIONS:
				cmd.option_path(_FORWARDED_PATH_OPTIONS[ident], d.resolved_path(opt.value))
			elif ident == "-sanitize=":
				cmd.flag("-sanitize=" + opt.value)
			elif ident == "-enable-testing":
				cmd.flag("-enable-testing")
		if d.debug_info_level is not None:
			cmd.flag(DEBUG_LEVEL_SPELLINGS[d.debug_info_level])
			if parsed.contains("-debug-info-format="):
				cmd.flag(f"-debug-info-format={d.debug_info_format.value}")
			cmd.flag("-enable-anonymous-context-mangled-names")
		self._add_bridging_header(cmd)
		if parsed.contains("-parse-as-library") or d.linker_output_type in (
			LinkOutputType.DYNAMIC_LIBRARY,
			LinkOutputType.STATIC_LIBRARY,
		):
			cmd.flag("-parse-as-library")
		if parsed.contains("-parse-stdlib"):
			cmd.flag("-parse-stdlib")
		cmd.flag("-module-name").flag(d.module_name)
		for opt in parsed.all_of("-Xfrontend"):
			cmd.flag(opt.value)

	def _add_bridging_header(self, cmd: CommandLine) -> None:
		header = self.driver.parsed_options.last_value("-import-objc-header")
		if header is not None:
			cmd.option_path("-import-objc-header", self.driver.resolved_path(header))

	# Post-compile jobs.

	def _plan_merge_module(self, partial_modules: list[TypedVirtualPath]) -> TypedVirtualPath | None:
		"""Merge per-file modules; returns the final module, if the build produces one."""
		d = self.driver
		if d.module_output is None:
			return None
		final_module = TypedVirtualPath(d.module_output.path, FileType.SWIFT_MODULE)
		if not partial_modules:
			return final_module
		doc_path = d.module_doc_path or d.module_output.path.replacing_extension(FileType.SWIFT_DOCUMENTATION.value)
		final_doc = TypedVirtualPath(doc_path, FileType.SWIFT_DOCUMENTATION)

		cmd = CommandLine()
		cmd.flag("-frontend").flag("-merge-modules").flag("-emit-module")
		cmd.paths(m.file for m in partial_modules)
		cmd.flag("-parse-as-library")
		cmd.flag("-target").flag(d.target_triple.triple)
		self._add_bridging_header(cmd)
		cmd.flag("-module-name").flag(d.module_name)
		cmd.option_path("-o", final_module.file)
		cmd.option_path("-emit-module-doc-path", final_doc.file)
		self._add(
			Job(
				kind=JobKind.MERGE_MODULE,
				tool=d.toolchain.frontend,
				command_line=cmd.freeze(),
				inputs=tuple(partial_modules),
				outputs=(final_module, final_doc),
			)
		)
		return final_module

	def _plan_autolink_extract(self, objects: list[TypedVirtualPath]) -> TypedVirtualPath:
		d = self.driver
		output = TypedVirtualPath(
			VirtualPath.temporary(f"{d.module_name}.{FileType.AUTOLINK.value}"),
			FileType.AUTOLINK,
		)
		cmd = CommandLine()
		cmd.paths(o.file for o in objects)
		cmd.option_path("-o", output.file)
		self._add(
			Job(
				kind=JobKind.AUTOLINK_EXTRACT,
				tool=d.toolchain.autolink_extractor,
				command_line=cmd.freeze(),
				inputs=tuple(objects),
				outputs=(output,),
			)
		)
		return output

	# Single-job modes.

	def _interpret_job(self) -> Job:
		d = self.driver
		cmd = CommandLine()
		cmd.flag("-frontend").flag("-interpret")
		cmd.paths(i.file for i in d.input_files)
		self._add_frontend_options(cmd)
		tail = d.parsed_options.tail
		if tail:
			cmd.flag("--").flags(tail)
		return Job(
			kind=JobKind.INTERPRET,
			tool=d.toolchain.frontend,
			command_line=cmd.freeze(),
			inputs=tuple(d.input_files),
		)

	def _repl_job(self) -> Job:
		d = self.driver
		cmd = CommandLine()
		cmd.flag("-frontend").flag("-repl")
		self._add_frontend_options(cmd)
		return Job(kind=JobKind.REPL, tool=d.toolchain.frontend, command_line=cmd.freeze())

	def _passthrough_job(self) -> Job:
		d = self.driver
		if d.driver_kind is DriverKind.AUTOLINK_EXTRACT:
			tool = d.toolchain.autolink_extractor
		elif d.driver_kind is DriverKind.INDENT:
			tool = d.toolchain.indent
		else:
			tool = d.toolchain.frontend
		args = list(d.raw_arguments)
		subcommand = _PASSTHROUGH_SUBCOMMANDS.get(d.driver_kind)
		# `swift-frontend -c a.swift` names the subcommand through the executable.
		if subcommand is not None and args[:1] != [subcommand]:
			args.insert(0, subcommand)
		cmd = CommandLine().flags(args)
		return Job(kind=JobKind.PASSTHROUGH, tool=tool, command_line=cmd.freeze())


_PASSTHROUGH_SUBCOMMANDS: dict[DriverKind, str] = {
	DriverKind.FRONTEND: "-frontend",
	DriverKind.MODULE_WRAP: "-modulewrap",
}


_OUTPUT_FLAGS: dict[FileType, str] = {
	FileType.OBJECT: "-o",
	FileType.SWIFT_MODULE: "-emit-module-path",
	FileType.SWIFT_DOCUMENTATION: "-emit-module-doc-path",
	FileType.DEPENDENCIES: "-emit-dependencies-path",
	FileType.SWIFT_DEPS: "-emit-reference-dependencies-path",
}


def plan_build(driver: "Driver") -> list[Job]:
	return BuildPlanner(driver).plan()


__all__ = ["BuildPlanner", "plan_build"]
