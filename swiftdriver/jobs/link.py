# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Link-stage job construction, per platform family.

- Darwin dynamic libraries and executables go through `ld` with `-arch` and
  the deployment-target flag; static libraries through `libtool -static`.
- ELF targets link with `clang` (`-shared` for libraries) and archive with
  `ar crs`.

Linker search paths and `-Xlinker` arguments reach dynamic-library and
executable links only; archivers never see them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from swiftdriver.core.file_types import FileType, TypedVirtualPath
from swiftdriver.core.virtual_path import STANDARD_OUTPUT, VirtualPath
from swiftdriver.settings import DebugInfoLevel, LinkOutputType

from .job import CommandLine, Job, JobKind, PathArg

if TYPE_CHECKING:
	from swiftdriver.driver import Driver

ARCHIVER_FLAGS = "crs"  # insert, create, write symbol index
DSYM_EXTENSION = "dSYM"


def link_output_path(driver: "Driver") -> VirtualPath:
	linker_output = driver.linker_output_type
	assert linker_output is not None
	explicit = driver.parsed_options.last_value("-o")
	if explicit == "-":
		return STANDARD_OUTPUT
	if explicit is not None:
		return driver.resolved_path(explicit)
	triple = driver.target_triple
	name = driver.module_name
	if linker_output is LinkOutputType.EXECUTABLE:
		filename = name
	elif linker_output is LinkOutputType.DYNAMIC_LIBRARY:
		filename = f"lib{name}.{triple.dynamic_library_extension}"
	else:
		filename = f"lib{name}.{triple.static_library_extension}"
	return VirtualPath.relative(filename).resolved_in(driver.working_directory)


def plan_link_job(
	driver: "Driver",
	objects: list[TypedVirtualPath],
	autolink: TypedVirtualPath | None = None,
	module: TypedVirtualPath | None = None,
	*,
	ast_modules: Sequence[TypedVirtualPath] = (),
	autolinks: Sequence[TypedVirtualPath] = (),
) -> Job:
	"""
	`ast_modules` are module inputs handed to ld with `-add_ast_path`;
	`autolinks` are autolink inputs handed to clang as response files.
	Static archives take neither.
	"""
	output = TypedVirtualPath(link_output_path(driver), FileType.IMAGE)
	linker_output = driver.linker_output_type
	if linker_output is LinkOutputType.STATIC_LIBRARY:
		return _static_archive_job(driver, objects, output)
	if driver.target_triple.is_darwin:
		return _darwin_link_job(driver, objects, output, module, ast_modules)
	extracted = [autolink] if autolink is not None else []
	return _unix_link_job(driver, objects, output, extracted + list(autolinks))


def _forward_linker_options(driver: "Driver", cmd: CommandLine, *, wrap_xlinker: bool) -> None:
	"""Forward -L, -l and -Xlinker in command-line order."""
	for parsed in driver.parsed_options:
		ident = parsed.identity
		if ident == "-L":
			cmd.option_path("-L", driver.resolved_path(parsed.value))
		elif ident == "-l":
			cmd.flag("-l" + parsed.value)
		elif ident == "-Xlinker":
			if wrap_xlinker:
				cmd.flag("-Xlinker")
			cmd.flag(parsed.value)


def _darwin_link_job(
	driver: "Driver",
	objects: list[TypedVirtualPath],
	output: TypedVirtualPath,
	module: TypedVirtualPath | None,
	ast_modules: Sequence[TypedVirtualPath],
) -> Job:
	triple = driver.target_triple
	cmd = CommandLine()
	if driver.linker_output_type is LinkOutputType.DYNAMIC_LIBRARY:
		cmd.flag("-dylib")
	cmd.paths(o.file for o in objects)
	inputs = list(objects)
	if module is not None and driver.debug_info_level is DebugInfoLevel.AST_TYPES:
		cmd.option_path("-add_ast_path", module.file)
		inputs.append(module)
	for ast in ast_modules:
		cmd.option_path("-add_ast_path", ast.file)
		inputs.append(ast)
	# ld is invoked directly, so -Xlinker values are plain linker flags.
	_forward_linker_options(driver, cmd, wrap_xlinker=False)
	cmd.flag("-arch").flag(triple.arch)
	min_flag = triple.min_version_flag
	if min_flag is not None:
		cmd.flag(min_flag).flag(triple.version_string)
	cmd.option_path("-o", output.file)
	return Job(
		kind=JobKind.LINK,
		tool=driver.toolchain.linker,
		command_line=cmd.freeze(),
		inputs=tuple(inputs),
		outputs=(output,),
	)


def _unix_link_job(
	driver: "Driver",
	objects: list[TypedVirtualPath],
	output: TypedVirtualPath,
	autolinks: list[TypedVirtualPath],
) -> Job:
	cmd = CommandLine()
	cmd.paths(o.file for o in objects)
	inputs = list(objects)
	for autolink in autolinks:
		cmd.args.append(PathArg(autolink.file, prefix="@"))
		inputs.append(autolink)
	if driver.linker_output_type is LinkOutputType.DYNAMIC_LIBRARY:
		cmd.flag("-shared")
	cmd.flag("-target").flag(driver.target_triple.triple)
	_forward_linker_options(driver, cmd, wrap_xlinker=True)
	cmd.option_path("-o", output.file)
	return Job(
		kind=JobKind.LINK,
		tool=driver.toolchain.linker,
		command_line=cmd.freeze(),
		inputs=tuple(inputs),
		outputs=(output,),
	)


def _static_archive_job(driver: "Driver", objects: list[TypedVirtualPath], output: TypedVirtualPath) -> Job:
	cmd = CommandLine()
	if driver.target_triple.is_darwin:
		cmd.flag("-static")
		cmd.paths(o.file for o in objects)
		cmd.option_path("-o", output.file)
	else:
		cmd.flag(ARCHIVER_FLAGS)
		cmd.path(output.file)
		cmd.paths(o.file for o in objects)
	return Job(
		kind=JobKind.LINK,
		tool=driver.toolchain.static_archiver,
		command_line=cmd.freeze(),
		inputs=tuple(objects),
		outputs=(output,),
	)


def plan_dsym_job(driver: "Driver", linked: TypedVirtualPath) -> Job:
	bundle = VirtualPath(linked.file.kind, f"{linked.file.name}.{DSYM_EXTENSION}")
	output = TypedVirtualPath(bundle, FileType.DSYM)
	cmd = CommandLine()
	cmd.path(linked.file)
	cmd.option_path("-o", bundle)
	return Job(
		kind=JobKind.GENERATE_DSYM,
		tool=driver.toolchain.dsym_generator,
		command_line=cmd.freeze(),
		inputs=(linked,),
		outputs=(output,),
	)


__all__ = ["link_output_path", "plan_link_job", "plan_dsym_job"]
