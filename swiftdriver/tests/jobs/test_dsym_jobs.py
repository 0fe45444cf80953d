# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from swiftdriver.core.virtual_path import VirtualPath
from swiftdriver.jobs import JobKind, PathArg

COMMON = ("swiftc", "-target", "x86_64-apple-macosx", "foo.swift", "bar.swift", "-emit-executable", "-module-name", "Test")


def test_no_dsym_without_debug_info(plan) -> None:
	for extra in ((), ("-gnone",)):
		jobs = plan(*COMMON, *extra)
		assert len(jobs) == 3
		assert all(j.kind is not JobKind.GENERATE_DSYM for j in jobs)


def test_dsym_generated_with_full_debug_info(plan) -> None:
	jobs = plan(*COMMON, "-g")
	assert [j.kind for j in jobs] == [
		JobKind.COMPILE,
		JobKind.COMPILE,
		JobKind.MERGE_MODULE,
		JobKind.LINK,
		JobKind.GENERATE_DSYM,
	]
	dsym = jobs[-1]
	assert dsym.tool.name == "dsymutil"
	assert dsym.outputs[-1].file == VirtualPath.relative("Test.dSYM")
	assert PathArg(VirtualPath.relative("Test")) in dsym.command_line

	link = jobs[3]
	assert PathArg(VirtualPath.temporary("Test.swiftmodule")) in link.command_line
	assert "-add_ast_path" in link.arguments()
	assert "-macosx_version_min 10.9.0" in " ".join(link.arguments())


def test_line_tables_get_dsym_without_module(plan) -> None:
	jobs = plan(*COMMON, "-gline-tables-only")
	assert [j.kind for j in jobs] == [JobKind.COMPILE, JobKind.COMPILE, JobKind.LINK, JobKind.GENERATE_DSYM]


def test_static_archives_get_no_dsym(plan) -> None:
	jobs = plan("swiftc", "-target", "x86_64-apple-macosx", "foo.swift", "-emit-library", "-static", "-g")
	assert all(j.kind is not JobKind.GENERATE_DSYM for j in jobs)


def test_elf_targets_get_no_dsym(plan) -> None:
	jobs = plan("swiftc", "-target", "x86_64-unknown-linux-gnu", "foo.swift", "-g")
	assert all(j.kind is not JobKind.GENERATE_DSYM for j in jobs)
