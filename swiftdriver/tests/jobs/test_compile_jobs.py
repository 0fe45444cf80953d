# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
from pathlib import Path

from swiftdriver.core.file_types import FileType
from swiftdriver.core.triple import Triple
from swiftdriver.core.virtual_path import VirtualPath
from swiftdriver.driver import Driver
from swiftdriver.jobs import Flag, JobKind, PathArg

MAC = "x86_64-apple-macosx10.15"
LINUX = "x86_64-unknown-linux-gnu"


def test_standard_compile_jobs(plan) -> None:
	jobs = plan("swiftc", "foo.swift", "bar.swift", "-module-name", "Test", "-target", MAC)
	assert len(jobs) == 3
	assert [o.file for o in jobs[0].outputs] == [VirtualPath.temporary("foo.o")]
	assert [o.file for o in jobs[1].outputs] == [VirtualPath.temporary("bar.o")]
	assert "ld" in jobs[2].tool.name
	assert [o.file for o in jobs[2].outputs] == [VirtualPath.relative("Test")]


def test_frontend_argument_forwarding(plan) -> None:
	host = Triple.host().triple
	jobs = plan(
		"swiftc", "-color-diagnostics", "foo.swift", "bar.swift",
		"-working-directory", "/tmp", "-api-diff-data-file", "diff.txt",
		"-Xfrontend", "-HI", "-no-color-diagnostics", "-target", host, "-g",
	)
	cmd = jobs[0].command_line
	assert PathArg(VirtualPath.absolute("/tmp/diff.txt")) in cmd
	assert Flag("-HI") in cmd
	assert Flag("-Xfrontend") not in cmd
	assert Flag("-no-color-diagnostics") in cmd
	assert Flag("-color-diagnostics") not in cmd
	assert Flag("-target") in cmd
	assert Flag(host) in cmd
	assert Flag("-enable-anonymous-context-mangled-names") in cmd
	assert Flag("-g") in cmd


def test_library_compiles_parse_as_library(plan) -> None:
	jobs = plan("swiftc", "foo.swift", "bar.swift", "-emit-library", "-module-name", "Test")
	cmd = jobs[0].command_line
	assert Flag("-module-name") in cmd
	assert Flag("Test") in cmd
	assert Flag("-parse-as-library") in cmd


def test_primary_file_marks_the_compiled_input(plan) -> None:
	jobs = plan("swiftc", "-c", "a.swift", "b.swift", "-target", LINUX)
	assert len(jobs) == 2
	assert jobs[1].arguments()[:6] == ["-frontend", "-c", "a.swift", "-primary-file", "b.swift", "-target"]
	assert [o.file for o in jobs[0].outputs] == [VirtualPath.relative("a.o")]


def test_whole_module_compiles_all_inputs_in_one_job(plan) -> None:
	jobs = plan("swiftc", "-wmo", "a.swift", "b.swift", "-module-name", "M", "-target", LINUX)
	assert [j.kind for j in jobs] == [JobKind.COMPILE, JobKind.AUTOLINK_EXTRACT, JobKind.LINK]
	assert Flag("-primary-file") not in jobs[0].command_line
	assert [o.file for o in jobs[0].outputs] == [VirtualPath.temporary("M.o")]


def test_search_paths_and_sanitizers_are_forwarded(plan) -> None:
	jobs = plan(
		"swiftc", "-c", "a.swift", "-I", "inc", "-I=wibble", "-F", "/fw", "-sdk", "/sdk",
		"-sanitize=address,undefined", "-enable-testing", "-working-directory", "/w", "-target", LINUX,
	)
	args = jobs[0].arguments()
	assert "-I /w/inc -I /w/wibble -F /fw -sdk /sdk" in " ".join(args)
	assert "-sanitize=address,undefined" in args
	assert "-enable-testing" in args


def test_single_object_honors_output_option(plan) -> None:
	jobs = plan("swiftc", "-c", "a.swift", "-o", "out/a.o", "-target", LINUX)
	assert [o.file for o in jobs[0].outputs] == [VirtualPath.relative("out/a.o")]


def test_dependencies_follow_the_primary_output(plan) -> None:
	jobs = plan("swiftc", "-c", "a.swift", "-emit-dependencies", "-target", LINUX)
	assert [(o.file, o.type) for o in jobs[0].outputs] == [
		(VirtualPath.relative("a.o"), FileType.OBJECT),
		(VirtualPath.relative("a.d"), FileType.DEPENDENCIES),
	]
	assert jobs[0].arguments()[-2:] == ["-emit-dependencies-path", "a.d"]


def test_typecheck_has_no_outputs(plan) -> None:
	jobs = plan("swiftc", "-typecheck", "a.swift", "-target", LINUX)
	assert len(jobs) == 1
	assert jobs[0].outputs == ()
	assert Flag("-typecheck") in jobs[0].command_line


def test_output_file_map_supplies_per_input_outputs(tmp_path: Path) -> None:
	ofm = tmp_path / "ofm.json"
	ofm.write_text(
		json.dumps(
			{
				"": {"swift-dependencies": "/build/master.swiftdeps"},
				"/src/a.swift": {"object": "/build/a.swift.o", "swift-dependencies": "/build/a.swiftdeps"},
			}
		),
		encoding="utf-8",
	)
	driver = Driver(
		["swiftc", "/src/a.swift", "/src/b.swift", "-output-file-map", str(ofm), "-module-name", "M", "-target", LINUX],
		env={},
	)
	jobs = driver.plan_build()
	assert [o.file for o in jobs[0].outputs] == [
		VirtualPath.absolute("/build/a.swift.o"),
		VirtualPath.absolute("/build/a.swiftdeps"),
	]
	assert [o.file for o in jobs[1].outputs] == [VirtualPath.temporary("b.o")]
	link = jobs[-1]
	assert PathArg(VirtualPath.absolute("/build/a.swift.o")) in link.command_line

	wmo = Driver(
		["swiftc", "-wmo", "/src/a.swift", "-output-file-map", str(ofm), "-module-name", "M", "-target", LINUX],
		env={},
	).plan_build()
	assert VirtualPath.absolute("/build/master.swiftdeps") in [o.file for o in wmo[0].outputs]


def test_no_inputs_is_a_diagnostic() -> None:
	driver = Driver(["swiftc", "-c", "-target", LINUX], env={})
	assert driver.plan_build() == []
	assert [d.description for d in driver.diagnostics.diagnostics] == ["no input files"]


def test_object_inputs_go_straight_to_the_linker(plan) -> None:
	jobs = plan("swiftc", "a.swift", "prebuilt.o", "-target", MAC)
	assert len(jobs) == 2
	assert PathArg(VirtualPath.relative("prebuilt.o")) in jobs[1].command_line
	assert PathArg(VirtualPath.temporary("a.o")) in jobs[1].command_line


def test_module_inputs_feed_the_darwin_linker() -> None:
	driver = Driver(["swiftc", "a.swift", "Other.swiftmodule", "-target", MAC], env={})
	jobs = driver.plan_build()
	link = jobs[-1]
	assert link.kind is JobKind.LINK
	other = VirtualPath.relative("Other.swiftmodule")
	assert link.arguments()[:3] == ["a.o", "-add_ast_path", "Other.swiftmodule"]
	assert PathArg(other) in link.command_line
	assert other in [i.file for i in link.inputs]
	assert driver.diagnostics.diagnostics == []


def test_autolink_inputs_feed_the_elf_linker_and_the_rest_are_reported() -> None:
	driver = Driver(
		["swiftc", "a.swift", "extra.autolink", "Other.swiftmodule", "x.h", "-target", LINUX],
		env={},
	)
	jobs = driver.plan_build()
	assert [j.kind for j in jobs] == [JobKind.COMPILE, JobKind.AUTOLINK_EXTRACT, JobKind.LINK]
	link = jobs[-1]
	assert link.arguments()[:3] == ["a.o", "@main.autolink", "@extra.autolink"]
	assert VirtualPath.relative("extra.autolink") in [i.file for i in link.inputs]
	assert Flag("-add_ast_path") not in link.command_line
	diags = driver.diagnostics.diagnostics
	assert [d.description for d in diags] == [
		"input file 'Other.swiftmodule' is unused in this build",
		"input file 'x.h' is unused in this build",
	]
	assert all(d.severity == "warning" and d.code == "unused-input" for d in diags)
	assert not driver.diagnostics.has_errors


def test_object_inputs_without_a_link_are_reported() -> None:
	driver = Driver(["swiftc", "-c", "a.swift", "prebuilt.o", "-target", LINUX], env={})
	jobs = driver.plan_build()
	assert [j.kind for j in jobs] == [JobKind.COMPILE]
	assert [d.description for d in driver.diagnostics.diagnostics] == [
		"input file 'prebuilt.o' is unused in this build",
	]
