# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from swiftdriver.jobs import Flag, JobKind

LINUX = "x86_64-unknown-linux-gnu"


def test_immediate_mode_interprets_with_program_arguments(plan) -> None:
	jobs = plan("swift", "main.swift", "-target", LINUX, "--", "-a", "b")
	assert len(jobs) == 1
	job = jobs[0]
	assert job.kind is JobKind.INTERPRET
	assert job.tool.name == "swift"
	assert job.arguments() == [
		"-frontend", "-interpret", "main.swift", "-target", LINUX,
		"-module-name", "main", "--", "-a", "b",
	]


def test_repl_mode(plan) -> None:
	for args in (("swift", "-target", LINUX), ("swiftc", "-repl", "-target", LINUX)):
		jobs = plan(*args)
		assert [j.kind for j in jobs] == [JobKind.REPL]
		assert jobs[0].arguments()[:2] == ["-frontend", "-repl"]
		assert Flag("REPL") in jobs[0].command_line


def test_frontend_passthrough_keeps_arguments_verbatim(plan) -> None:
	jobs = plan("swiftc", "-frontend", "-c", "-primary-file", "a.swift", "-some-frontend-only-flag")
	assert [j.kind for j in jobs] == [JobKind.PASSTHROUGH]
	assert jobs[0].tool.name == "swift"
	assert jobs[0].arguments() == ["-frontend", "-c", "-primary-file", "a.swift", "-some-frontend-only-flag"]


def test_tool_passthrough_modes(plan) -> None:
	autolink = plan("swift-autolink-extract", "a.o", "-o", "a.autolink")
	assert autolink[0].tool.name == "swift-autolink-extract"
	assert autolink[0].arguments() == ["a.o", "-o", "a.autolink"]
	indent = plan("swiftc", "--driver-mode=swift-indent", "-in-place", "a.swift")
	assert indent[0].tool.name == "swift-indent"
	assert indent[0].arguments() == ["-in-place", "a.swift"]
	wrap = plan("swiftc", "-modulewrap", "M.swiftmodule")
	assert wrap[0].arguments() == ["-modulewrap", "M.swiftmodule"]


def test_frontend_executable_name_supplies_the_subcommand(plan) -> None:
	jobs = plan("swift-frontend", "-c", "a.swift")
	assert [j.kind for j in jobs] == [JobKind.PASSTHROUGH]
	assert jobs[0].tool.name == "swift"
	assert jobs[0].arguments() == ["-frontend", "-c", "a.swift"]
	# Spelled out again after the executable name, it is not doubled.
	again = plan("swift-frontend", "-frontend", "-c", "a.swift")
	assert again[0].arguments() == ["-frontend", "-c", "a.swift"]
	mode = plan("swiftc", "--driver-mode=swift-frontend", "-typecheck", "a.swift")
	assert mode[0].arguments() == ["-frontend", "-typecheck", "a.swift"]


def test_job_to_dict(plan) -> None:
	job = plan("swiftc", "-c", "a.swift", "-target", LINUX)[0]
	data = job.to_dict()
	assert data["kind"] == "compile"
	assert data["tool"] == "swift"
	assert data["inputs"] == [{"path": "a.swift", "kind": "relative", "type": "swift"}]
	assert data["outputs"] == [{"path": "a.o", "kind": "relative", "type": "object"}]
