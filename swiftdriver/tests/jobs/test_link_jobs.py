# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from swiftdriver.core.file_types import FileType
from swiftdriver.core.virtual_path import VirtualPath
from swiftdriver.jobs import Flag, JobKind, PathArg

COMMON = ("swiftc", "foo.swift", "bar.swift", "-module-name", "Test")
FOO_O = PathArg(VirtualPath.temporary("foo.o"))
BAR_O = PathArg(VirtualPath.temporary("bar.o"))


def _no_autolink(jobs) -> bool:
	return all(j.kind is not JobKind.AUTOLINK_EXTRACT for j in jobs)


def test_macos_dynamic_library(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-target", "x86_64-apple-macosx10.15")
	assert len(jobs) == 3
	assert _no_autolink(jobs)
	link = jobs[2]
	assert link.kind is JobKind.LINK
	cmd = link.command_line
	for flag in ("-dylib", "-arch", "x86_64", "-macosx_version_min", "10.15.0"):
		assert Flag(flag) in cmd
	assert link.outputs[0].file == VirtualPath.relative("libTest.dylib")
	assert link.outputs[0].type is FileType.IMAGE
	assert Flag("-static") not in cmd
	assert Flag("-shared") not in cmd


def test_ios_dynamic_library(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-target", "arm64-apple-ios10.0")
	assert len(jobs) == 3
	assert _no_autolink(jobs)
	cmd = jobs[2].command_line
	for flag in ("-dylib", "-arch", "arm64", "-iphoneos_version_min", "10.0.0"):
		assert Flag(flag) in cmd
	assert jobs[2].outputs[0].file == VirtualPath.relative("libTest.dylib")
	assert Flag("-static") not in cmd
	assert Flag("-shared") not in cmd


def test_darwin_linker_flags_are_forwarded(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-L", "/tmp", "-Xlinker", "-w", "-target", "x86_64-apple-macosx10.15")
	assert len(jobs) == 3
	cmd = jobs[2].command_line
	assert Flag("-dylib") in cmd
	assert Flag("-w") in cmd
	assert Flag("-Xlinker") not in cmd
	assert Flag("-L") in cmd
	assert PathArg(VirtualPath.absolute("/tmp")) in cmd
	assert jobs[2].outputs[0].file == VirtualPath.relative("libTest.dylib")


def test_darwin_static_library_skips_linker_flags(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-static", "-L", "/tmp", "-Xlinker", "-w", "-target", "x86_64-apple-macosx10.15")
	assert len(jobs) == 3
	assert _no_autolink(jobs)
	link = jobs[2]
	assert link.kind is JobKind.LINK
	assert link.tool.name == "libtool"
	cmd = link.command_line
	assert Flag("-static") in cmd
	assert Flag("-o") in cmd
	assert FOO_O in cmd
	assert BAR_O in cmd
	assert link.outputs[0].file == VirtualPath.relative("libTest.a")
	assert Flag("-w") not in cmd
	assert Flag("-L") not in cmd
	assert PathArg(VirtualPath.absolute("/tmp")) not in cmd
	assert Flag("-dylib") not in cmd
	assert Flag("-shared") not in cmd


def test_darwin_executable(plan) -> None:
	jobs = plan(*COMMON, "-emit-executable", "-target", "x86_64-apple-macosx10.15")
	assert len(jobs) == 3
	cmd = jobs[2].command_line
	assert Flag("-o") in cmd
	assert FOO_O in cmd
	assert BAR_O in cmd
	assert jobs[2].outputs[0].file == VirtualPath.relative("Test")
	for flag in ("-static", "-dylib", "-shared"):
		assert Flag(flag) not in cmd


def test_linux_shared_library_extracts_autolink_entries(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-target", "x86_64-unknown-linux")
	assert len(jobs) == 4
	autolink = jobs[2]
	assert autolink.kind is JobKind.AUTOLINK_EXTRACT
	assert autolink.tool.name == "swift-autolink-extract"
	assert FOO_O in autolink.command_line
	assert BAR_O in autolink.command_line
	assert PathArg(VirtualPath.temporary("Test.autolink")) in autolink.command_line

	link = jobs[3]
	assert link.kind is JobKind.LINK
	assert link.tool.name == "clang"
	cmd = link.command_line
	assert Flag("-o") in cmd
	assert Flag("-shared") in cmd
	assert FOO_O in cmd
	assert BAR_O in cmd
	assert PathArg(VirtualPath.temporary("Test.autolink"), prefix="@") in cmd
	assert link.outputs[0].file == VirtualPath.relative("libTest.so")
	assert Flag("-dylib") not in cmd
	assert Flag("-static") not in cmd


def test_linux_static_library_uses_ar(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-static", "-target", "x86_64-unknown-linux")
	assert len(jobs) == 4
	assert jobs[2].kind is JobKind.AUTOLINK_EXTRACT
	link = jobs[3]
	assert link.tool.name == "ar"
	assert link.arguments()[:2] == ["crs", "libTest.a"]
	cmd = link.command_line
	assert FOO_O in cmd
	assert BAR_O in cmd
	assert link.outputs[0].file == VirtualPath.relative("libTest.a")
	for flag in ("-o", "-dylib", "-static", "-shared"):
		assert Flag(flag) not in cmd


def test_linux_xlinker_pairs_pass_through_clang(plan) -> None:
	jobs = plan(*COMMON, "-Xlinker", "--as-needed", "-lm", "-target", "x86_64-unknown-linux-gnu")
	args = jobs[-1].arguments()
	assert "-Xlinker --as-needed -lm" in " ".join(args)


def test_explicit_output_and_working_directory(plan) -> None:
	jobs = plan(*COMMON, "-o", "bin/tool", "-working-directory", "/w", "-target", "x86_64-unknown-linux-gnu")
	assert jobs[-1].outputs[0].file == VirtualPath.absolute("/w/bin/tool")
	assert jobs[-1].arguments()[-2:] == ["-o", "/w/bin/tool"]


def test_temporaries_render_under_a_scratch_directory(plan) -> None:
	jobs = plan(*COMMON, "-target", "x86_64-unknown-linux-gnu")
	args = jobs[-1].arguments("/scratch")
	assert args[:3] == ["/scratch/foo.o", "/scratch/bar.o", "@/scratch/Test.autolink"]


def test_linux_executable_exact_command_line(plan) -> None:
	jobs = plan(*COMMON, "-target", "x86_64-unknown-linux-gnu")
	link = jobs[-1]
	assert link.tool.name == "clang"
	assert link.arguments() == [
		"foo.o", "bar.o", "@Test.autolink",
		"-target", "x86_64-unknown-linux-gnu",
		"-o", "Test",
	]
	for flag in ("-shared", "-dylib", "-static"):
		assert Flag(flag) not in link.command_line


def test_linux_shared_library_exact_command_line(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-lm", "-target", "x86_64-unknown-linux-gnu")
	assert jobs[-1].arguments() == [
		"foo.o", "bar.o", "@Test.autolink", "-shared",
		"-target", "x86_64-unknown-linux-gnu",
		"-lm", "-o", "libTest.so",
	]


def test_darwin_executable_exact_command_line(plan) -> None:
	jobs = plan(*COMMON, "-emit-executable", "-target", "x86_64-apple-macosx10.15")
	link = jobs[-1]
	assert link.tool.name == "ld"
	assert link.arguments() == [
		"foo.o", "bar.o",
		"-arch", "x86_64", "-macosx_version_min", "10.15.0",
		"-o", "Test",
	]


def test_darwin_dynamic_library_exact_command_line(plan) -> None:
	jobs = plan(*COMMON, "-emit-library", "-Xlinker", "-w", "-target", "x86_64-apple-macosx10.15")
	assert jobs[-1].arguments() == [
		"-dylib", "foo.o", "bar.o", "-w",
		"-arch", "x86_64", "-macosx_version_min", "10.15.0",
		"-o", "libTest.dylib",
	]
