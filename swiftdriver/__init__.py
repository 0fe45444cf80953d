# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
swiftdriver: build-planning driver for the Swift toolchain.

The driver turns a `swift`/`swiftc` command line into an ordered list of
external tool invocations. It never compiles or links anything itself. The
CLI entrypoint is `swiftdriver.driver:main`.
"""

__all__ = []
