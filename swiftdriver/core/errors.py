# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class DriverError(Exception):
	"""
	A structural failure that aborts the current driver operation.

	Not frozen: the interpreter assigns `__traceback__` and `__context__` as the
	error propagates, including when it is re-thrown into a generator-based
	context manager.

	Recoverable configuration problems are diagnostics, never DriverErrors.
	The reason code is stable and meant for tests and JSON output.
	"""

	reason_code: str
	message: str
	option: str | None = None
	path: str | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"option": self.option,
			"path": self.path,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.option:
			parts.append(f"option={self.option}")
		if self.path:
			parts.append(f"path={self.path}")
		return " ".join(parts)


def unrecognized_option(spelling: str) -> DriverError:
	return DriverError("unrecognized-option", f"unknown argument: '{spelling}'", option=spelling)


def missing_argument(spelling: str) -> DriverError:
	return DriverError("missing-argument", f"missing argument value for '{spelling}'", option=spelling)


def invalid_driver_name(name: str) -> DriverError:
	return DriverError("invalid-driver-name", f"invalid driver name: '{name}'")


__all__ = ["DriverError", "unrecognized_option", "missing_argument", "invalid_driver_name"]
