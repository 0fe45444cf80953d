"""
Diagnostics produced while resolving driver settings.

A diagnostic is a recoverable problem: the driver records it and keeps going
with a best-effort value. Structural failures are `DriverError`s instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Diagnostic:
	"""Represents a driver diagnostic (error/warning/note)."""

	message: str
	code: str | None = None
	# Optional phase label ("options", "response-file", "output-file-map",
	# "settings", "planning") so JSON output can group diagnostics.
	phase: str | None = None
	severity: str = "error"
	notes: list[str] = field(default_factory=list)

	@property
	def description(self) -> str:
		return self.message

	def __str__(self) -> str:
		return f"{self.severity}: {self.message}"

	def to_dict(self) -> dict[str, Any]:
		return {
			"phase": self.phase,
			"code": self.code,
			"message": self.message,
			"severity": self.severity,
			"notes": list(self.notes),
		}


class DiagnosticsEngine:
	"""
	Ordered sink for diagnostics of one driver invocation.

	The engine never raises; callers query `has_errors` once planning is done.
	"""

	def __init__(self) -> None:
		self._diagnostics: list[Diagnostic] = []

	@property
	def diagnostics(self) -> list[Diagnostic]:
		return list(self._diagnostics)

	@property
	def has_errors(self) -> bool:
		return any(d.severity == "error" for d in self._diagnostics)

	def emit(self, diag: Diagnostic) -> None:
		self._diagnostics.append(diag)

	def error(self, message: str, *, code: str | None = None, phase: str | None = None) -> Diagnostic:
		diag = Diagnostic(message=message, code=code, phase=phase, severity="error")
		self.emit(diag)
		return diag

	def warning(self, message: str, *, code: str | None = None, phase: str | None = None) -> Diagnostic:
		diag = Diagnostic(message=message, code=code, phase=phase, severity="warning")
		self.emit(diag)
		return diag

	def __len__(self) -> int:
		return len(self._diagnostics)

	def __repr__(self) -> str:
		return f"DiagnosticsEngine({self._diagnostics!r})"


__all__ = ["Diagnostic", "DiagnosticsEngine"]
