"""
swiftdriver.core: shared value types used across parsing and planning.

Modules:
  - errors: DriverError (structural failures)
  - diagnostics: Diagnostic + DiagnosticsEngine (recoverable problems)
  - virtual_path: VirtualPath and its kinds
  - file_types: FileType + TypedVirtualPath
  - triple: target triple parsing
"""

__all__ = [
	"errors",
	"diagnostics",
	"virtual_path",
	"file_types",
	"triple",
]
