# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Option table and command-line parsing for the driver.
"""

from .option_table import (
	DEBUG_LEVELS,
	DEFAULT_OPTIONS,
	FRONTEND,
	LINKER,
	MODES,
	Option,
	OptionKind,
	OptionTable,
)
from .parsed_options import ParsedOption, ParsedOptions, parse_arguments

__all__ = [
	"DEBUG_LEVELS",
	"DEFAULT_OPTIONS",
	"FRONTEND",
	"LINKER",
	"MODES",
	"Option",
	"OptionKind",
	"OptionTable",
	"ParsedOption",
	"ParsedOptions",
	"parse_arguments",
]
