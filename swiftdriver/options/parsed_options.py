# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parsed command lines.

`ParsedOptions` keeps every option in the order it was written. Conflicts such
as `-color-diagnostics ... -no-color-diagnostics` are resolved by scanning for
the last occurrence, never through a mapping keyed by option.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from swiftdriver.core.errors import DriverError, missing_argument, unrecognized_option

from .option_table import Option, OptionKind, OptionTable

Argument = str | tuple[str, ...] | None


@dataclass(frozen=True)
class ParsedOption:
	"""One parsed element; `option` is None for positional inputs."""

	option: Option | None
	argument: Argument = None

	@property
	def is_input(self) -> bool:
		return self.option is None

	@property
	def identity(self) -> str | None:
		return self.option.identity if self.option is not None else None

	@property
	def value(self) -> str:
		"""Single-string view of the argument (comma lists are re-joined)."""
		if self.argument is None:
			return ""
		if isinstance(self.argument, tuple):
			return ",".join(self.argument)
		return self.argument

	@property
	def values(self) -> tuple[str, ...]:
		if self.argument is None:
			return ()
		if isinstance(self.argument, tuple):
			return self.argument
		return (self.argument,)

	def tokens(self) -> list[str]:
		"""Canonical token form: separate form for every option that takes a value."""
		opt = self.option
		if opt is None:
			return [self.value]
		if opt.kind is OptionKind.FLAG:
			return [opt.spelling]
		if opt.kind in (OptionKind.SEPARATE, OptionKind.JOINED_OR_SEPARATE):
			return [opt.spelling, self.value]
		# JOINED / COMMA_JOINED have no separate spelling.
		return [opt.spelling + self.value]


@dataclass
class ParsedOptions:
	options: list[ParsedOption] = field(default_factory=list)
	# None when no `--` was seen; the (possibly empty) verbatim tail otherwise.
	tail: list[str] | None = None

	def __iter__(self) -> Iterator[ParsedOption]:
		return iter(self.options)

	def __len__(self) -> int:
		return len(self.options)

	def canonical_arguments(self) -> list[str]:
		out: list[str] = []
		for parsed in self.options:
			out.extend(parsed.tokens())
		if self.tail is not None:
			out.append(OptionTable.TERMINATOR)
			out.extend(self.tail)
		return out

	def __str__(self) -> str:
		return " ".join(_quote(tok) for tok in self.canonical_arguments())

	@property
	def description(self) -> str:
		return str(self)

	# Queries. All names are canonical identities (aliases are folded).

	@property
	def inputs(self) -> list[str]:
		return [p.value for p in self.options if p.is_input]

	def contains(self, name: str) -> bool:
		return any(p.identity == name for p in self.options)

	def has_any(self, *names: str) -> bool:
		wanted = set(names)
		return any(p.identity in wanted for p in self.options)

	def all_of(self, *names: str) -> list[ParsedOption]:
		wanted = set(names)
		return [p for p in self.options if p.identity in wanted]

	def last(self, *names: str) -> ParsedOption | None:
		wanted = set(names)
		for p in reversed(self.options):
			if p.identity in wanted:
				return p
		return None

	def last_value(self, *names: str) -> str | None:
		found = self.last(*names)
		return found.value if found is not None else None

	def in_group(self, group: str) -> list[ParsedOption]:
		return [p for p in self.options if p.option is not None and p.option.in_group(group)]

	def last_in_group(self, group: str) -> ParsedOption | None:
		for p in reversed(self.options):
			if p.option is not None and p.option.in_group(group):
				return p
		return None

	def last_wins(self, positive: str, negative: str, default: bool = False) -> bool:
		"""Resolve a flag/negation pair by whichever appears last."""
		found = self.last(positive, negative)
		if found is None:
			return default
		return found.identity == positive


def _quote(token: str) -> str:
	if token and not any(ch.isspace() or ch in "'\"\\" for ch in token):
		return token
	return shlex.quote(token)


def parse_arguments(table: OptionTable, args: Iterable[str]) -> ParsedOptions:
	"""
	Parse raw tokens against `table`.

	Raises DriverError for unknown options and for options missing their value;
	these are structural failures, not diagnostics.
	"""
	tokens = list(args)
	result = ParsedOptions()
	i = 0
	while i < len(tokens):
		tok = tokens[i]
		i += 1
		if tok == OptionTable.TERMINATOR:
			result.tail = tokens[i:]
			break
		if tok == "-" or not tok.startswith("-"):
			result.options.append(ParsedOption(option=None, argument=tok))
			continue
		opt = table.lookup(tok)
		if opt is None:
			raise unrecognized_option(tok)
		exact = tok == opt.spelling
		if opt.kind is OptionKind.FLAG:
			result.options.append(ParsedOption(option=opt))
		elif opt.kind is OptionKind.JOINED:
			result.options.append(ParsedOption(option=opt, argument=tok[len(opt.spelling):]))
		elif opt.kind is OptionKind.COMMA_JOINED:
			result.options.append(ParsedOption(option=opt, argument=_split_commas(opt, tok[len(opt.spelling):])))
		elif opt.kind is OptionKind.SEPARATE or (opt.kind is OptionKind.JOINED_OR_SEPARATE and exact):
			if i >= len(tokens):
				raise missing_argument(opt.spelling)
			result.options.append(ParsedOption(option=opt, argument=tokens[i]))
			i += 1
		elif opt.kind is OptionKind.JOINED_OR_SEPARATE:
			result.options.append(ParsedOption(option=opt, argument=tok[len(opt.spelling):]))
		else:
			raise AssertionError(f"unhandled option kind {opt.kind}")
	return result


def _split_commas(opt: Option, text: str) -> tuple[str, ...]:
	parts = tuple(text.split(","))
	if opt.allow_empty_segments:
		return parts
	if any(p == "" for p in parts):
		raise DriverError("invalid-value", f"empty value in '{opt.spelling}{text}'", option=opt.spelling)
	return parts


__all__ = ["ParsedOption", "ParsedOptions", "parse_arguments"]
