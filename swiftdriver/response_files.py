# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Response-file expansion (`@file` arguments).

A response file holds arguments separated by whitespace; a backslash escapes
the following character, so `bye\\ to\\ you` is a single argument. Files may
reference further response files.

An `@token` that does not name a readable file stays literal: linker magic
such as `-Xlinker @loader_path` must survive expansion untouched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from lark import Lark

from swiftdriver.core.diagnostics import DiagnosticsEngine

logger = logging.getLogger(__name__)

_GRAMMAR_SRC = r"""
start: ARG*

ARG: /(?:\\[\s\S]?|[^\s\\])+/

%import common.WS
%ignore WS
"""

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	maybe_placeholders=False,
)

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


def tokenize_response_file(text: str) -> list[str]:
	"""Split response-file contents into arguments, honoring backslash escapes."""
	tree = _PARSER.parse(text)
	return [_ESCAPE_RE.sub(r"\1", str(tok)) for tok in tree.children]


def expand_response_files(args: Iterable[str], diagnostics: DiagnosticsEngine) -> list[str]:
	"""
	Replace every readable `@file` argument by the file's arguments, recursively.

	A file that is already being expanded further up the chain is reported once
	per occurrence as "recursively expanded" and contributes nothing, so the
	surrounding arguments keep their order.
	"""
	return _expand(list(args), diagnostics, active=set())


def _expand(tokens: list[str], diagnostics: DiagnosticsEngine, active: set[Path]) -> list[str]:
	out: list[str] = []
	for tok in tokens:
		if not tok.startswith("@"):
			out.append(tok)
			continue
		name = tok[1:]
		path = Path(name)
		key = path.resolve()
		if key in active:
			diagnostics.error(
				f"response file '{name}' is recursively expanded",
				code="response-file-cycle",
				phase="response-file",
			)
			continue
		try:
			text = path.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError):
			out.append(tok)
			continue
		logger.debug("expanding response file %s", name)
		active.add(key)
		try:
			out.extend(_expand(tokenize_response_file(text), diagnostics, active))
		finally:
			active.discard(key)
	return out


__all__ = ["expand_response_files", "tokenize_response_file"]
