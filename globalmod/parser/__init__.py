# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
JS module parser.

`parse_module` raises on malformed input; `parse_module_source` and
`parse_module_file` report the failure as a `Diagnostic` instead, which is
what the driver uses.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from lark.exceptions import UnexpectedInput

from . import ast
from .lexer import JsSyntaxError
from .parser import parse_module
from globalmod.core.diagnostics import Diagnostic
from globalmod.core.span import Span


def parse_module_source(source: str, file: Optional[str] = None) -> Tuple[Optional[ast.Program], List[Diagnostic]]:
	"""Parse `source`; on failure return (None, [diagnostic])."""
	try:
		return parse_module(source), []
	except (UnexpectedInput, JsSyntaxError) as err:
		span = Span(
			file=file,
			line=getattr(err, "line", None),
			column=getattr(err, "column", None),
			raw=err,
		)
		message = str(err).strip().splitlines()[0] if str(err).strip() else type(err).__name__
		return None, [Diagnostic(message=message, code="GM0100", phase="parser", severity="error", span=span)]


def parse_module_file(path: Path) -> Tuple[Optional[ast.Program], List[Diagnostic]]:
	return parse_module_source(Path(path).read_text(encoding="utf-8"), file=str(path))


__all__ = ["ast", "JsSyntaxError", "parse_module", "parse_module_source", "parse_module_file"]
