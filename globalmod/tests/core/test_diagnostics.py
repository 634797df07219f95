# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from globalmod.core import ConfigError, Diagnostic, GlobalModuleError, Span, UnsupportedSyntaxError
from globalmod.parser.ast import Located


def test_span_from_located() -> None:
	span = Span.from_loc(Located(3, 7), file="a.js")
	assert (span.file, span.line, span.column) == ("a.js", 3, 7)
	assert span.describe() == "a.js:3:7"


def test_span_from_none_and_unknown_position() -> None:
	assert Span.from_loc(None, file="a.js").describe() == "a.js"
	assert Span().describe() == "<input>"


def test_span_from_span_fills_missing_file() -> None:
	span = Span(line=1, column=2)
	assert Span.from_loc(span, file="b.js") == Span(file="b.js", line=1, column=2)
	assert Span.from_loc(Span(file="c.js"), file="b.js").file == "c.js"


def test_diagnostic_defaults_and_render() -> None:
	diag = Diagnostic(message="boom", span=None)  # type: ignore[arg-type]
	assert diag.span == Span()
	assert diag.severity == "error"
	assert Diagnostic(message="boom", span=Span(file="a.js", line=1, column=1)).render() == "a.js:1:1: error: boom"


def test_error_codes_and_hierarchy() -> None:
	assert issubclass(ConfigError, GlobalModuleError)
	assert issubclass(UnsupportedSyntaxError, ValueError)
	err = UnsupportedSyntaxError("nope", loc=Located(1, 2))
	assert err.code == "GM0002"
	assert err.loc == Located(1, 2)
	assert ConfigError("x").code == "GM0001"
