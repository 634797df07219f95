# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from globalmod.parser import ast as js
from globalmod.parser import parse_module
from globalmod.printer import print_expression, print_module


def _reprint(source: str) -> str:
	return print_module(parse_module(source))


@pytest.mark.parametrize(
	"source",
	[
		'import a, { b as c, d } from "./x";\n',
		"import * as ns from 'ns';\n",
		'export { a, b as c };\n',
		'export * as ns from "./ns";\n',
		"const { a, b: [c, d = 1], ...rest } = obj;\n",
		"const h = x => ({ x });\n",
		"const s = tag`a${b}c`;\n",
		"const r = new Foo(1).bar?.baz;\n",
		"let v = a ?? (b || c);\n",
		"x = (a, b);\n",
		"export default (function() {});\n",
		"do {\n  i++;\n} while (i < 3);\n",
	],
)
def test_reprint_is_stable(source: str) -> None:
	assert _reprint(source) == source


def test_reprint_class() -> None:
	source = """class A extends B {
  static x = 1;
  constructor(a) {
    super(a);
  }
  get y() {
    return this.x;
  }
}
"""
	assert _reprint(source) == source


def test_reprint_async_arrow_block() -> None:
	source = "const f = async (a, b = 2) => {\n  await g(a);\n};\n"
	assert _reprint(source) == source


def test_reprint_try_and_switch() -> None:
	source = """try {
  a();
} catch (e) {
  b(e);
} finally {
  c();
}
switch (x) {
  case 1:
    y();
    break;
  default:
    z();
}
"""
	assert _reprint(source) == source


def test_reprint_normalizes_layout() -> None:
	assert _reprint("let a=1\nif(a){foo( a,b )}") == "let a = 1;\nif (a) {\n  foo(a, b);\n}\n"


def test_empty_program_prints_nothing() -> None:
	assert print_module(js.Program(body=[])) == ""


def test_synthesized_strings_use_double_quotes() -> None:
	assert print_expression(js.Literal('say "hi"')) == '"say \\"hi\\""'
	# Source literals keep their spelling.
	assert print_expression(js.Literal("x", raw="'x'")) == "'x'"


def test_precedence_parentheses() -> None:
	a, b, c = js.Identifier("a"), js.Identifier("b"), js.Identifier("c")
	assert print_expression(js.BinaryExpression("*", js.BinaryExpression("+", a, b), c)) == "(a + b) * c"
	assert print_expression(js.BinaryExpression("-", a, js.BinaryExpression("-", b, c))) == "a - (b - c)"
	assert print_expression(js.BinaryExpression("**", js.BinaryExpression("**", a, b), c)) == "(a ** b) ** c"
	assert print_expression(js.CallExpression(js.Identifier("f"), [js.SequenceExpression([a, b])])) == "f((a, b))"
	assert (
		print_expression(js.AssignmentExpression("=", a, js.AssignmentExpression("=", b, c)))
		== "a = b = c"
	)


def test_statement_starting_with_object_is_parenthesized() -> None:
	stmt = js.ExpressionStatement(js.ObjectExpression([]))
	assert print_module(js.Program(body=[stmt])) == "({});\n"


def test_dangling_else_gets_block() -> None:
	inner = js.IfStatement(js.Identifier("b"), js.ExpressionStatement(js.CallExpression(js.Identifier("x"), [])))
	outer = js.IfStatement(
		js.Identifier("a"),
		inner,
		js.ExpressionStatement(js.CallExpression(js.Identifier("y"), [])),
	)
	assert print_module(js.Program(body=[outer])) == "if (a) {\n  if (b)\n    x();\n} else\n  y();\n"


def test_invalid_expression_cannot_be_printed() -> None:
	with pytest.raises(ValueError):
		print_module(js.Program(body=[js.ExpressionStatement(js.Invalid())]))


def test_in_operator_keeps_parens_in_for_init() -> None:
	assert _reprint("for (var i = 0, n = ('a' in o); i < n; i++) {}\n") == (
		"for (var i = 0, n = ('a' in o); i < n; i++) {}\n"
	)
	assert _reprint("for (x = (k in o); x; ) {}\n") == "for (x = (k in o); x;) {}\n"


def test_in_operator_inside_for_body_unparenthesized() -> None:
	source = "for (let i = 0; i < 1; i++) {\n  ok = k in o;\n}\n"
	assert _reprint(source) == source


def test_reprint_meta_properties_and_bare_catch() -> None:
	source = "const u = import.meta.url;\ntry {\n  a();\n} catch {\n  b();\n}\n"
	assert _reprint(source) == source
