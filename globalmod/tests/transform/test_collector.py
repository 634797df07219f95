# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging

import pytest

from globalmod.core.errors import UnsupportedSyntaxError
from globalmod.parser import ast as js
from globalmod.parser import parse_module
from globalmod.transform.collector import DeclarationCollector
from globalmod.transform.names import NameAllocator
from globalmod.transform.records import ExportRecord, ImportRecord, ModuleKind


def _collect(source: str, runtime_module: bool = True):
	program = parse_module(source)
	return DeclarationCollector(runtime_module, NameAllocator.for_program(program)).collect(program)


def test_import_records_in_registry_mode() -> None:
	out = _collect('import a, { b, c as d, default as e } from "m";\nimport * as ns from "n";\n')
	assert out.imports == [
		ImportRecord("a", "m", ModuleKind.DEFAULT),
		ImportRecord("b", "m", ModuleKind.NAMED),
		ImportRecord("d", "m", ModuleKind.NAMED, imported="c"),
		ImportRecord("e", "m", ModuleKind.NAMED, imported="default"),
		ImportRecord("ns", "n", ModuleKind.NAMESPACE_OR_ALL),
	]
	assert out.exports == []
	assert out.body == []


def test_imports_kept_natively() -> None:
	out = _collect('import a from "m";\nimport "./side-effect";\n', runtime_module=False)
	assert out.imports == []
	assert [type(s) for s in out.body] == [js.ImportDeclaration, js.ImportDeclaration]


def test_string_import_name_rejected() -> None:
	with pytest.raises(UnsupportedSyntaxError) as excinfo:
		_collect('import { "a-b" as ab } from "m";')
	assert excinfo.value.loc is not None


def test_export_default_expression() -> None:
	out = _collect("export default 42;")
	assert out.exports == [ExportRecord("__export_default", ModuleKind.DEFAULT)]
	assert out.body == [
		js.VariableDeclaration("const", [js.VariableDeclarator(js.Identifier("__export_default"), js.Literal(42, "42"))])
	]


def test_export_default_expression_native_keeps_export() -> None:
	out = _collect("export default 42;", runtime_module=False)
	binding, export = out.body
	assert isinstance(binding, js.VariableDeclaration)
	assert export == js.ExportDefaultDeclaration(js.Identifier("__export_default"))


def test_anonymous_default_function_is_named() -> None:
	out = _collect("export default function () {}")
	assert out.exports == [ExportRecord("__fn", ModuleKind.DEFAULT)]
	(fn,) = out.body
	assert isinstance(fn, js.FunctionDeclaration)
	assert fn.id == js.Identifier("__fn")


def test_anonymous_default_class_native() -> None:
	out = _collect("export default class {}", runtime_module=False)
	assert out.exports == [ExportRecord("__Class", ModuleKind.DEFAULT)]
	(decl,) = out.body
	assert isinstance(decl, js.ExportDefaultDeclaration)
	assert decl.declaration.id == js.Identifier("__Class")


def test_synthesized_default_name_avoids_user_binding() -> None:
	out = _collect("const __fn = 1;\nexport default function () {}")
	assert out.exports == [ExportRecord("__fn1", ModuleKind.DEFAULT)]


def test_named_default_declaration() -> None:
	out = _collect("export default function main() {}")
	assert out.exports == [ExportRecord("main", ModuleKind.DEFAULT)]
	assert out.body[0].id == js.Identifier("main")


def test_export_declarations_record_every_name() -> None:
	out = _collect("export let a = 1, b;\nexport function f() {}\nexport class C {}\n")
	assert [r.local for r in out.exports] == ["a", "b", "f", "C"]
	assert all(r.kind is ModuleKind.NAMED for r in out.exports)
	assert [type(s) for s in out.body] == [js.VariableDeclaration, js.FunctionDeclaration, js.ClassDeclaration]


def test_export_destructuring_rejected() -> None:
	with pytest.raises(UnsupportedSyntaxError):
		_collect("export const { a } = obj;")


def test_export_specifiers() -> None:
	out = _collect("const a = 1, b = 2;\nexport { a, b as c };\n")
	assert out.exports == [
		ExportRecord("a", ModuleKind.NAMED),
		ExportRecord("b", ModuleKind.NAMED, exported="c"),
	]
	assert len(out.body) == 1


def test_export_string_name_rejected() -> None:
	with pytest.raises(UnsupportedSyntaxError):
		_collect('const a = 1;\nexport { a as "a-b" };\n')


def test_re_exports() -> None:
	out = _collect('export { a, default as b } from "./m";\nexport * from "./all";\nexport * as ns from "./ns";\n')
	assert out.imports == [
		ImportRecord("__re_export", "./m", ModuleKind.NAMED, imported="a", reexported=True),
		ImportRecord("__re_export1", "./m", ModuleKind.DEFAULT_AS_NAMED, imported="default", reexported=True),
		ImportRecord("__re_export_all", "./all", ModuleKind.NAMESPACE_OR_ALL, reexported=True),
		ImportRecord("__re_export2", "./ns", ModuleKind.NAMESPACE_OR_ALL, reexported=True),
	]
	assert out.exports == [
		ExportRecord("__re_export", ModuleKind.NAMED, exported="a"),
		ExportRecord("__re_export1", ModuleKind.NAMED, exported="b"),
		ExportRecord("__re_export_all", ModuleKind.NAMESPACE_OR_ALL),
		ExportRecord("__re_export2", ModuleKind.NAMED, exported="ns"),
	]
	assert out.body == []


def test_re_exports_kept_natively() -> None:
	out = _collect('export * from "./all";\n', runtime_module=False)
	assert [type(s) for s in out.body] == [js.ExportAllDeclaration]


def test_export_name_property() -> None:
	assert ExportRecord("x", ModuleKind.DEFAULT).export_name == "default"
	assert ExportRecord("x", ModuleKind.NAMED).export_name == "x"
	assert ExportRecord("x", ModuleKind.NAMED, exported="y").export_name == "y"


def test_empty_statements_and_invalid_imports_pruned() -> None:
	program = js.Program(
		body=[
			js.EmptyStatement(),
			js.ImportDeclaration(specifiers=[], source=js.Literal("")),
			js.ExpressionStatement(js.Identifier("x")),
		]
	)
	out = DeclarationCollector(False, NameAllocator()).collect(program)
	assert out.body == [js.ExpressionStatement(js.Identifier("x"))]


def test_input_tree_not_mutated() -> None:
	program = parse_module("export default function () {}")
	before = repr(program)
	DeclarationCollector(True, NameAllocator.for_program(program)).collect(program)
	assert repr(program) == before
	assert program.body[0].declaration.id is None


def test_classification_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
	with caplog.at_level(logging.DEBUG, logger="globalmod.transform.collector"):
		_collect('import a from "m";')
	assert any("default import a" in rec.getMessage() for rec in caplog.records)
