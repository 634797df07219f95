# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations


def test_native_syntax_survives(lower) -> None:
	source = 'import x from "./x";\nexport const a = 1;\nexport default function () {}\n'
	assert lower(source) == (
		'import x from "./x";\n'
		"export const a = 1;\n"
		"export default function __fn() {}\n"
		'global.__modules.esm("main", { a, default: __fn });\n'
	)


def test_native_default_expression(lower) -> None:
	assert lower("export default 42;\n") == (
		"const __export_default = 42;\n"
		"export default __export_default;\n"
		'global.__modules.esm("main", { default: __export_default });\n'
	)


def test_native_named_default_class(lower) -> None:
	assert lower("export default class Widget {}\n") == (
		"export default class Widget {}\n"
		'global.__modules.esm("main", { default: Widget });\n'
	)


def test_native_re_export_uses_import_declarations(lower) -> None:
	source = 'export { a, default as b } from "./m";\nexport * from "./all";\n'
	assert lower(source) == (
		'import { a as __re_export } from "./m";\n'
		'import __re_export1 from "./m";\n'
		'import * as __re_export_all from "./all";\n'
		'export { a, default as b } from "./m";\n'
		'export * from "./all";\n'
		'global.__modules.esm("main", { a: __re_export, b: __re_export1 }, __re_export_all);\n'
	)


def test_native_mode_ignores_import_paths_for_local_sources(lower) -> None:
	out = lower('export * as lib from "lib";\n', import_paths={"lib": "lib/index.js"})
	assert out.splitlines()[0] == 'import * as __re_export from "lib";'
	assert "global.__modules.import" not in out


def test_native_commonjs_module(lower) -> None:
	source = 'const dep = require("./dep");\nmodule.exports = dep;\n'
	assert lower(source) == (
		'const __cjs = global.__modules.cjs("main");\n'
		'const dep = require("./dep");\n'
		"module.exports = __cjs.exports.default = dep;\n"
	)


def test_module_id_used_verbatim(lower) -> None:
	out = lower("export const a = 1;\n", module_id='src/app "main".js')
	assert out.splitlines()[-1] == 'global.__modules.esm("src/app \\"main\\".js", { a });'


def test_plain_script_unchanged(lower) -> None:
	source = "const a = 1;\nconsole.log(a);\n"
	assert lower(source) == source
