# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import logging

import pytest

from globalmod.config import GlobalModuleConfig
from globalmod.core.errors import ConfigError, UnsupportedSyntaxError
from globalmod.parser import parse_module
from globalmod.printer import print_module
from globalmod.transform import GlobalModuleTransformer, lower_module


def test_imports_and_default_export(lower) -> None:
	out = lower('import a, { b as c } from "dep";\nexport default a + c;\n', runtime_module=True)
	assert out == (
		'const _dep = global.__modules.import("dep");\n'
		"const a = _dep.default;\n"
		"const c = _dep.b;\n"
		"const __export_default = a + c;\n"
		'global.__modules.esm("main", { default: __export_default });\n'
	)


def test_specifier_registered_once(lower) -> None:
	source = 'import a from "./m";\nimport { b } from "./m";\nimport * as m from "./m";\nexport { a, b, m };\n'
	out = lower(source, runtime_module=True)
	assert out.count('global.__modules.import("./m")') == 1
	assert out == (
		'const ___m = global.__modules.import("./m");\n'
		"const a = ___m.default;\n"
		"const b = ___m.b;\n"
		"const m = global.__modules.helpers.asWildcard(___m);\n"
		'global.__modules.esm("main", { a, b, m });\n'
	)


def test_registrations_follow_first_reference_order(lower) -> None:
	out = lower('import b from "./b";\nimport a from "./a";\nimport c from "./b";\nexport { a };\n', runtime_module=True)
	lines = out.splitlines()
	assert lines[:2] == [
		'const ___b = global.__modules.import("./b");',
		'const ___a = global.__modules.import("./a");',
	]
	assert lines[2:5] == ["const b = ___b.default;", "const a = ___a.default;", "const c = ___b.default;"]


def test_export_declarations_and_renames(lower) -> None:
	source = "export const x = 1;\nfunction f() {}\nexport { f as g, x as default };\n"
	out = lower(source, runtime_module=True)
	assert out == (
		"const x = 1;\n"
		"function f() {}\n"
		'global.__modules.esm("main", { x, g: f, default: x });\n'
	)


def test_anonymous_default_function(lower) -> None:
	out = lower("export default function () {\n  return 1;\n}\n", runtime_module=True)
	assert out == (
		"function __fn() {\n"
		"  return 1;\n"
		"}\n"
		'global.__modules.esm("main", { default: __fn });\n'
	)


def test_re_exports(lower) -> None:
	source = 'export { a, default as b } from "./m";\nexport * from "./all";\nexport * as ns from "./ns";\n'
	out = lower(source, runtime_module=True)
	assert out == (
		'const ___m = global.__modules.import("./m");\n'
		'const ___all = global.__modules.import("./all");\n'
		'const ___ns = global.__modules.import("./ns");\n'
		"const __re_export = ___m.a;\n"
		"const __re_export1 = ___m.default;\n"
		"const __re_export_all = global.__modules.helpers.asWildcard(___all);\n"
		"const __re_export2 = global.__modules.helpers.asWildcard(___ns);\n"
		'global.__modules.esm("main", { a: __re_export, b: __re_export1, ns: __re_export2 }, __re_export_all);\n'
	)


def test_import_paths_remap_registry_lookups(lower) -> None:
	out = lower('import lib from "lib";\nexport default lib;\n', runtime_module=True, import_paths={"lib": "lib/index.js"})
	assert out.splitlines()[0] == 'const _lib = global.__modules.import("lib/index.js");'


def test_side_effect_import_removed(lower) -> None:
	assert lower('import "./polyfill";\nexport const a = 1;\n', runtime_module=True) == (
		"const a = 1;\n"
		'global.__modules.esm("main", { a });\n'
	)


def test_module_without_exports_takes_commonjs_path(lower) -> None:
	out = lower('import a from "./a";\nmodule.exports = a;\n', runtime_module=True)
	assert out == (
		'const __cjs = global.__modules.cjs("main");\n'
		'const ___a = global.__modules.import("./a");\n'
		"const a = ___a.default;\n"
		"module.exports = __cjs.exports.default = a;\n"
	)


def test_module_with_exports_skips_commonjs_rewrite(lower) -> None:
	out = lower('export const a = 1;\nexports.b = 2;\nconst c = require("./c");\n', runtime_module=True)
	assert "__cjs" not in out
	assert 'require("./c")' in out
	assert "exports.b = 2;" in out


def test_synthesized_names_do_not_shadow_user_code(lower) -> None:
	source = "const __export_default = 1;\nconst _dep = 2;\nimport x from \"dep\";\nexport default x + __export_default + _dep;\n"
	out = lower(source, runtime_module=True)
	assert 'const _dep1 = global.__modules.import("dep");' in out
	assert "const x = _dep1.default;" in out
	assert "const __export_default1 = x + __export_default + _dep;" in out


def test_lowering_is_deterministic() -> None:
	source = 'import a from "./a";\nexport * from "./b";\nexport default a;\n'
	config = GlobalModuleConfig(module_id="main", runtime_module=True)
	outputs = {print_module(lower_module(parse_module(source), config)) for _ in range(3)}
	assert len(outputs) == 1


def test_input_program_is_not_mutated() -> None:
	program = parse_module('import a from "./a";\nexport default function () {}\n')
	before = repr(program)
	lower_module(program, GlobalModuleConfig(module_id="main", runtime_module=True))
	assert repr(program) == before


def test_unsupported_syntax_propagates() -> None:
	with pytest.raises(UnsupportedSyntaxError):
		lower_module(parse_module("export var [a, b] = pair;"), GlobalModuleConfig(module_id="main"))


def test_transformer_requires_config_object() -> None:
	with pytest.raises(ConfigError):
		GlobalModuleTransformer({"moduleId": "main"})


def test_pass_summary_logged(lower, caplog: pytest.LogCaptureFixture) -> None:
	with caplog.at_level(logging.INFO, logger="globalmod.transform.pipeline"):
		lower("export const a = 1;\n", runtime_module=True)
	assert any("lowered main as ES module" in rec.getMessage() for rec in caplog.records)
