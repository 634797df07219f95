# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations


def test_external_import_registered_once(lower) -> None:
	source = 'import React, { useState } from "react";\nimport * as R from "react";\nexport default React;\n'
	out = lower(source, runtime_module=True, external_pattern="^react$")
	assert out == (
		'import * as _react from "react";\n'
		'global.__modules.external("react", _react);\n'
		"const React = _react.default;\n"
		"const useState = _react.useState;\n"
		"const R = global.__modules.helpers.asWildcard(_react);\n"
		"const __export_default = React;\n"
		'global.__modules.esm("main", { default: __export_default });\n'
	)
	assert out.count('global.__modules.external("react"') == 1
	assert 'global.__modules.import("react")' not in out


def test_external_specifier_is_never_remapped(lower) -> None:
	out = lower(
		'import React from "react";\nexport { React };\n',
		runtime_module=True,
		external_pattern="^react$",
		import_paths={"react": "vendor/react.js"},
	)
	assert "vendor/react.js" not in out
	assert out.splitlines()[:2] == [
		'import * as _react from "react";',
		'global.__modules.external("react", _react);',
	]


def test_mixed_external_and_local_order(lower) -> None:
	source = 'import a from "./a";\nimport b from "node:fs";\nexport { a, b };\n'
	out = lower(source, runtime_module=True, external_pattern="^node:")
	assert out.splitlines()[:4] == [
		'const ___a = global.__modules.import("./a");',
		'import * as _node_fs from "node:fs";',
		'global.__modules.external("node:fs", _node_fs);',
		"const a = ___a.default;",
	]


def test_external_re_export_in_native_mode(lower) -> None:
	out = lower('export * from "react";\n', external_pattern="^react$")
	assert out == (
		'import * as _react from "react";\n'
		'global.__modules.external("react", _react);\n'
		"const __re_export_all = global.__modules.helpers.asWildcard(_react);\n"
		'export * from "react";\n'
		'global.__modules.esm("main", {}, __re_export_all);\n'
	)


def test_native_imports_of_externals_are_untouched(lower) -> None:
	source = 'import React from "react";\nexport const el = React;\n'
	out = lower(source, external_pattern="^react$")
	assert out.splitlines()[0] == 'import React from "react";'
	assert "global.__modules.external" not in out
