# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Constructors for the statements and expressions the lowering synthesizes.

Everything here returns fresh nodes without source locations.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from globalmod.parser import ast as js

from . import constants as K


def ident(name: str) -> js.Identifier:
	return js.Identifier(name)


def string(value: str) -> js.Literal:
	return js.Literal(value)


def member(obj: js.Expr, *names: str) -> js.Expr:
	"""`obj.a.b...` for non-computed member names."""
	expr = obj
	for name in names:
		expr = js.MemberExpression(expr, ident(name))
	return expr


def registry(*names: str) -> js.Expr:
	"""`global.__modules` followed by `names`."""
	return member(ident(K.GLOBAL), K.MODULES, *names)


def registry_call(method: str, args: Sequence[js.Expr]) -> js.CallExpression:
	return js.CallExpression(registry(method), list(args))


def const_decl(name: str, init: js.Expr) -> js.VariableDeclaration:
	return js.VariableDeclaration("const", [js.VariableDeclarator(ident(name), init)])


def expr_stmt(expr: js.Expr) -> js.ExpressionStatement:
	return js.ExpressionStatement(expr)


def import_from_registry(name: str, path: str) -> js.VariableDeclaration:
	"""`const name = global.__modules.import("path");`"""
	return const_decl(name, registry_call(K.IMPORT, [string(path)]))


def require_from_registry(path: str) -> js.CallExpression:
	"""`global.__modules.require("path")`"""
	return registry_call(K.REQUIRE, [string(path)])


def register_external(specifier: str, name: str) -> List[js.Stmt]:
	"""
	`import * as name from "specifier"; global.__modules.external("specifier", name);`
	"""
	return [
		import_namespace(name, specifier),
		expr_stmt(registry_call(K.EXTERNAL, [string(specifier), ident(name)])),
	]


def as_wildcard(module_ident: str) -> js.CallExpression:
	"""`global.__modules.helpers.asWildcard(module_ident)`"""
	return js.CallExpression(registry(K.HELPERS, K.AS_WILDCARD), [ident(module_ident)])


def cjs_boundary(name: str, module_id: str) -> js.VariableDeclaration:
	"""`const name = global.__modules.cjs("module_id");`"""
	return const_decl(name, registry_call(K.CJS, [string(module_id)]))


def export_property(key: str, local: str) -> js.Property:
	if key == local:
		return js.Property(ident(key), ident(local), shorthand=True)
	return js.Property(ident(key), ident(local))


def esm_registration(module_id: str, properties: List[js.Property], wildcards: List[str]) -> js.ExpressionStatement:
	"""`global.__modules.esm("module_id", { ... }, wildcard, ...);`"""
	args: List[js.Expr] = [string(module_id), js.ObjectExpression(list(properties))]
	args.extend(ident(name) for name in wildcards)
	return expr_stmt(registry_call(K.ESM, args))


def import_default(local: str, source: str) -> js.ImportDeclaration:
	return js.ImportDeclaration([js.ImportDefaultSpecifier(ident(local))], string(source))


def import_named(local: str, imported: Optional[str], source: str) -> js.ImportDeclaration:
	spec = js.ImportSpecifier(ident(local), ident(imported if imported is not None else local))
	return js.ImportDeclaration([spec], string(source))


def import_namespace(local: str, source: str) -> js.ImportDeclaration:
	return js.ImportDeclaration([js.ImportNamespaceSpecifier(ident(local))], string(source))


__all__ = [
	"ident",
	"string",
	"member",
	"registry",
	"registry_call",
	"const_decl",
	"expr_stmt",
	"import_from_registry",
	"require_from_registry",
	"register_external",
	"as_wildcard",
	"cjs_boundary",
	"export_property",
	"esm_registration",
	"import_default",
	"import_named",
	"import_namespace",
]
