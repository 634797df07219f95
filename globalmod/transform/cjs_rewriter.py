# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
CommonJS fallback for modules without any ES export.

Export assignments are mirrored onto an export boundary obtained from the
registry, so the module is published under its id while `module.exports`
keeps working for the host:

	module.exports = x      ->  module.exports = __cjs.exports.default = x
	exports.a = y           ->  exports.a = __cjs.exports.a = y
	module.exports.a = y    ->  module.exports.a = __cjs.exports.a = y

In registry mode `require("lit")` is also redirected to the registry.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from globalmod.parser import ast as js

from . import builders as B
from . import constants as K
from .names import NameAllocator
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)


def _is_ident(node: js.Node, name: str) -> bool:
	return isinstance(node, js.Identifier) and node.name == name


def _static_member(node: js.Node) -> Optional[js.MemberExpression]:
	if (
		isinstance(node, js.MemberExpression)
		and not node.computed
		and not node.optional
		and isinstance(node.property, js.Identifier)
	):
		return node
	return None


def export_target(left: js.Node) -> Optional[str]:
	"""
	Name published by an assignment to `left`, or None if `left` is not a
	CommonJS export slot. `module.exports` publishes `default`.
	"""
	target = _static_member(left)
	if target is None:
		return None
	obj = target.object
	prop = target.property.name
	if _is_ident(obj, K.EXPORTS):
		return prop
	if _is_ident(obj, K.MODULE) and prop == K.EXPORTS:
		return K.DEFAULT
	inner = _static_member(obj)
	if inner is not None and _is_ident(inner.object, K.MODULE) and inner.property.name == K.EXPORTS:
		return prop
	return None


def _literal_require(call: js.CallExpression) -> Optional[str]:
	if call.optional or not _is_ident(call.callee, K.REQUIRE) or len(call.arguments) != 1:
		return None
	arg = call.arguments[0]
	if isinstance(arg, js.Literal) and isinstance(arg.value, str):
		return arg.value
	return None


class CommonJsRewriter(js.NodeTransformer):
	def __init__(self, module_id: str, runtime_module: bool, resolver: ModuleResolver, names: NameAllocator) -> None:
		self.module_id = module_id
		self.runtime_module = runtime_module
		self.resolver = resolver
		self.names = names
		self.boundary: Optional[str] = None
		self.exported = 0
		self.requires = 0

	def rewrite(self, program: js.Program) -> js.Program:
		program = self.visit(program)
		if self.exported:
			program = replace(program, body=[B.cjs_boundary(self.boundary, self.module_id)] + program.body)
		logger.debug(
			"commonjs rewrite of %s: %d export assignment(s), %d require call(s)",
			self.module_id,
			self.exported,
			self.requires,
		)
		return program

	def _boundary_name(self) -> str:
		if self.boundary is None:
			self.boundary = self.names.fresh(K.CJS_BOUNDARY)
		return self.boundary

	def visit_ExpressionStatement(self, node: js.ExpressionStatement):
		node = self.generic_visit(node)
		if isinstance(node.expression, js.Invalid):
			return None
		return node

	def visit_SequenceExpression(self, node: js.SequenceExpression):
		node = self.generic_visit(node)
		kept = [expr for expr in node.expressions if not isinstance(expr, js.Invalid)]
		if len(kept) == len(node.expressions):
			return node
		if not kept:
			return js.Invalid(loc=node.loc)
		if len(kept) == 1:
			return kept[0]
		return replace(node, expressions=kept)

	def visit_AssignmentExpression(self, node: js.AssignmentExpression):
		node = self.generic_visit(node)
		if node.operator != "=":
			return node
		name = export_target(node.left)
		if name is None:
			return node
		self.exported += 1
		logger.debug("export assignment publishes %s", name)
		mirror = js.AssignmentExpression(
			"=",
			B.member(B.ident(self._boundary_name()), K.EXPORTS, name),
			node.right,
		)
		return replace(node, right=mirror)

	def visit_CallExpression(self, node: js.CallExpression):
		node = self.generic_visit(node)
		if not self.runtime_module:
			return node
		specifier = _literal_require(node)
		if specifier is None:
			return node
		self.requires += 1
		path = self.resolver.actual_path(specifier)
		logger.debug("require(%r) -> registry %r", specifier, path)
		return replace(B.require_from_registry(path), loc=node.loc)


__all__ = ["CommonJsRewriter", "export_target"]
