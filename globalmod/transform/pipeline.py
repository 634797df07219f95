# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Global module lowering.

Rewrites one ES module so that its dependencies are fetched from, and its
exports published to, the `global.__modules` registry. In registry mode

	import a, { b as c } from "dep";
	export default a + c;

becomes

	const _dep = global.__modules.import("dep");
	const a = _dep.default;
	const c = _dep.b;
	const __export_default = a + c;
	global.__modules.esm("main", { default: __export_default });

Modules without ES exports are treated as CommonJS (see `cjs_rewriter`).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List

from globalmod.config import GlobalModuleConfig
from globalmod.core.errors import ConfigError
from globalmod.parser import ast as js

from . import builders as B
from . import constants as K
from .cjs_rewriter import CommonJsRewriter
from .collector import DeclarationCollector
from .names import NameAllocator
from .records import ExportRecord, ImportRecord, ModuleKind
from .resolver import ModuleResolver

logger = logging.getLogger(__name__)


class GlobalModuleTransformer:
	def __init__(self, config: GlobalModuleConfig) -> None:
		if not isinstance(config, GlobalModuleConfig):
			raise ConfigError(f"expected GlobalModuleConfig, got {type(config).__name__}")
		self.config = config

	def transform(self, program: js.Program) -> js.Program:
		"""Return the lowered module; `program` itself is left untouched."""
		config = self.config
		names = NameAllocator.for_program(program)
		resolver = ModuleResolver(config.external_regex, config.import_paths, names)
		collected = DeclarationCollector(config.runtime_module, names).collect(program)

		bindings = [self._binding(record, resolver) for record in collected.imports]
		body: List[js.Stmt] = self._registrations(resolver) + bindings + collected.body
		if collected.exports:
			body.append(self._export_registration(collected.exports))
		lowered = replace(program, body=body)

		if collected.exports:
			logger.info(
				"lowered %s as ES module: %d import(s), %d export(s), %d registered module(s)",
				config.module_id,
				len(collected.imports),
				len(collected.exports),
				len(resolver.registered),
			)
			return lowered

		rewriter = CommonJsRewriter(config.module_id, config.runtime_module, resolver, names)
		lowered = rewriter.rewrite(lowered)
		logger.info(
			"lowered %s as CommonJS module: %d import(s), %d export assignment(s)",
			config.module_id,
			len(collected.imports),
			rewriter.exported,
		)
		return lowered

	def _uses_registry(self, record: ImportRecord, resolver: ModuleResolver) -> bool:
		return self.config.runtime_module or resolver.is_external(record.source)

	def _binding(self, record: ImportRecord, resolver: ModuleResolver) -> js.Stmt:
		if not self._uses_registry(record, resolver):
			return self._native_import(record)
		module = resolver.ident_for(record.source)
		if record.kind in (ModuleKind.DEFAULT, ModuleKind.DEFAULT_AS_NAMED):
			init = B.member(B.ident(module), K.DEFAULT)
		elif record.kind is ModuleKind.NAMED:
			init = B.member(B.ident(module), record.imported_name)
		else:
			init = B.as_wildcard(module)
		return B.const_decl(record.local, init)

	def _native_import(self, record: ImportRecord) -> js.ImportDeclaration:
		if record.kind in (ModuleKind.DEFAULT, ModuleKind.DEFAULT_AS_NAMED):
			return B.import_default(record.local, record.source)
		if record.kind is ModuleKind.NAMED:
			return B.import_named(record.local, record.imported, record.source)
		return B.import_namespace(record.local, record.source)

	def _registrations(self, resolver: ModuleResolver) -> List[js.Stmt]:
		stmts: List[js.Stmt] = []
		for module in resolver.registered:
			if module.external:
				stmts.extend(B.register_external(module.specifier, module.ident))
			else:
				stmts.append(B.import_from_registry(module.ident, module.path))
		return stmts

	def _export_registration(self, exports: List[ExportRecord]) -> js.Stmt:
		properties: List[js.Property] = []
		wildcards: List[str] = []
		for record in exports:
			if record.kind is ModuleKind.NAMESPACE_OR_ALL:
				wildcards.append(record.local)
			else:
				properties.append(B.export_property(record.export_name, record.local))
		return B.esm_registration(self.config.module_id, properties, wildcards)


def lower_module(program: js.Program, config: GlobalModuleConfig) -> js.Program:
	return GlobalModuleTransformer(config).transform(program)


__all__ = ["GlobalModuleTransformer", "lower_module"]
