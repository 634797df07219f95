# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Top-level import/export classification.

`DeclarationCollector.collect` walks `Program.body` once, in order, and turns
every module declaration into `ImportRecord`/`ExportRecord` values. It also
returns the rebuilt statement list:

- registry mode (`runtime_module=True`): every module declaration is removed
  or replaced by the plain statement it wraps;
- native mode: import and export syntax is kept so the output still works
  as an ES module, and only `export default <expr>` and anonymous default
  declarations are rewritten to bind a name.

Unsupported sub-forms raise `UnsupportedSyntaxError` and stop the pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

from globalmod.core.errors import UnsupportedSyntaxError
from globalmod.parser import ast as js

from . import builders as B
from . import constants as K
from .names import NameAllocator
from .records import ExportRecord, ImportRecord, ModuleKind

logger = logging.getLogger(__name__)


@dataclass
class CollectedModule:
	imports: List[ImportRecord] = field(default_factory=list)
	exports: List[ExportRecord] = field(default_factory=list)
	body: List[js.Stmt] = field(default_factory=list)


def _is_invalid_import(stmt: js.Stmt) -> bool:
	return (
		isinstance(stmt, js.ImportDeclaration)
		and not stmt.specifiers
		and isinstance(stmt.source, js.Literal)
		and not stmt.source.value
	)


def _export_name(name: js.ModuleExportName, what: str) -> str:
	if isinstance(name, js.Identifier):
		return name.name
	raise UnsupportedSyntaxError(f"string literal {what} names are not supported", loc=name.loc)


class DeclarationCollector:
	def __init__(self, runtime_module: bool, names: NameAllocator) -> None:
		self.runtime_module = runtime_module
		self.names = names
		self._out: Optional[CollectedModule] = None

	def collect(self, program: js.Program) -> CollectedModule:
		out = CollectedModule()
		self._out = out
		try:
			for stmt in program.body:
				if isinstance(stmt, js.EmptyStatement) or _is_invalid_import(stmt):
					continue
				if isinstance(stmt, js.ImportDeclaration):
					out.body.extend(self._import(stmt))
				elif isinstance(stmt, js.ExportDefaultDeclaration):
					out.body.extend(self._export_default(stmt))
				elif isinstance(stmt, js.ExportNamedDeclaration):
					out.body.extend(self._export_named(stmt))
				elif isinstance(stmt, js.ExportAllDeclaration):
					out.body.extend(self._export_all(stmt))
				else:
					out.body.append(stmt)
		finally:
			self._out = None
		return out

	# --- imports ---------------------------------------------------------------

	def _import(self, decl: js.ImportDeclaration) -> List[js.Stmt]:
		if not self.runtime_module:
			return [decl]
		source = decl.source.value
		for spec in decl.specifiers:
			if isinstance(spec, js.ImportDefaultSpecifier):
				logger.debug("default import %s from %r", spec.local.name, source)
				self._add_import(ImportRecord(spec.local.name, source, ModuleKind.DEFAULT))
			elif isinstance(spec, js.ImportNamespaceSpecifier):
				logger.debug("namespace import %s from %r", spec.local.name, source)
				self._add_import(ImportRecord(spec.local.name, source, ModuleKind.NAMESPACE_OR_ALL))
			else:
				imported = _export_name(spec.imported, "import")
				local = spec.local.name
				logger.debug("named import %s as %s from %r", imported, local, source)
				self._add_import(
					ImportRecord(local, source, ModuleKind.NAMED, imported=None if imported == local else imported)
				)
		return []

	# --- export default --------------------------------------------------------

	def _export_default(self, decl: js.ExportDefaultDeclaration) -> List[js.Stmt]:
		inner = decl.declaration
		if isinstance(inner, (js.FunctionDeclaration, js.ClassDeclaration)):
			if inner.id is None:
				base = K.DEFAULT_FUNCTION if isinstance(inner, js.FunctionDeclaration) else K.DEFAULT_CLASS
				inner = replace(inner, id=B.ident(self.names.fresh(base)))
				logger.debug("anonymous default %s named %s", type(inner).__name__, inner.id.name)
			else:
				logger.debug("default %s %s", type(inner).__name__, inner.id.name)
			self._add_export(ExportRecord(inner.id.name, ModuleKind.DEFAULT))
			if self.runtime_module:
				return [inner]
			return [replace(decl, declaration=inner)]

		name = self.names.fresh(K.EXPORT_DEFAULT)
		logger.debug("default expression bound to %s", name)
		self._add_export(ExportRecord(name, ModuleKind.DEFAULT))
		binding = replace(B.const_decl(name, inner), loc=decl.loc)
		if self.runtime_module:
			return [binding]
		return [binding, replace(decl, declaration=B.ident(name))]

	# --- export named ----------------------------------------------------------

	def _export_named(self, decl: js.ExportNamedDeclaration) -> List[js.Stmt]:
		if decl.declaration is not None:
			return self._export_declaration(decl)
		if decl.source is not None:
			self._re_export(decl)
		else:
			for spec in decl.specifiers:
				local = _export_name(spec.local, "export")
				exported = _export_name(spec.exported, "export")
				if local == K.DEFAULT:
					raise UnsupportedSyntaxError("`export { default }` needs a source module", loc=spec.loc)
				logger.debug("named export %s as %s", local, exported)
				self._add_export(ExportRecord(local, ModuleKind.NAMED, exported=None if exported == local else exported))
		return [] if self.runtime_module else [decl]

	def _export_declaration(self, decl: js.ExportNamedDeclaration) -> List[js.Stmt]:
		inner = decl.declaration
		if isinstance(inner, js.VariableDeclaration):
			for declarator in inner.declarations:
				if not isinstance(declarator.id, js.Identifier):
					raise UnsupportedSyntaxError(
						"destructuring in exported variable declarations is not supported",
						loc=declarator.loc or decl.loc,
					)
				logger.debug("export %s %s", inner.kind, declarator.id.name)
				self._add_export(ExportRecord(declarator.id.name, ModuleKind.NAMED))
		elif isinstance(inner, (js.FunctionDeclaration, js.ClassDeclaration)) and inner.id is not None:
			logger.debug("export %s %s", type(inner).__name__, inner.id.name)
			self._add_export(ExportRecord(inner.id.name, ModuleKind.NAMED))
		else:
			raise UnsupportedSyntaxError(f"cannot export {type(inner).__name__}", loc=decl.loc)
		return [inner] if self.runtime_module else [decl]

	def _re_export(self, decl: js.ExportNamedDeclaration) -> None:
		source = decl.source.value
		for spec in decl.specifiers:
			original = _export_name(spec.local, "re-export")
			exported = _export_name(spec.exported, "re-export")
			name = self.names.fresh(K.RE_EXPORT)
			kind = ModuleKind.DEFAULT_AS_NAMED if original == K.DEFAULT else ModuleKind.NAMED
			logger.debug("re-export %s as %s from %r via %s", original, exported, source, name)
			self._add_import(ImportRecord(name, source, kind, imported=original, reexported=True))
			self._add_export(ExportRecord(name, ModuleKind.NAMED, exported=exported))

	# --- export * --------------------------------------------------------------

	def _export_all(self, decl: js.ExportAllDeclaration) -> List[js.Stmt]:
		source = decl.source.value
		if decl.exported is not None:
			exported = _export_name(decl.exported, "namespace re-export")
			name = self.names.fresh(K.RE_EXPORT)
			logger.debug("namespace re-export %s from %r via %s", exported, source, name)
			self._add_import(ImportRecord(name, source, ModuleKind.NAMESPACE_OR_ALL, reexported=True))
			self._add_export(ExportRecord(name, ModuleKind.NAMED, exported=exported))
		else:
			name = self.names.fresh(K.RE_EXPORT_ALL)
			logger.debug("wildcard re-export from %r via %s", source, name)
			self._add_import(ImportRecord(name, source, ModuleKind.NAMESPACE_OR_ALL, reexported=True))
			self._add_export(ExportRecord(name, ModuleKind.NAMESPACE_OR_ALL))
		return [] if self.runtime_module else [decl]

	def _add_import(self, record: ImportRecord) -> None:
		assert self._out is not None
		self._out.imports.append(record)

	def _add_export(self, record: ExportRecord) -> None:
		assert self._out is not None
		self._out.exports.append(record)


__all__ = ["CollectedModule", "DeclarationCollector"]
