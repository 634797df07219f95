# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Classification records produced by the declaration collector.

The collector turns every import/export form into these flat records; the
pipeline synthesizes registry calls from them without looking back at the
original declarations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .constants import DEFAULT


class ModuleKind(Enum):
	DEFAULT = auto()
	NAMED = auto()
	# `import { default as x }` / `export { default as x } from`.
	DEFAULT_AS_NAMED = auto()
	# `import * as ns` / `export * from` / `export * as ns from`.
	NAMESPACE_OR_ALL = auto()


@dataclass(frozen=True)
class ImportRecord:
	local: str
	source: str
	kind: ModuleKind
	imported: Optional[str] = None  # None: same as `local`
	reexported: bool = False

	@property
	def imported_name(self) -> str:
		return self.imported if self.imported is not None else self.local


@dataclass(frozen=True)
class ExportRecord:
	local: str
	kind: ModuleKind
	exported: Optional[str] = None

	@property
	def export_name(self) -> str:
		"""Name the export is published under in the registry."""
		if self.kind in (ModuleKind.DEFAULT, ModuleKind.DEFAULT_AS_NAMED):
			return DEFAULT
		return self.exported or self.local


__all__ = ["ModuleKind", "ImportRecord", "ExportRecord"]
