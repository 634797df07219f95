# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module specifier resolution for the lowering pass.

The resolver decides, per specifier, whether the host loads the module itself
(external) and which path the registry knows it under, and gives every
distinct module one local identifier to hold its module object.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Pattern, Tuple

from .names import NameAllocator

logger = logging.getLogger(__name__)

_NON_IDENT_CHARS = re.compile(r"[^a-zA-Z0-9]")


@dataclass(frozen=True)
class ResolvedModule:
	specifier: str  # first specifier seen for this module
	path: str  # remapped path for local modules, the specifier for externals
	ident: str
	external: bool


def normalize_ident(specifier: str) -> str:
	"""`./lib/a-b.js` -> `__lib_a_b_js`."""
	return _NON_IDENT_CHARS.sub("_", "_" + specifier)


class ModuleResolver:
	def __init__(
		self,
		external_pattern: Optional[Pattern[str]] = None,
		import_paths: Optional[Mapping[str, str]] = None,
		names: Optional[NameAllocator] = None,
	) -> None:
		self._external = external_pattern
		self._import_paths = dict(import_paths or {})
		self._names = names if names is not None else NameAllocator()
		# Canonical key -> entry, in first-resolution order.
		self._modules: Dict[Tuple[bool, str], ResolvedModule] = {}

	def is_external(self, specifier: str) -> bool:
		if self._external is None:
			return False
		return self._external.search(specifier) is not None

	def actual_path(self, specifier: str) -> str:
		"""Remapped path for `specifier`; externals are never remapped."""
		if self.is_external(specifier):
			return specifier
		return self._import_paths.get(specifier, specifier)

	def resolve(self, specifier: str) -> ResolvedModule:
		external = self.is_external(specifier)
		path = specifier if external else self._import_paths.get(specifier, specifier)
		key = (external, path)
		entry = self._modules.get(key)
		if entry is None:
			entry = ResolvedModule(
				specifier=specifier,
				path=path,
				ident=self._names.fresh(normalize_ident(specifier)),
				external=external,
			)
			self._modules[key] = entry
			logger.debug("resolved %r -> %r as %s%s", specifier, path, entry.ident, " (external)" if external else "")
		return entry

	def ident_for(self, specifier: str) -> str:
		return self.resolve(specifier).ident

	@property
	def registered(self) -> List[ResolvedModule]:
		return list(self._modules.values())


__all__ = ["ResolvedModule", "ModuleResolver", "normalize_ident"]
