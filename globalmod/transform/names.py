# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from typing import Iterable, Set

from globalmod.parser import ast as js


class NameAllocator:
	"""
	Hand out identifiers that are not used anywhere in the module.

	Seeded with every identifier already present (bindings, references and
	non-computed property keys alike), so a synthesized name can never shadow
	or capture user code. A taken base name gets a numeric suffix:
	`__re_export`, `__re_export1`, `__re_export2`, ...
	"""

	def __init__(self, taken: Iterable[str] = ()) -> None:
		self._taken: Set[str] = set(taken)

	@classmethod
	def for_program(cls, program: js.Program) -> "NameAllocator":
		return cls(node.name for node in js.walk(program) if isinstance(node, js.Identifier))

	def is_taken(self, name: str) -> bool:
		return name in self._taken

	def reserve(self, name: str) -> None:
		self._taken.add(name)

	def fresh(self, base: str) -> str:
		name = base
		suffix = 0
		while name in self._taken:
			suffix += 1
			name = f"{base}{suffix}"
		self._taken.add(name)
		return name


__all__ = ["NameAllocator"]
