# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span attached to diagnostics.

A Span carries best-effort file/line/column info for a JS source position.
Parser nodes only know line/column (`Located`); the driver adds the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source position (file/line/column plus the raw parser loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, file: Optional[str] = None) -> "Span":
		"""
		Build a Span from a node `Located`, a lark token/exception or another Span.

		Missing attributes stay None; `file` fills in a missing file name.
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			return loc if loc.file or not file else cls(loc.file or file, loc.line, loc.column, loc.raw)
		return cls(
			file=getattr(loc, "file", None) or file,
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			raw=loc,
		)

	def describe(self) -> str:
		where = self.file or "<input>"
		if self.line is None:
			return where
		return f"{where}:{self.line}:{self.column if self.column is not None else '?'}"


__all__ = ["Span"]
