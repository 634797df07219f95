# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic record shared by the parser, the lowering pass and the driver.

Every failure the driver reports (parse error, unsupported module syntax,
bad configuration) is turned into one of these before it is printed.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .span import Span


@dataclass
class Diagnostic:
	"""A user-facing error or warning."""

	message: str
	code: str | None = None
	# Which stage produced the diagnostic: "config", "parser" or "transform".
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)  # Span() denotes unknown.
	notes: list[str] = field(default_factory=list)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		return f"{self.span.describe()}: {self.severity}: {self.message}"


__all__ = ["Diagnostic"]
