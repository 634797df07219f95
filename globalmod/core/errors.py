# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Exception types raised by the lowering pass.

All of them are ValueErrors carrying an optional source `loc` so the driver
can turn them into diagnostics with a position.
"""

from __future__ import annotations

from typing import Any, Optional


class GlobalModuleError(ValueError):
	"""Base class for errors raised while lowering a module."""

	code = "GM0000"

	def __init__(self, message: str, *, loc: Optional[Any] = None) -> None:
		super().__init__(message)
		self.loc = loc


class ConfigError(GlobalModuleError):
	"""Invalid or incomplete pass configuration; raised before any tree is touched."""

	code = "GM0001"


class UnsupportedSyntaxError(GlobalModuleError):
	"""Module syntax the lowering does not handle (e.g. string export names)."""

	code = "GM0002"


__all__ = ["GlobalModuleError", "ConfigError", "UnsupportedSyntaxError"]
