# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from .diagnostics import Diagnostic
from .errors import ConfigError, GlobalModuleError, UnsupportedSyntaxError
from .span import Span

__all__ = ["Diagnostic", "Span", "GlobalModuleError", "ConfigError", "UnsupportedSyntaxError"]
