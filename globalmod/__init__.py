# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
globalmod: lower JavaScript modules onto a `global.__modules` registry.

Pipeline: `parser` (Lark grammar -> ESTree-style dataclasses), `transform`
(import/export classification and registry call synthesis), `printer`
(tree -> source). The CLI entrypoint is `globalmod.driver:main`.
"""

from globalmod.config import GlobalModuleConfig
from globalmod.core.errors import ConfigError, GlobalModuleError, UnsupportedSyntaxError
from globalmod.transform import GlobalModuleTransformer, lower_module

__all__ = [
	"GlobalModuleConfig",
	"GlobalModuleTransformer",
	"lower_module",
	"GlobalModuleError",
	"ConfigError",
	"UnsupportedSyntaxError",
]
