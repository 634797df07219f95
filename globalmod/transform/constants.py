# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Names of the runtime registry and of the bindings the lowering synthesizes."""

from __future__ import annotations

# `global.__modules` and its entry points.
GLOBAL = "global"
MODULES = "__modules"
IMPORT = "import"
REQUIRE = "require"
EXTERNAL = "external"
ESM = "esm"
CJS = "cjs"
HELPERS = "helpers"
AS_WILDCARD = "asWildcard"

# Base names handed to the NameAllocator.
EXPORT_DEFAULT = "__export_default"
DEFAULT_FUNCTION = "__fn"
DEFAULT_CLASS = "__Class"
RE_EXPORT = "__re_export"
RE_EXPORT_ALL = "__re_export_all"
CJS_BOUNDARY = "__cjs"

# Member names used on module objects and on the CommonJS boundary.
DEFAULT = "default"
EXPORTS = "exports"
MODULE = "module"
