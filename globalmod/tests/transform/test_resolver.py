# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import re

from globalmod.parser import parse_module
from globalmod.transform.names import NameAllocator
from globalmod.transform.resolver import ModuleResolver, ResolvedModule, normalize_ident


def test_normalize_ident() -> None:
	assert normalize_ident("react") == "_react"
	assert normalize_ident("./lib/a-b.js") == "___lib_a_b_js"
	assert normalize_ident("@scope/pkg") == "__scope_pkg"


def test_ident_for_is_memoized() -> None:
	resolver = ModuleResolver()
	assert resolver.ident_for("./a") == resolver.ident_for("./a") == "___a"
	assert len(resolver.registered) == 1


def test_colliding_normalized_names_get_suffixes() -> None:
	resolver = ModuleResolver()
	assert resolver.ident_for("a-b") == "_a_b"
	assert resolver.ident_for("a.b") == "_a_b1"
	assert [m.specifier for m in resolver.registered] == ["a-b", "a.b"]


def test_idents_avoid_user_names() -> None:
	names = NameAllocator.for_program(parse_module("const _react = 1;"))
	resolver = ModuleResolver(names=names)
	assert resolver.ident_for("react") == "_react1"


def test_is_external_uses_search_semantics() -> None:
	resolver = ModuleResolver(external_pattern=re.compile("react"))
	assert resolver.is_external("react")
	assert resolver.is_external("preact-compat")
	assert not resolver.is_external("./local")
	assert not ModuleResolver().is_external("react")


def test_actual_path_remaps_local_specifiers_only() -> None:
	resolver = ModuleResolver(
		external_pattern=re.compile(r"^react$"),
		import_paths={"lib": "lib/index.js", "react": "vendor/react.js"},
	)
	assert resolver.actual_path("lib") == "lib/index.js"
	assert resolver.actual_path("other") == "other"
	assert resolver.actual_path("react") == "react"


def test_remapped_specifiers_share_one_entry() -> None:
	resolver = ModuleResolver(import_paths={"lib": "lib/index.js"})
	first = resolver.resolve("lib")
	second = resolver.resolve("lib/index.js")
	assert first is second
	assert first == ResolvedModule(specifier="lib", path="lib/index.js", ident="_lib", external=False)


def test_registered_keeps_first_resolution_order() -> None:
	resolver = ModuleResolver(external_pattern=re.compile("^ext"))
	for specifier in ["./b", "ext-a", "./a", "./b"]:
		resolver.resolve(specifier)
	assert [(m.path, m.external) for m in resolver.registered] == [
		("./b", False),
		("ext-a", True),
		("./a", False),
	]


def test_name_allocator_suffixes() -> None:
	names = NameAllocator(["__re_export"])
	assert names.fresh("__re_export") == "__re_export1"
	assert names.fresh("__re_export") == "__re_export2"
	assert names.fresh("__cjs") == "__cjs"
	assert names.is_taken("__cjs")
