# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from typing import Callable

import pytest

from globalmod.config import GlobalModuleConfig
from globalmod.parser import parse_module
from globalmod.printer import print_module
from globalmod.transform import lower_module


@pytest.fixture
def lower() -> Callable[..., str]:
	"""
	Parse, lower and print a module.

	Keyword arguments are GlobalModuleConfig fields; `module_id` defaults to
	"main" so tests only spell out what they care about.
	"""

	def _lower(source: str, **options) -> str:
		options.setdefault("module_id", "main")
		return print_module(lower_module(parse_module(source), GlobalModuleConfig(**options)))

	return _lower
