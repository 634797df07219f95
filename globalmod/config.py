# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Configuration of the global module lowering.

A plugin host hands the pass a flat option bag with camelCase keys:

	{
	  "moduleId": "app/main.js",          // required
	  "runtimeModule": true,              // optional, default false
	  "externalPattern": "^(react|node:)", // optional regex
	  "importPaths": { "lib": "lib/index.js" } // optional remap table
	}

`GlobalModuleConfig.from_options` accepts that shape; `load_config_file`
reads it from a JSON file. Every entry point validates eagerly, so a bad
configuration fails before any module is touched.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Pattern

from globalmod.core.errors import ConfigError

logger = logging.getLogger(__name__)

_OPTION_FIELDS = {
	"moduleId": "module_id",
	"runtimeModule": "runtime_module",
	"externalPattern": "external_pattern",
	"importPaths": "import_paths",
}


@dataclass(frozen=True)
class GlobalModuleConfig:
	module_id: str
	runtime_module: bool = False
	external_pattern: Optional[str] = None
	import_paths: Optional[Mapping[str, str]] = None
	_external_regex: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

	def __post_init__(self) -> None:
		if not isinstance(self.module_id, str) or not self.module_id:
			raise ConfigError("moduleId must be a non-empty string")
		if not isinstance(self.runtime_module, bool):
			raise ConfigError("runtimeModule must be a boolean")
		if self.import_paths is not None:
			if not isinstance(self.import_paths, Mapping):
				raise ConfigError("importPaths must be a mapping of specifier to path")
			for key, value in self.import_paths.items():
				if not isinstance(key, str) or not isinstance(value, str):
					raise ConfigError(f"importPaths entry {key!r}: specifier and path must be strings")
			object.__setattr__(self, "import_paths", dict(self.import_paths))
		if self.external_pattern is not None:
			if not isinstance(self.external_pattern, str):
				raise ConfigError("externalPattern must be a string")
			try:
				regex = re.compile(self.external_pattern)
			except re.error as err:
				raise ConfigError(f"invalid externalPattern {self.external_pattern!r}: {err}") from err
			object.__setattr__(self, "_external_regex", regex)

	@property
	def external_regex(self) -> Optional[Pattern[str]]:
		return self._external_regex

	@classmethod
	def from_options(cls, options: Mapping[str, Any], **overrides: Any) -> "GlobalModuleConfig":
		"""
		Build a config from camelCase plugin options.

		Unknown keys are logged and ignored. Keyword `overrides` use the field
		names and win over `options`; None overrides are skipped.
		"""
		if not isinstance(options, Mapping):
			raise ConfigError("options must be an object")
		values: dict[str, Any] = {}
		for key, value in options.items():
			name = _OPTION_FIELDS.get(key)
			if name is None:
				logger.warning("ignoring unknown option %r", key)
				continue
			values[name] = value
		for name, value in overrides.items():
			if name not in _OPTION_FIELDS.values():
				raise ConfigError(f"unknown config field {name!r}")
			if value is not None:
				values[name] = value
		if "module_id" not in values:
			raise ConfigError("moduleId is required")
		return cls(**values)


def load_options_file(path: Path) -> dict[str, Any]:
	try:
		obj = json.loads(Path(path).read_text(encoding="utf-8"))
	except OSError as err:
		raise ConfigError(f"cannot read config {path}: {err.strerror or err}") from err
	except json.JSONDecodeError as err:
		raise ConfigError(f"config {path} is not valid JSON: {err}") from err
	if not isinstance(obj, dict):
		raise ConfigError(f"config {path} must be a JSON object")
	return obj


def load_config_file(path: Path, **overrides: Any) -> GlobalModuleConfig:
	return GlobalModuleConfig.from_options(load_options_file(path), **overrides)


__all__ = ["GlobalModuleConfig", "load_config_file", "load_options_file"]
