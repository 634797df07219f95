# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from globalmod.config import GlobalModuleConfig, load_config_file
from globalmod.core.errors import ConfigError


def test_defaults() -> None:
	config = GlobalModuleConfig(module_id="main")
	assert config.runtime_module is False
	assert config.external_pattern is None
	assert config.external_regex is None
	assert config.import_paths is None


def test_from_options_camel_case() -> None:
	config = GlobalModuleConfig.from_options(
		{
			"moduleId": "app/main.js",
			"runtimeModule": True,
			"externalPattern": "^react",
			"importPaths": {"lib": "lib/index.js"},
		}
	)
	assert config.module_id == "app/main.js"
	assert config.runtime_module is True
	assert config.external_regex is not None and config.external_regex.search("react-dom")
	assert config.import_paths == {"lib": "lib/index.js"}


def test_unknown_option_logged_and_ignored(caplog: pytest.LogCaptureFixture) -> None:
	with caplog.at_level(logging.WARNING, logger="globalmod.config"):
		config = GlobalModuleConfig.from_options({"moduleId": "m", "sourceMaps": True})
	assert config.module_id == "m"
	assert any("sourceMaps" in rec.getMessage() for rec in caplog.records)


def test_overrides_win_over_options() -> None:
	config = GlobalModuleConfig.from_options({"moduleId": "a", "runtimeModule": False}, module_id="b", runtime_module=True)
	assert (config.module_id, config.runtime_module) == ("b", True)


def test_none_overrides_are_skipped() -> None:
	config = GlobalModuleConfig.from_options({"moduleId": "a"}, module_id=None, external_pattern=None)
	assert config.module_id == "a"


@pytest.mark.parametrize(
	"options",
	[
		{},
		{"moduleId": ""},
		{"moduleId": 7},
		{"moduleId": "m", "runtimeModule": "yes"},
		{"moduleId": "m", "externalPattern": "("},
		{"moduleId": "m", "externalPattern": 3},
		{"moduleId": "m", "importPaths": ["lib"]},
		{"moduleId": "m", "importPaths": {"lib": 1}},
	],
)
def test_invalid_options_rejected(options: dict) -> None:
	with pytest.raises(ConfigError):
		GlobalModuleConfig.from_options(options)


def test_options_must_be_mapping() -> None:
	with pytest.raises(ConfigError):
		GlobalModuleConfig.from_options(["moduleId"])


def test_load_config_file(tmp_path: Path) -> None:
	path = tmp_path / "globalmod.json"
	path.write_text(json.dumps({"moduleId": "main", "runtimeModule": True}))
	config = load_config_file(path)
	assert config == GlobalModuleConfig(module_id="main", runtime_module=True)


def test_load_config_file_errors(tmp_path: Path) -> None:
	with pytest.raises(ConfigError):
		load_config_file(tmp_path / "missing.json")
	bad = tmp_path / "bad.json"
	bad.write_text("{not json")
	with pytest.raises(ConfigError):
		load_config_file(bad)
	listing = tmp_path / "list.json"
	listing.write_text("[]")
	with pytest.raises(ConfigError):
		load_config_file(listing)


def test_config_is_frozen() -> None:
	config = GlobalModuleConfig(module_id="main")
	with pytest.raises(AttributeError):
		config.module_id = "other"  # type: ignore[misc]
