# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver: parse a JS module, lower it onto the global module
registry and print the result.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from globalmod.config import GlobalModuleConfig, load_options_file
from globalmod.core.diagnostics import Diagnostic
from globalmod.core.errors import ConfigError, GlobalModuleError
from globalmod.core.span import Span
from globalmod.parser import parse_module_source
from globalmod.printer import print_module
from globalmod.transform import lower_module

logger = logging.getLogger(__name__)


def _error_diag(err: GlobalModuleError, phase: str, file: Optional[str]) -> Diagnostic:
	return Diagnostic(
		message=str(err),
		code=err.code,
		phase=phase,
		severity="error",
		span=Span.from_loc(err.loc, file=file),
	)


def lower_source(
	source: str, config: GlobalModuleConfig, file: Optional[str] = None
) -> Tuple[Optional[str], List[Diagnostic]]:
	"""Parse, lower and print `source`. Returns (code, []) or (None, diagnostics)."""
	program, diags = parse_module_source(source, file=file)
	if program is None:
		return None, diags
	try:
		lowered = lower_module(program, config)
	except ConfigError as err:
		return None, [_error_diag(err, "config", file)]
	except GlobalModuleError as err:
		return None, [_error_diag(err, "transform", file)]
	return print_module(lowered), []


def lower_file(path: Path, config: GlobalModuleConfig) -> Tuple[Optional[str], List[Diagnostic]]:
	try:
		source = Path(path).read_text(encoding="utf-8")
	except OSError as err:
		return None, [
			Diagnostic(
				message=f"cannot read {path}: {err.strerror or err}",
				code="GM0003",
				phase="driver",
				span=Span(file=str(path)),
			)
		]
	return lower_source(source, config, file=str(path))


def _diag_to_json(diag: Diagnostic, phase: str, source: Path) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	span = diag.span or Span()
	return {
		"phase": diag.phase or phase,
		"code": diag.code,
		"message": diag.message,
		"severity": diag.severity,
		"file": span.file if span.file is not None else str(source),
		"line": span.line,
		"column": span.column,
		"notes": list(diag.notes or []),
	}


def _parse_import_paths(items: Optional[List[str]]) -> Optional[dict]:
	if not items:
		return None
	paths = {}
	for item in items:
		specifier, sep, path = item.partition("=")
		if not sep or not specifier or not path:
			raise ConfigError(f"--import-path expects SPEC=PATH, got {item!r}")
		paths[specifier] = path
	return paths


def build_config(args: argparse.Namespace) -> GlobalModuleConfig:
	"""Merge `--config` with command-line flags; flags win."""
	options = load_options_file(args.config) if args.config is not None else {}
	import_paths = _parse_import_paths(args.import_paths)
	if import_paths is not None and isinstance(options.get("importPaths"), dict):
		import_paths = {**options["importPaths"], **import_paths}
	module_id = args.module_id
	if module_id is None and "moduleId" not in options:
		module_id = str(args.source)
	return GlobalModuleConfig.from_options(
		options,
		module_id=module_id,
		runtime_module=True if args.runtime_module else None,
		external_pattern=args.external_pattern,
		import_paths=import_paths,
	)


def _report(diags: List[Diagnostic], source: Path, as_json: bool) -> None:
	if as_json:
		payload = {
			"exit_code": 1,
			"diagnostics": [_diag_to_json(d, "driver", source) for d in diags],
		}
		print(json.dumps(payload))
		return
	for d in diags:
		file = d.span.file or str(source)
		line = d.span.line if d.span.line is not None else "?"
		column = d.span.column if d.span.column is not None else "?"
		print(f"{file}:{line}:{column}: {d.severity}: {d.message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
	"""
	Lower one module. Exit code 0 on success, 1 if any diagnostic was produced;
	nothing is written in that case.

	With --json, prints {"exit_code", "diagnostics"} (plus "code" when the
	output goes to stdout) instead of writing to stdout/stderr directly.
	"""
	parser = argparse.ArgumentParser(description="Lower an ES/CommonJS module onto the global.__modules registry")
	parser.add_argument("source", type=Path, help="Path to the JavaScript module")
	parser.add_argument("-o", "--output", type=Path, help="Write the lowered module here instead of stdout")
	parser.add_argument("--module-id", type=str, help="Registry id of the module (default: the source path)")
	parser.add_argument(
		"--runtime-module",
		action="store_true",
		help="Registry mode: replace import/export syntax with registry calls",
	)
	parser.add_argument("--external-pattern", type=str, help="Regex matching specifiers the host loads itself")
	parser.add_argument(
		"--import-path",
		dest="import_paths",
		action="append",
		metavar="SPEC=PATH",
		help="Remap a specifier to a registry path (repeatable)",
	)
	parser.add_argument("--config", type=Path, help="JSON file with moduleId/runtimeModule/externalPattern/importPaths")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (-vv for debug output)")
	args = parser.parse_args(argv)

	if args.verbose:
		logging.basicConfig(
			level=logging.DEBUG if args.verbose > 1 else logging.INFO,
			format="%(levelname)s %(name)s: %(message)s",
		)

	source_path: Path = args.source
	try:
		config = build_config(args)
	except ConfigError as err:
		_report([_error_diag(err, "config", None)], source_path, args.json)
		return 1

	code, diags = lower_file(source_path, config)
	if diags or code is None:
		_report(diags, source_path, args.json)
		return 1

	if args.output is not None:
		args.output.write_text(code, encoding="utf-8")
		logger.info("wrote %s", args.output)
	elif not args.json:
		sys.stdout.write(code)
	if args.json:
		payload = {"exit_code": 0, "diagnostics": []}
		if args.output is None:
			payload["code"] = code
		print(json.dumps(payload))
	return 0


__all__ = ["lower_source", "lower_file", "build_config", "main"]
