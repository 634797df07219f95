#!/usr/bin/env python3
# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Parse and lower every `*.js` file under a directory (default: ./playground)
in both modes, reporting which ones fail.
"""
from __future__ import annotations

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from globalmod.config import GlobalModuleConfig
from globalmod.driver import lower_source


def main(argv: list[str] | None = None) -> int:
	args = sys.argv[1:] if argv is None else argv
	root = Path(args[0]) if args else Path("playground")
	files = sorted(root.glob("*.js"))
	if not files:
		print("no playground files found", file=sys.stderr)
		return 1

	failed = False
	for path in files:
		source = path.read_text(encoding="utf-8")
		for runtime_module in (False, True):
			config = GlobalModuleConfig(module_id=path.name, runtime_module=runtime_module)
			_code, diags = lower_source(source, config, file=str(path))
			mode = "registry" if runtime_module else "native"
			if diags:
				failed = True
				for d in diags:
					print(f"[{d.phase} error] {path} ({mode}): {d.span.describe()}: {d.message}", file=sys.stderr)
			else:
				print(f"[ok] {path} ({mode})")

	return 1 if failed else 0


if __name__ == "__main__":
	raise SystemExit(main())
