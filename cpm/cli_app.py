#!/usr/bin/env python3
"""
Crab Package Manager: a single command surface for npm and cargo projects.

- Single entrypoint: `cpm` (console script) or `python -m cpm`
- Detects JavaScript (package.json), Rust (Cargo.toml) or hybrid projects
- `cpm build` on a JavaScript project bundles it into a native executable
"""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

from cpm import __version__
from cpm.commands import default_commands
from cpm.core.env import PROG
from cpm.core.registry import CommandRegistry
from cpm.hooks import DEFAULT_START_HOOKS, Hook, run_hooks

DESCRIPTION = "A modern package manager for JavaScript and Rust"


def build_registry() -> CommandRegistry:
    return CommandRegistry(PROG, __version__, DESCRIPTION).extend(default_commands())


def main(argv: Sequence[str] | None = None, *, root: Path | None = None, hooks: Sequence[Hook] = DEFAULT_START_HOOKS) -> int:
    raw = list(argv) if argv is not None else sys.argv[1:]
    run_hooks(hooks)
    return build_registry().dispatch(raw, root=Path(root) if root is not None else Path.cwd())


if __name__ == "__main__":
    sys.exit(main())
