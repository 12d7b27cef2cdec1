"""Thin helpers shared by the command handlers: toolchain calls and prompts."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

from cpm.core.process import CommandResult, ensure_success, run_captured, run_inherited
from cpm.core.registry import ExecutionContext


def run_tool(
    ctx: ExecutionContext,
    argv: Sequence[str],
    *,
    label: str | None = None,
    cwd: Path | None = None,
    capture: bool = True,
    echo: bool = False,
    message: str | None = None,
) -> CommandResult:
    """
    Run one toolchain step and raise ExternalCommandFailed on a non-zero exit.

    Captured output is replayed on stderr when ``echo`` is set (test runs) or
    when running verbose.
    """
    runner = run_captured if capture else run_inherited
    result = runner(argv, cwd=cwd or ctx.root, debug=ctx.debug)
    if capture and (echo or ctx.verbose) and not ctx.quiet:
        for stream in (result.stdout, result.stderr):
            if stream:
                sys.stderr.write(stream if stream.endswith("\n") else stream + "\n")
    return ensure_success(result, label, message)


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on the terminal; anything but y/yes is a no."""
    try:
        ans = input(f"{prompt} (y/N): ").strip().lower()
    except EOFError:
        return False
    return ans in ("y", "yes")
