"""
Child process helpers: every toolchain call goes through here.

Commands always run with shell=False and block until the child exits. No
timeout is applied; a long cargo build is allowed to take as long as it needs.
"""
from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from .errors import ExternalCommandFailed


@dataclass(frozen=True)
class CommandResult:
    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def label(self) -> str:
        return short_label(self.argv)


def display(argv: Sequence[str]) -> str:
    """Render argv the way a user would type it."""
    return shlex.join(str(a) for a in argv)


def short_label(argv: Sequence[str]) -> str:
    """Like display() but with the executable reduced to its file name."""
    if not argv:
        return ""
    return display([Path(str(argv[0])).name, *argv[1:]])


def run_captured(
    argv: Sequence[str],
    *,
    cwd: Path,
    env: Optional[dict] = None,
    debug: Callable[[str], None] | None = None,
) -> CommandResult:
    """Run a command capturing stdout/stderr as text."""
    if not argv:
        raise ValueError("empty command")
    if debug:
        debug(f"$ {display(argv)} (cwd={cwd})")
    try:
        proc = subprocess.run(
            [str(a) for a in argv],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            env=env,
            check=False,
        )
    except OSError as exc:
        raise ExternalCommandFailed(short_label(argv), str(exc)) from exc
    return CommandResult(tuple(str(a) for a in argv), proc.returncode, proc.stdout or "", proc.stderr or "")


def run_inherited(
    argv: Sequence[str],
    *,
    cwd: Path,
    env: Optional[dict] = None,
    debug: Callable[[str], None] | None = None,
) -> CommandResult:
    """Run a command attached to the current terminal (stdin/stdout/stderr inherited)."""
    if not argv:
        raise ValueError("empty command")
    if debug:
        debug(f"$ {display(argv)} (cwd={cwd})")
    try:
        rc = subprocess.call([str(a) for a in argv], cwd=str(cwd), env=env)
    except OSError as exc:
        raise ExternalCommandFailed(short_label(argv), str(exc)) from exc
    return CommandResult(tuple(str(a) for a in argv), rc)


def ensure_success(result: CommandResult, command: str | None = None, message: str | None = None) -> CommandResult:
    """Raise ExternalCommandFailed for a non-zero exit; pass the result through otherwise."""
    if result.ok:
        return result
    detail = message or result.stderr.strip() or result.stdout.strip() or f"exit status {result.returncode}"
    raise ExternalCommandFailed(command or result.label, detail)


__all__ = ["CommandResult", "display", "short_label", "ensure_success", "run_captured", "run_inherited"]
