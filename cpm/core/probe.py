"""
Toolchain probe: is tool X installed, and how do we invoke it here?

A probe resolves each candidate name on PATH (platform variants such as
``npm.cmd`` first) and runs a cheap ``--version`` query. A tool that cannot be
spawned is simply absent; callers branch on ``None``. Results are memoized per
probe instance, and a fresh probe is created for every run.
"""
from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from .config import CpmConfig
from .env import is_windows


class Tool(Enum):
    NPM = "npm"
    NPX = "npx"
    NODE = "node"
    JETCRAB = "jetcrab"
    CARGO = "cargo"
    WASM_PACK = "wasm-pack"
    WATCHER = "watcher"


@dataclass(frozen=True)
class ToolchainHandle:
    tool: Tool
    executable: str
    version: str = ""

    @property
    def argv(self) -> list[str]:
        return [self.executable]


def candidate_names(tool: Tool, config: CpmConfig | None = None, *, windows: bool | None = None) -> list[str]:
    """Names to try for ``tool``, most specific first."""
    windows = is_windows() if windows is None else windows
    if tool is Tool.JETCRAB:
        base = config.runtime if config else "jetcrab"
    elif tool is Tool.NODE:
        base = config.fallback_runtime if config else "node"
    elif tool is Tool.WATCHER:
        base = config.watcher if config else "watchfiles"
    else:
        base = tool.value
    names = []
    if windows and tool in (Tool.NPM, Tool.NPX):
        names.append(f"{base}.cmd")
    names.append(base)
    return names


def _version_query(executable: str) -> Optional[str]:
    try:
        proc = subprocess.run([executable, "--version"], capture_output=True, text=True, check=False)
    except OSError:
        return None
    out = (proc.stdout or proc.stderr or "").strip()
    return out.splitlines()[0] if out else ""


class ToolchainProbe:
    """Per-run memoized capability checks."""

    def __init__(
        self,
        config: CpmConfig | None = None,
        *,
        which: Callable[[str], Optional[str]] = shutil.which,
        query: Callable[[str], Optional[str]] = _version_query,
        windows: bool | None = None,
    ) -> None:
        self.config = config
        self._which = which
        self._query = query
        self._windows = windows
        self._cache: Dict[Tool, Optional[ToolchainHandle]] = {}

    def probe(self, tool: Tool) -> Optional[ToolchainHandle]:
        if tool in self._cache:
            return self._cache[tool]
        handle = None
        for name in candidate_names(tool, self.config, windows=self._windows):
            resolved = self._which(name)
            if not resolved:
                continue
            version = self._query(resolved)
            if version is None:
                continue
            handle = ToolchainHandle(tool, resolved, version)
            break
        self._cache[tool] = handle
        return handle

    def available(self, tool: Tool) -> bool:
        return self.probe(tool) is not None

    def command(self, tool: Tool) -> list[str]:
        """argv prefix for ``tool``; the generic name when the probe found nothing."""
        handle = self.probe(tool)
        if handle is not None:
            return handle.argv
        return [candidate_names(tool, self.config, windows=self._windows)[-1]]


__all__ = ["Tool", "ToolchainHandle", "ToolchainProbe", "candidate_names"]
