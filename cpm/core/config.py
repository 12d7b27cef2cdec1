"""Config loading for cpm.

Settings come from an optional ``cpm.toml`` (or ``.cpm.toml``) in the project
root, then environment overrides. Everything has a default so a bare project
directory needs no config at all.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

from .env import (
    CONFIG_FILES,
    DEFAULT_STAGING_DIR,
    ENV_FALLBACK_RUNTIME,
    ENV_JETCRAB_PATH,
    ENV_LOG_FILE,
    ENV_RUNTIME,
    ENV_STAGING_DIR,
    ENV_WATCHER,
    RUNTIME_SIBLING_DIR,
)
from .errors import ManifestParseError


@dataclass(frozen=True)
class CpmConfig:
    root: Path
    runtime: str = "jetcrab"
    fallback_runtime: str = "node"
    watcher: str = "watchfiles"
    staging_dir: Path | None = None
    jetcrab_path: Path | None = None
    log_file: Path | None = None

    @classmethod
    def load(cls, root: Path, override_path: Optional[Path] = None) -> "CpmConfig":
        root = Path(root)
        cfg_path = override_path
        if cfg_path is None:
            for candidate in CONFIG_FILES:
                if (root / candidate).exists():
                    cfg_path = root / candidate
                    break
        data: Dict[str, Any] = {}
        if cfg_path and cfg_path.exists():
            try:
                with cfg_path.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise ManifestParseError(cfg_path, "TOML", str(exc)) from exc

        runtime = os.environ.get(ENV_RUNTIME) or data.get("runtime", "jetcrab")
        fallback = os.environ.get(ENV_FALLBACK_RUNTIME) or data.get("fallback_runtime", "node")
        watcher = os.environ.get(ENV_WATCHER) or data.get("watcher", "watchfiles")
        staging_dir = os.environ.get(ENV_STAGING_DIR) or data.get("staging_dir")
        jetcrab_path = os.environ.get(ENV_JETCRAB_PATH) or data.get("jetcrab_path")
        log_file = os.environ.get(ENV_LOG_FILE) or data.get("log_file")

        return cls(
            root=root,
            runtime=str(runtime),
            fallback_runtime=str(fallback),
            watcher=str(watcher),
            staging_dir=_resolve(root, staging_dir),
            jetcrab_path=_resolve(root, jetcrab_path),
            log_file=_resolve(root, log_file),
        )

    @property
    def staging_path(self) -> Path:
        return self.staging_dir or (self.root / DEFAULT_STAGING_DIR)

    @property
    def runtime_dependency_path(self) -> Path:
        """Path of the embeddable runtime crate used when bundling."""
        if self.jetcrab_path:
            return self.jetcrab_path
        return (self.root / ".." / RUNTIME_SIBLING_DIR).resolve()


def _resolve(root: Path, value: Any) -> Path | None:
    if not value:
        return None
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else root / path
