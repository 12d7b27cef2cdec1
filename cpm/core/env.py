"""Shared constants for cpm.

This centralizes file names and environment variable names so helpers can
import them without pulling in the whole CLI.
"""
from __future__ import annotations

import os
import sys

PROG = "cpm"

# Manifest files
SCRIPT_MANIFEST = "package.json"
COMPILED_MANIFEST = "Cargo.toml"

# Entry points, in resolution order
ENTRY_CANDIDATES = ("js/index.js", "index.js")
DEFAULT_ENTRY = "index.js"

DEFAULT_PROJECT_NAME = "my-cpm-project"
DEFAULT_APP_NAME = "cpm-app"

# Bundling
DEFAULT_STAGING_DIR = ".cpm-build"
STANDALONE_CRATE = "standalone-app"
STAGED_SCRIPT = "src/app.js"
STAGED_HOST_SOURCE = "src/main.rs"
RUNTIME_SIBLING_DIR = "jetcrab"

# Environment overrides
ENV_JETCRAB_PATH = "JETCRAB_PATH"
ENV_RUNTIME = "CPM_RUNTIME"
ENV_FALLBACK_RUNTIME = "CPM_FALLBACK_RUNTIME"
ENV_WATCHER = "CPM_WATCHER"
ENV_STAGING_DIR = "CPM_STAGING_DIR"
ENV_LOG_FILE = "CPM_LOG_FILE"
ENV_EASTER_EGG = "CPM_EASTER_EGG"

# Config files looked up in the project root
CONFIG_FILES = ("cpm.toml", ".cpm.toml")

DEFAULT_EXECUTABLE_SUFFIX = ".exe"


def is_windows() -> bool:
    return os.name == "nt" or sys.platform.startswith("win")


def exe_suffix() -> str:
    # cargo names binaries by target OS, not by the interpreter build
    return DEFAULT_EXECUTABLE_SUFFIX if is_windows() else ""


def exe_name(target: str) -> str:
    suffix = exe_suffix()
    return f"{target}{suffix}" if suffix and not target.endswith(suffix) else target
