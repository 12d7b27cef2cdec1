"""
Test bootstrap for cpm.

Puts the repo root on sys.path so tests run from any working directory, and
provides fake toolchain executables (npm, cargo, ...) as small shell scripts
placed first on PATH. Each fake appends its argv to a call log.
"""
import json
import os
import stat
import sys
from pathlib import Path

import pytest

_HERE = os.path.dirname(os.path.abspath(__file__))
_ROOT = os.path.abspath(os.path.join(_HERE, os.pardir))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

from cpm.cli_app import build_registry, main  # noqa: E402
from cpm.core.registry import ExecutionContext, split_passthrough  # noqa: E402

_ENV_VARS = (
    "JETCRAB_PATH",
    "CPM_RUNTIME",
    "CPM_FALLBACK_RUNTIME",
    "CPM_WATCHER",
    "CPM_STAGING_DIR",
    "CPM_LOG_FILE",
    "CPM_EASTER_EGG",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


class FakeBin:
    """Directory of fake executables plus the log of their invocations."""

    def __init__(self, bin_dir: Path, log: Path) -> None:
        self.bin_dir = bin_dir
        self.log = log

    def add(self, name: str, *, rc: int = 0, stdout: str = "", stderr: str = "", body: str = "") -> Path:
        script = "\n".join(
            [
                "#!/bin/sh",
                'if [ "$1" = "--version" ]; then echo "' + name + ' 0.0.0-fake"; exit 0; fi',
                'echo "' + name + ' $*" >> "$CPM_FAKE_LOG"',
                body,
                f"printf '%s' '{stdout}'" if stdout else "",
                f"printf '%s' '{stderr}' >&2" if stderr else "",
                f"exit {rc}",
                "",
            ]
        )
        path = self.bin_dir / name
        path.write_text(script)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    def calls(self) -> list[str]:
        if not self.log.exists():
            return []
        return [line for line in self.log.read_text().splitlines() if line]


@pytest.fixture
def fake_bin(tmp_path, monkeypatch):
    if os.name == "nt":
        pytest.skip("fake toolchains are POSIX shell scripts")
    bin_dir = tmp_path / "fakebin"
    bin_dir.mkdir()
    log = tmp_path / "calls.log"
    monkeypatch.setenv("PATH", os.pathsep.join([str(bin_dir), "/usr/bin", "/bin"]))
    monkeypatch.setenv("CPM_FAKE_LOG", str(log))
    return FakeBin(bin_dir, log)


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "proj"
    root.mkdir()
    return root


def write_package_json(root: Path, data: dict | None = None) -> Path:
    data = data if data is not None else {"name": "demo", "version": "1.0.0"}
    path = root / "package.json"
    path.write_text(json.dumps(data, indent=2))
    return path


def write_cargo_toml(root: Path, name: str = "demo") -> Path:
    path = root / "Cargo.toml"
    path.write_text(f'[package]\nname = "{name}"\nversion = "0.1.0"\nedition = "2021"\n\n[dependencies]\n')
    return path


def invoke(root: Path, *argv: str):
    """Parse argv and call the handler directly so CliErrors propagate to the test."""
    head, passthrough = split_passthrough(argv)
    registry = build_registry()
    args = registry.build_parser().parse_args(head)
    args.passthrough = passthrough
    ctx = ExecutionContext.create(root, verbose=args.verbose, quiet=args.quiet)
    return registry.get(args.command).handler(ctx, args)


def cli(root: Path, *argv: str) -> int:
    return main(list(argv), root=root, hooks=())
