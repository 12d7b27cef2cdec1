from pathlib import Path

import pytest

from cpm.core.errors import (
    ExternalCommandFailed,
    FileExists,
    FileOperationError,
    InternalError,
    IOFailure,
    ManifestParseError,
)
from cpm.core.process import CommandResult, ensure_success, run_captured, short_label


def test_error_messages():
    assert str(FileOperationError("read package.json", "package.json", "File not found")) == (
        "File operation 'read package.json' failed on 'package.json': File not found"
    )
    assert str(FileExists("demo")) == "File already exists: demo"
    assert str(ExternalCommandFailed("npm install", "boom")) == "Command 'npm install' failed: boom"
    assert str(InternalError("binary not found after build")) == "Internal error: binary not found after build"
    assert str(ManifestParseError("Cargo.toml", "TOML", "bad key")) == "TOML error: bad key (Cargo.toml)"
    assert str(IOFailure(OSError("disk full"))) == "IO error: disk full"


def test_short_label_drops_executable_dir():
    assert short_label(["/usr/local/bin/cargo", "build", "--release"]) == "cargo build --release"
    assert short_label(["node", "my script.js"]) == "node 'my script.js'"


def test_ensure_success_prefers_stderr():
    ok = CommandResult(("npm", "install"), 0)
    assert ensure_success(ok) is ok
    with pytest.raises(ExternalCommandFailed) as excinfo:
        ensure_success(CommandResult(("npm", "install"), 1, stdout="partial", stderr="ERESOLVE\n"))
    assert excinfo.value.command == "npm install"
    assert excinfo.value.message == "ERESOLVE"
    with pytest.raises(ExternalCommandFailed) as excinfo:
        ensure_success(CommandResult(("cargo", "test"), 101), message="tests failed")
    assert excinfo.value.message == "tests failed"
    with pytest.raises(ExternalCommandFailed) as excinfo:
        ensure_success(CommandResult(("cargo", "test"), 101))
    assert excinfo.value.message == "exit status 101"


def test_unspawnable_command_is_external_failure(tmp_path: Path):
    missing = tmp_path / "bin" / "no-such-tool"
    with pytest.raises(ExternalCommandFailed) as excinfo:
        run_captured([str(missing), "--version"], cwd=tmp_path)
    assert excinfo.value.command == "no-such-tool --version"
