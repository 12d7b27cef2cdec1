from pathlib import Path

import pytest

from conftest import cli, invoke, write_cargo_toml, write_package_json
from cpm.commands.build import output_name
from cpm.core.errors import ExternalCommandFailed, FileOperationError, InternalError

CARGO_RELEASE = (
    'if [ "$1" = "build" ] && [ "$2" = "--release" ]; then '
    "mkdir -p target/release && printf 'bin' > target/release/standalone-app; fi"
)


def _script_project(root: Path, name: str = "demo") -> None:
    write_package_json(root, {"name": name, "version": "1.0.0"})
    (root / "index.js").write_text("console.log('hi');\n")


def test_output_name_from_package(project: Path):
    assert output_name(project) == "cpm-app"
    write_package_json(project, {"name": "@acme/tool"})
    assert output_name(project) == "tool"


@pytest.mark.parametrize("name", ["@scope/", ".", "..", "   "])
def test_output_name_never_names_a_directory(project: Path, name):
    write_package_json(project, {"name": name})
    assert output_name(project) == "cpm-app"


def test_bundle_produces_executable(project: Path, fake_bin, monkeypatch):
    runtime = project.parent / "engine"
    runtime.mkdir()
    monkeypatch.setenv("JETCRAB_PATH", str(runtime))
    _script_project(project)
    fake_bin.add("cargo", body=CARGO_RELEASE)

    assert cli(project, "build") == 0
    assert (project / "demo").read_text() == "bin"
    assert fake_bin.calls() == ["cargo build --release"]

    staging = project / ".cpm-build"
    assert (staging / "src" / "app.js").read_text() == "console.log('hi');\n"
    assert 'include_str!("app.js")' in (staging / "src" / "main.rs").read_text()
    staged_manifest = (staging / "Cargo.toml").read_text()
    assert 'name = "standalone-app"' in staged_manifest
    assert f'jetcrab = {{ path = "{runtime.as_posix()}" }}' in staged_manifest


def test_bundle_uses_js_dir_entry(project: Path, fake_bin):
    write_package_json(project)
    (project / "index.js").write_text("root")
    (project / "js").mkdir()
    (project / "js" / "index.js").write_text("nested")
    fake_bin.add("cargo", body=CARGO_RELEASE)
    assert cli(project, "build") == 0
    assert (project / ".cpm-build" / "src" / "app.js").read_text() == "nested"


def test_bundle_compile_failure_keeps_staging(project: Path, fake_bin, capsys):
    _script_project(project)
    fake_bin.add("cargo", rc=101, stderr="error[E0432]: unresolved import")
    with pytest.raises(ExternalCommandFailed) as excinfo:
        invoke(project, "build")
    assert excinfo.value.command == "cargo build --release"
    assert "unresolved import" in excinfo.value.message
    assert (project / ".cpm-build" / "src" / "main.rs").exists()
    assert not (project / "demo").exists()


def test_bundle_missing_binary_is_internal_error(project: Path, fake_bin):
    _script_project(project)
    fake_bin.add("cargo")
    with pytest.raises(InternalError) as excinfo:
        invoke(project, "build")
    assert str(excinfo.value) == "Internal error: binary not found after build"


def test_bundle_restages_from_scratch(project: Path, fake_bin):
    _script_project(project)
    stale = project / ".cpm-build" / "stale.txt"
    stale.parent.mkdir()
    stale.write_text("old")
    fake_bin.add("cargo", body=CARGO_RELEASE)
    assert cli(project, "build") == 0
    assert not stale.exists()


@pytest.mark.parametrize("staging", [".", "..", "js"])
def test_bundle_refuses_staging_dir_over_project_files(project: Path, fake_bin, monkeypatch, staging):
    write_package_json(project)
    (project / "js").mkdir()
    (project / "js" / "index.js").write_text("nested")
    (project / "precious.txt").write_text("keep")
    monkeypatch.setenv("CPM_STAGING_DIR", staging)
    fake_bin.add("cargo", body=CARGO_RELEASE)
    with pytest.raises(FileOperationError) as excinfo:
        invoke(project, "build")
    assert excinfo.value.operation == "create staging directory"
    assert (project / "precious.txt").read_text() == "keep"
    assert (project / "js" / "index.js").read_text() == "nested"
    assert fake_bin.calls() == []


def test_staged_crate_is_its_own_workspace(project: Path, fake_bin):
    _script_project(project)
    (project / "Cargo.toml").write_text('[workspace]\nmembers = ["crates/*"]\n')
    fake_bin.add("cargo", body=CARGO_RELEASE)
    assert cli(project, "build", "--standalone") == 0
    staged = (project / ".cpm-build" / "Cargo.toml").read_text()
    assert staged.rstrip().endswith("[workspace]")


def test_bundle_without_entry_point(project: Path, fake_bin):
    write_package_json(project)
    fake_bin.add("cargo", body=CARGO_RELEASE)
    with pytest.raises(FileOperationError) as excinfo:
        invoke(project, "build")
    assert excinfo.value.path == "index.js"
    assert fake_bin.calls() == []


def test_compiled_build_tolerates_wasm_pack_failure(project: Path, fake_bin, capsys):
    write_package_json(project)
    write_cargo_toml(project)
    fake_bin.add("cargo")
    fake_bin.add("wasm-pack", rc=1, stderr="wasm32 target missing")
    assert cli(project, "build") == 0
    assert fake_bin.calls() == [
        "cargo build",
        "wasm-pack build --release --target web --out-dir pkg",
    ]
    assert "WASM build failed, but continuing" in capsys.readouterr().err


def test_compiled_build_without_wasm_pack(project: Path, fake_bin):
    write_cargo_toml(project)
    fake_bin.add("cargo")
    assert cli(project, "build") == 0
    assert fake_bin.calls() == ["cargo build"]


def test_compiled_build_failure(project: Path, fake_bin):
    write_cargo_toml(project)
    fake_bin.add("cargo", rc=101)
    with pytest.raises(ExternalCommandFailed) as excinfo:
        invoke(project, "build")
    assert excinfo.value.command == "cargo build"


def test_standalone_flag_bundles_hybrid_project(project: Path, fake_bin, monkeypatch):
    _script_project(project)
    write_cargo_toml(project)
    fake_bin.add("cargo", body=CARGO_RELEASE)
    assert cli(project, "build", "--standalone") == 0
    assert fake_bin.calls() == ["cargo build --release"]
    assert (project / "demo").exists()


def test_standalone_flag_needs_script_project(project: Path, fake_bin):
    write_cargo_toml(project)
    fake_bin.add("cargo")
    with pytest.raises(FileOperationError) as excinfo:
        invoke(project, "build", "--standalone")
    assert excinfo.value.path == "package.json"
