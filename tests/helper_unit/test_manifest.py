import json
from pathlib import Path

import pytest

from cpm.core import manifest
from cpm.core.errors import FileOperationError, ManifestNotFound, ManifestParseError
from cpm.core.manifest import ManifestKind

CARGO = """\
# workspace crate
[package]
name = "demo"   # keep me
version = "0.1.0"

[profile.release]
lto = true

[dependencies]
serde = "1.0"
"""


def test_script_manifest_roundtrip_keeps_other_keys(tmp_path: Path):
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "demo", "version": "1.0.0", "private": True, "browserslist": ["defaults"]})
    )
    doc = manifest.load(tmp_path, ManifestKind.SCRIPT)
    manifest.set_field_and_save(doc, ("dependencies", "wasm-bindgen"), "^0.2")

    data = json.loads((tmp_path / "package.json").read_text())
    assert data["dependencies"] == {"wasm-bindgen": "^0.2"}
    assert data["private"] is True
    assert data["browserslist"] == ["defaults"]
    assert list(data)[:2] == ["name", "version"]


def test_compiled_manifest_roundtrip_keeps_comments_and_tables(tmp_path: Path):
    (tmp_path / "Cargo.toml").write_text(CARGO)
    doc = manifest.load(tmp_path, ManifestKind.COMPILED)
    manifest.set_field(doc, ("lib", "crate-type"), ["cdylib"])
    manifest.set_field(doc, "dependencies.wasm-bindgen", "0.2")
    manifest.save(doc)

    text = (tmp_path / "Cargo.toml").read_text()
    assert "# workspace crate" in text
    assert "# keep me" in text
    assert "lto = true" in text
    reread = manifest.load(tmp_path, ManifestKind.COMPILED)
    assert manifest.get_field(reread, "lib.crate-type") == ["cdylib"]
    assert manifest.get_field(reread, ("dependencies", "serde")) == "1.0"
    assert manifest.get_field(reread, ("dependencies", "wasm-bindgen")) == "0.2"


def test_get_field_missing_path_is_none(tmp_path: Path):
    (tmp_path / "package.json").write_text('{"name": "demo", "scripts": "not-a-table"}')
    doc = manifest.load(tmp_path, ManifestKind.SCRIPT)
    assert manifest.get_field(doc, "version") is None
    assert manifest.get_field(doc, "scripts.test") is None
    assert manifest.get_field(doc, "name") == "demo"


def test_remove_field(tmp_path: Path):
    (tmp_path / "package.json").write_text('{"dependencies": {"a": "1", "b": "2"}}')
    doc = manifest.load(tmp_path, ManifestKind.SCRIPT)
    assert manifest.remove_field(doc, "dependencies.a") is True
    assert manifest.remove_field(doc, "dependencies.zzz") is False
    assert manifest.remove_field(doc, "devDependencies.a") is False
    assert manifest.get_field(doc, "dependencies") == {"b": "2"}


def test_missing_manifest_raises_not_found(tmp_path: Path):
    with pytest.raises(ManifestNotFound) as excinfo:
        manifest.load(tmp_path, ManifestKind.SCRIPT)
    assert isinstance(excinfo.value, FileOperationError)
    assert excinfo.value.path == "package.json"
    assert str(excinfo.value) == "File operation 'read package.json' failed on 'package.json': File not found"


@pytest.mark.parametrize(
    "kind,content,fmt",
    [
        (ManifestKind.SCRIPT, "{not json", "JSON"),
        (ManifestKind.SCRIPT, "[1, 2]", "JSON"),
        (ManifestKind.COMPILED, "[package\nname = ", "TOML"),
    ],
)
def test_malformed_manifest_raises_parse_error(tmp_path: Path, kind, content, fmt):
    (tmp_path / kind.filename).write_text(content)
    with pytest.raises(ManifestParseError) as excinfo:
        manifest.load(tmp_path, kind)
    assert excinfo.value.format == fmt
    assert str(excinfo.value).startswith(f"{fmt} error: ")


def test_invalid_field_path_is_rejected(tmp_path: Path):
    (tmp_path / "package.json").write_text("{}")
    doc = manifest.load(tmp_path, ManifestKind.SCRIPT)
    with pytest.raises(ValueError):
        manifest.set_field(doc, "scripts..dev", "x")
