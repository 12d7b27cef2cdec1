"""
Manifest accessor for package.json and Cargo.toml.

Documents are loaded into an in-memory tree, edited by key path, and written
back whole. package.json goes through the json module (key order is kept);
Cargo.toml goes through tomlkit so comments, formatting and every key we do
not know about survive a rewrite.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, MutableMapping, Optional, Sequence, Union

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Item

from .env import COMPILED_MANIFEST, SCRIPT_MANIFEST
from .errors import ManifestNotFound, ManifestParseError, ManifestWriteError

FieldPath = Union[str, Sequence[str]]


class ManifestKind(Enum):
    SCRIPT = SCRIPT_MANIFEST
    COMPILED = COMPILED_MANIFEST

    @property
    def filename(self) -> str:
        return self.value

    @property
    def format(self) -> str:
        return "JSON" if self is ManifestKind.SCRIPT else "TOML"


@dataclass
class ManifestDocument:
    kind: ManifestKind
    path: Path
    data: MutableMapping[str, Any]


def manifest_path(root: Path, kind: ManifestKind) -> Path:
    return Path(root) / kind.filename


def load(root: Path, kind: ManifestKind) -> ManifestDocument:
    path = manifest_path(root, kind)
    if not path.is_file():
        raise ManifestNotFound(f"read {kind.filename}", kind.filename, "File not found")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestNotFound(f"read {kind.filename}", kind.filename, str(exc)) from exc
    return ManifestDocument(kind, path, _parse(kind, path, text))


def _parse(kind: ManifestKind, path: Path, text: str) -> MutableMapping[str, Any]:
    if kind is ManifestKind.SCRIPT:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestParseError(path, "JSON", str(exc)) from exc
        if not isinstance(data, dict):
            raise ManifestParseError(path, "JSON", "top-level value must be an object")
        return data
    try:
        return tomlkit.parse(text)
    except TOMLKitError as exc:
        raise ManifestParseError(path, "TOML", str(exc)) from exc


def _split(path: FieldPath) -> list[str]:
    if isinstance(path, str):
        parts = path.split(".")
    else:
        parts = [str(p) for p in path]
    if not parts or any(p == "" for p in parts):
        raise ValueError(f"invalid field path: {path!r}")
    return parts


def get_field(doc: ManifestDocument, path: FieldPath) -> Optional[Any]:
    """Return the value at ``path`` or None when any segment is missing."""
    node: Any = doc.data
    for key in _split(path):
        if not isinstance(node, MutableMapping) or key not in node:
            return None
        node = node[key]
    if isinstance(node, Item):
        return node.unwrap()
    return node


def set_field(doc: ManifestDocument, path: FieldPath, value: Any) -> None:
    """Set ``path`` in memory, creating intermediate tables as needed."""
    keys = _split(path)
    node: Any = doc.data
    for key in keys[:-1]:
        child = node.get(key) if isinstance(node, MutableMapping) else None
        if not isinstance(child, MutableMapping):
            child = tomlkit.table() if doc.kind is ManifestKind.COMPILED else {}
            node[key] = child
        node = child
    node[keys[-1]] = value


def remove_field(doc: ManifestDocument, path: FieldPath) -> bool:
    keys = _split(path)
    node: Any = doc.data
    for key in keys[:-1]:
        if not isinstance(node, MutableMapping) or key not in node:
            return False
        node = node[key]
    if isinstance(node, MutableMapping) and keys[-1] in node:
        del node[keys[-1]]
        return True
    return False


def dumps(doc: ManifestDocument) -> str:
    if doc.kind is ManifestKind.SCRIPT:
        return json.dumps(doc.data, indent=2, ensure_ascii=False) + "\n"
    return tomlkit.dumps(doc.data)


def save(doc: ManifestDocument) -> None:
    """Rewrite the whole file from the in-memory tree."""
    text = dumps(doc)
    try:
        doc.path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ManifestWriteError(f"write {doc.kind.filename}", doc.path, str(exc)) from exc


def set_field_and_save(doc: ManifestDocument, path: FieldPath, value: Any) -> None:
    set_field(doc, path, value)
    save(doc)


__all__ = [
    "ManifestDocument",
    "ManifestKind",
    "dumps",
    "get_field",
    "load",
    "manifest_path",
    "remove_field",
    "save",
    "set_field",
    "set_field_and_save",
]
