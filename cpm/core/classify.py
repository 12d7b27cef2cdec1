"""Project classification from manifest presence."""
from __future__ import annotations

from enum import Enum
from pathlib import Path

from .env import COMPILED_MANIFEST, PROG, SCRIPT_MANIFEST
from .errors import FileOperationError
from .manifest import ManifestKind, manifest_path


class ProjectKind(Enum):
    SCRIPT_ONLY = "script-only"
    COMPILED_ONLY = "compiled-only"
    HYBRID = "hybrid"
    UNINITIALIZED = "uninitialized"

    @property
    def has_script(self) -> bool:
        return self in (ProjectKind.SCRIPT_ONLY, ProjectKind.HYBRID)

    @property
    def has_compiled(self) -> bool:
        return self in (ProjectKind.COMPILED_ONLY, ProjectKind.HYBRID)


def has_manifest(root: Path, kind: ManifestKind) -> bool:
    return manifest_path(root, kind).is_file()


def classify(root: Path) -> ProjectKind:
    """Look only at which manifests exist; never reads them."""
    script = has_manifest(root, ManifestKind.SCRIPT)
    compiled = has_manifest(root, ManifestKind.COMPILED)
    if script and compiled:
        return ProjectKind.HYBRID
    if script:
        return ProjectKind.SCRIPT_ONLY
    if compiled:
        return ProjectKind.COMPILED_ONLY
    return ProjectKind.UNINITIALIZED


_REMEDY = {
    ManifestKind.SCRIPT: f"Not in a JavaScript project. Run '{PROG} init' first.",
    ManifestKind.COMPILED: f"No Rust crate in this project. Run '{PROG} add-rust' first.",
}


def require_manifest(root: Path, kind: ManifestKind, remedy: str | None = None) -> Path:
    """Return the manifest path or raise a FileOperationError naming the fix."""
    path = manifest_path(root, kind)
    if not path.is_file():
        raise FileOperationError(f"read {kind.filename}", kind.filename, remedy or _REMEDY[kind])
    return path


def require_any_manifest(root: Path) -> ProjectKind:
    kind = classify(root)
    if kind is ProjectKind.UNINITIALIZED:
        raise FileOperationError(
            f"read {SCRIPT_MANIFEST}",
            SCRIPT_MANIFEST,
            f"Not in a project (no {SCRIPT_MANIFEST} or {COMPILED_MANIFEST}). Run '{PROG} init' first.",
        )
    return kind


__all__ = ["ProjectKind", "classify", "has_manifest", "require_any_manifest", "require_manifest"]
