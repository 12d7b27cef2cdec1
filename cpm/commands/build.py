"""
Build command.

Two branches:
- compiled: ``cargo build`` then an optional ``wasm-pack`` pass (non-fatal).
- standalone bundling: stage a tiny Rust host program that embeds the
  project's entry script, compile it with ``cargo build --release`` and copy
  the binary into the project root.

The staging directory is recreated on every bundle and left in place
afterwards so a failed or surprising build can be inspected.
"""
from __future__ import annotations

import argparse
import shutil
from dataclasses import dataclass
from pathlib import Path

from cpm import templates
from cpm.commands.dispatch import run_tool
from cpm.commands.runtime import resolve_entry
from cpm.core import manifest
from cpm.core.classify import has_manifest, require_any_manifest, require_manifest
from cpm.core.env import (
    DEFAULT_APP_NAME,
    STAGED_HOST_SOURCE,
    STAGED_SCRIPT,
    STANDALONE_CRATE,
    exe_name,
)
from cpm.core.errors import CliError, FileOperationError, InternalError
from cpm.core.manifest import ManifestKind
from cpm.core.probe import Tool
from cpm.core.process import run_captured
from cpm.core.registry import CommandSpec, ExecutionContext

WASM_PACK_ARGS = ("build", "--release", "--target", "web", "--out-dir", "pkg")


@dataclass(frozen=True)
class BundleBuildPlan:
    entry_script: Path
    output_name: str
    staging_dir: Path
    runtime_path: Path

    @property
    def staged_manifest(self) -> Path:
        return self.staging_dir / "Cargo.toml"

    @property
    def staged_source(self) -> Path:
        return self.staging_dir / STAGED_HOST_SOURCE

    @property
    def staged_script(self) -> Path:
        return self.staging_dir / STAGED_SCRIPT

    @property
    def built_binary(self) -> Path:
        return self.staging_dir / "target" / "release" / exe_name(STANDALONE_CRATE)


def output_name(root: Path) -> str:
    """Executable name from package.json ``name``; scope prefixes are dropped."""
    name = None
    if has_manifest(root, ManifestKind.SCRIPT):
        name = manifest.get_field(manifest.load(root, ManifestKind.SCRIPT), "name")
    base = name.strip().split("/")[-1] if isinstance(name, str) else ""
    if base in ("", ".", ".."):
        base = DEFAULT_APP_NAME
    return exe_name(base)


def check_staging_dir(root: Path, staging: Path, entry: Path) -> None:
    """Refuse a staging dir whose removal would take project files with it."""
    root = root.resolve()
    staging = staging.resolve()
    if staging == root or root.is_relative_to(staging):
        raise FileOperationError(
            "create staging directory",
            staging,
            "staging directory must not be the project root or one of its parents",
        )
    if entry.resolve().is_relative_to(staging):
        raise FileOperationError(
            "create staging directory",
            staging,
            "staging directory must not contain the entry script",
        )


def plan_bundle(ctx: ExecutionContext) -> BundleBuildPlan:
    entry = ctx.root / resolve_entry(ctx.root)
    staging = ctx.config.staging_path
    check_staging_dir(ctx.root, staging, entry)
    return BundleBuildPlan(
        entry_script=entry,
        output_name=output_name(ctx.root),
        staging_dir=staging,
        runtime_path=ctx.config.runtime_dependency_path,
    )


def _toml_path(path: Path) -> str:
    return path.as_posix().replace('"', '\\"')


def stage_bundle(plan: BundleBuildPlan) -> None:
    """Recreate the staging dir and write the host crate into it."""
    if plan.staging_dir.exists():
        shutil.rmtree(plan.staging_dir)
    plan.staged_source.parent.mkdir(parents=True)
    shutil.copyfile(plan.entry_script, plan.staged_script)
    plan.staged_source.write_text(templates.STANDALONE_TEMPLATE, encoding="utf-8")
    plan.staged_manifest.write_text(
        templates.render_standalone_manifest(_toml_path(plan.runtime_path)),
        encoding="utf-8",
    )


def bundle_standalone(ctx: ExecutionContext) -> Path:
    """Run the whole bundling pipeline and return the produced executable."""
    plan = plan_bundle(ctx)
    ctx.info(f"📦 Bundling {plan.entry_script.relative_to(ctx.root).as_posix()} into a standalone executable...")
    ctx.debug(f"staging={plan.staging_dir} runtime={plan.runtime_path}")
    if not plan.runtime_path.exists():
        ctx.warn(f"⚠️  JetCrab runtime not found at {plan.runtime_path}; set JETCRAB_PATH if the build fails")

    stage_bundle(plan)
    ctx.info("🦀 Compiling host program (release)...")
    run_tool(
        ctx,
        [*ctx.probe.command(Tool.CARGO), "build", "--release"],
        cwd=plan.staging_dir,
        label="cargo build --release",
    )

    if not plan.built_binary.is_file():
        raise InternalError("binary not found after build")
    target = ctx.root / plan.output_name
    shutil.copy2(plan.built_binary, target)
    ctx.info(f"✅ Standalone executable created: {plan.output_name}")
    ctx.debug(f"staging directory kept at {plan.staging_dir}")
    return target


def build_compiled(ctx: ExecutionContext) -> None:
    ctx.info("🦀 Building Rust project...")
    run_tool(ctx, [*ctx.probe.command(Tool.CARGO), "build"], label="cargo build")

    wasm_pack = ctx.probe.probe(Tool.WASM_PACK)
    if wasm_pack is not None:
        ctx.info("🌐 Building WebAssembly...")
        try:
            result = run_captured([*wasm_pack.argv, *WASM_PACK_ARGS], cwd=ctx.root, debug=ctx.debug)
        except CliError as exc:
            ctx.warn(f"⚠️  WASM build failed, but continuing... ({exc})")
        else:
            if result.ok:
                ctx.info("✅ WebAssembly built successfully!")
            else:
                ctx.warn("⚠️  WASM build failed, but continuing...")
                ctx.debug(result.stderr.strip())
    ctx.info("✅ Rust project built!")


def _build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--standalone",
        action="store_true",
        help="Bundle the JavaScript entry point into a native executable even when Cargo.toml exists",
    )


def handle_build(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    ctx.info("🔨 Building project...")
    kind = require_any_manifest(ctx.root)
    if kind.has_compiled and not args.standalone:
        build_compiled(ctx)
        return
    if not kind.has_script:
        require_manifest(ctx.root, ManifestKind.SCRIPT, "Standalone bundling needs a JavaScript project.")
    bundle_standalone(ctx)


COMMANDS = [
    CommandSpec("build", "Build the project", handle_build, _build_arguments),
]
