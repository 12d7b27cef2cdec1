"""Dependency commands delegated to npm (and cargo for hybrid installs)."""
from __future__ import annotations

import argparse
from typing import Any, List

from cpm.commands.dispatch import run_tool
from cpm.commands.ux import render_list
from cpm.core import manifest
from cpm.core.classify import require_any_manifest, require_manifest
from cpm.core.env import PROG
from cpm.core.manifest import ManifestKind
from cpm.core.probe import Tool
from cpm.core.registry import CommandSpec, ExecutionContext

SCRIPT = ManifestKind.SCRIPT


def _npm(ctx: ExecutionContext, *args: str) -> list[str]:
    return [*ctx.probe.command(Tool.NPM), *args]


def handle_install(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    kind = require_any_manifest(ctx.root)
    ctx.info("📦 Installing dependencies...")
    if kind.has_script:
        ctx.info("🟨 Installing JavaScript dependencies with npm...")
        run_tool(ctx, _npm(ctx, "install", *args.passthrough), label="npm install")
        ctx.info("✅ JavaScript dependencies installed!")
    if kind.has_compiled:
        ctx.info("🦀 Installing Rust dependencies with cargo...")
        run_tool(ctx, [*ctx.probe.command(Tool.CARGO), "build"], label="cargo build")
        ctx.info("✅ Rust dependencies installed!")


def _add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("packages", nargs="+", help="Packages to add")
    parser.add_argument("-D", "--dev", action="store_true", help="Save as a development dependency")


def handle_add(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    flags = ["--save-dev"] if args.dev else []
    section = "devDependencies" if args.dev else "dependencies"
    ctx.info(f"➕ Adding {', '.join(args.packages)} to {section}...")
    run_tool(ctx, _npm(ctx, "install", *flags, *args.packages), label="npm install")
    ctx.info(f"✅ Added {len(args.packages)} package(s)")


def handle_remove(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    ctx.info(f"➖ Removing {', '.join(args.packages)}...")
    run_tool(ctx, _npm(ctx, "uninstall", *args.packages), label="npm uninstall")
    ctx.info(f"✅ Removed {len(args.packages)} package(s)")


def handle_lock(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    ctx.info("🔒 Updating package-lock.json...")
    run_tool(ctx, _npm(ctx, "install", "--package-lock-only"), label="npm install --package-lock-only")
    ctx.info("✅ Lockfile updated")


def handle_publish(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    doc = manifest.load(ctx.root, SCRIPT)
    name = manifest.get_field(doc, "name") or ctx.root.name
    version = manifest.get_field(doc, "version") or "?"
    ctx.info(f"🚢 Publishing {name}@{version}...")
    run_tool(ctx, _npm(ctx, "publish", *args.passthrough), label="npm publish")
    ctx.info(f"✅ Published {name}@{version}")


def workspace_members(value: Any) -> List[str]:
    """npm accepts either a list of globs or {"packages": [...]}."""
    if isinstance(value, dict):
        value = value.get("packages")
    if isinstance(value, list):
        return [str(v) for v in value]
    return []


def handle_workspace(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    doc = manifest.load(ctx.root, SCRIPT)
    members = workspace_members(manifest.get_field(doc, "workspaces"))
    render_list(ctx.console, "Workspaces", members, "No workspaces declared in package.json")
    if not args.list:
        return
    result = run_tool(ctx, _npm(ctx, "ls", "--workspaces", "--depth=0"), label="npm ls --workspaces")
    ctx.console.print(result.stdout.rstrip(), markup=False)


def _npx_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("package", help="Package to execute")
    parser.epilog = "Arguments after -- are passed to the package."


def handle_npx(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    ctx.info(f"🦀 CPM detected npx command for package: {args.package}")
    ctx.info("📦 Executing with npx...")
    run_tool(
        ctx,
        [*ctx.probe.command(Tool.NPX), args.package, *args.passthrough],
        capture=False,
        label=f"npx {args.package}",
        message="npx command failed",
    )


COMMANDS = [
    CommandSpec("npx", "Execute packages using npx", handle_npx, _npx_arguments),
    CommandSpec("add", "Add packages to the project", handle_add, _add_arguments),
    CommandSpec(
        "remove",
        "Remove packages from the project",
        handle_remove,
        lambda p: p.add_argument("packages", nargs="+", help="Packages to remove"),
    ),
    CommandSpec("lock", "Update the lockfile without installing", handle_lock),
    CommandSpec(
        "workspace",
        "Show npm workspaces",
        handle_workspace,
        lambda p: p.add_argument("-l", "--list", action="store_true", help="List installed workspace packages via npm"),
    ),
    CommandSpec("publish", "Publish the package to the registry", handle_publish),
    CommandSpec("install", f"Install dependencies (npm and/or cargo); see '{PROG} add' for new packages", handle_install),
]
