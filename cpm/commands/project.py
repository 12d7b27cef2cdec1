"""Project lifecycle commands: init, add-rust, remove-rust, rust-status."""
from __future__ import annotations

import argparse
import re
import shutil

from cpm import templates
from cpm.commands.dispatch import confirm, run_tool
from cpm.commands.ux import render_checklist, render_hint_panel, render_warning_panel
from cpm.core import manifest
from cpm.core.classify import has_manifest, require_manifest
from cpm.core.env import DEFAULT_PROJECT_NAME, PROG
from cpm.core.errors import FileExists
from cpm.core.manifest import ManifestKind
from cpm.core.probe import Tool
from cpm.core.registry import CommandSpec, ExecutionContext

SCRIPT = ManifestKind.SCRIPT
COMPILED = ManifestKind.COMPILED


def _yes_flag(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument("-y", "--yes", action="store_true", help=help_text)


# init ----------------------------------------------------------------------


def _init_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", nargs="?", default=DEFAULT_PROJECT_NAME, help="Project name")
    _yes_flag(parser, "Use default values without prompting")


def add_project_scripts(doc: manifest.ManifestDocument) -> None:
    """Point the dev/build/test scripts at cpm, keeping any other scripts."""
    if not isinstance(manifest.get_field(doc, "scripts"), dict):
        manifest.set_field(doc, "scripts", {})
    for key, cmd in templates.PROJECT_SCRIPTS.items():
        manifest.set_field(doc, ("scripts", key), cmd)
    manifest.save(doc)


def handle_init(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    name = args.name
    ctx.info(f"🚀 Initializing CPM JavaScript project: {name}")
    project_dir = ctx.root / name
    if project_dir.exists():
        raise FileExists(name)
    project_dir.mkdir()

    ctx.info("📦 Setting up JavaScript project...")
    argv = [*ctx.probe.command(Tool.NPM), "init"]
    if args.yes:
        result = run_tool(ctx, [*argv, "-y"], cwd=project_dir, label="npm init -y")
        ctx.debug(result.stdout.strip())
    else:
        # npm asks its questions on the terminal
        run_tool(ctx, argv, cwd=project_dir, capture=False, label="npm init")

    add_project_scripts(manifest.load(project_dir, SCRIPT))
    (project_dir / "index.js").write_text(templates.INDEX_JS, encoding="utf-8")
    (project_dir / "README.md").write_text(templates.render_readme(name), encoding="utf-8")

    ctx.info("✅ JavaScript project initialized successfully!")
    render_hint_panel(
        ctx.console,
        "Next",
        [
            f"cd {name} && {PROG} install",
            f"{PROG} dev to start development server",
            f"{PROG} add-rust to add Rust later if needed",
        ],
    )


# add-rust ------------------------------------------------------------------


def crate_name(package_name: str | None) -> str:
    """Turn an npm package name into a valid crate name."""
    base = (package_name or "my-project").split("/")[-1]
    name = re.sub(r"[^A-Za-z0-9_]", "_", base.replace("-", "_"))
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


def configure_cargo_manifest(ctx: ExecutionContext) -> None:
    cargo = manifest.load(ctx.root, COMPILED)
    if manifest.get_field(cargo, "package") is not None:
        manifest.set_field(cargo, ("lib", "crate-type"), ["cdylib"])
    # merge, so dependencies cargo init (or the user) declared are kept
    for dep, version in templates.WASM_CRATES.items():
        manifest.set_field(cargo, ("dependencies", dep), version)
    manifest.save(cargo)


def handle_add_rust(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    require_manifest(ctx.root, SCRIPT)
    if has_manifest(ctx.root, COMPILED):
        ctx.warn("⚠️  Rust is already added to this project!")
        ctx.info(f"💡 Run '{PROG} rust-status' to check the current status")
        return

    src_dir = ctx.root / "src"
    if src_dir.exists() and not args.yes:
        if not confirm(f"'{src_dir.name}/' already exists and Rust sources will be added to it. Continue?"):
            ctx.info("❌ Operation cancelled")
            return

    ctx.info("🦀 Adding Rust to JavaScript project...")
    pkg = manifest.load(ctx.root, SCRIPT)
    crate = crate_name(manifest.get_field(pkg, "name"))

    run_tool(ctx, [*ctx.probe.command(Tool.CARGO), "init", "--name", crate, "--lib"], label="cargo init")
    configure_cargo_manifest(ctx)

    src_dir.mkdir(exist_ok=True)
    (src_dir / "lib.rs").write_text(templates.LIB_RS, encoding="utf-8")
    (ctx.root / "pkg").mkdir(exist_ok=True)

    dep, version = templates.WASM_NPM_PACKAGE
    manifest.set_field_and_save(pkg, ("dependencies", dep), version)

    ctx.info("✅ Rust added to project successfully!")
    render_hint_panel(
        ctx.console,
        "Next",
        [
            f"{PROG} build to compile Rust to WASM",
            f"{PROG} dev to start development server",
            "see src/lib.rs for Rust code examples",
        ],
    )


# remove-rust ---------------------------------------------------------------


RUST_PATHS = ("Cargo.toml", "src", "pkg")


def handle_remove_rust(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    if not has_manifest(ctx.root, COMPILED):
        ctx.warn("⚠️  No Rust found in this project!")
        return

    if not args.yes:
        render_warning_panel(
            ctx.console,
            "⚠️  This will remove all Rust files and dependencies!",
            ["Cargo.toml", "src/ directory", "pkg/ directory", "Rust dependencies from package.json"],
        )
        if not confirm("Continue?"):
            ctx.info("❌ Operation cancelled")
            return

    ctx.info("🗑️  Removing Rust from project...")
    for rel in RUST_PATHS:
        path = ctx.root / rel
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()

    if has_manifest(ctx.root, SCRIPT):
        pkg = manifest.load(ctx.root, SCRIPT)
        if manifest.remove_field(pkg, ("dependencies", templates.WASM_NPM_PACKAGE[0])):
            manifest.save(pkg)

    ctx.info("✅ Rust removed from project successfully!")
    ctx.info("💡 Project is now JavaScript-only")


# rust-status ---------------------------------------------------------------


def handle_rust_status(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    ctx.info("🔍 Checking Rust status in current project...")
    if not has_manifest(ctx.root, SCRIPT):
        ctx.info("❌ Not in a JavaScript project")
        ctx.info(f"💡 Run '{PROG} init' to create a new project")
        return

    root = ctx.root
    has_cargo = has_manifest(root, COMPILED)
    has_src = (root / "src").is_dir()
    has_lib = (root / "src" / "lib.rs").is_file()
    has_pkg = (root / "pkg").is_dir()
    render_checklist(
        ctx.console,
        "📁 Project Structure",
        {
            "package.json": True,
            "Cargo.toml": has_cargo,
            "src/ directory": has_src,
            "src/lib.rs": has_lib,
            "pkg/ directory": has_pkg,
        },
    )

    if has_cargo and has_src and has_lib:
        ctx.info("🦀 Rust is fully integrated!")
        ctx.info(f"💡 Run '{PROG} build' to compile Rust to WASM")
    elif has_cargo or has_src:
        ctx.info("⚠️  Rust is partially integrated")
        ctx.info(f"💡 Run '{PROG} add-rust' to complete the setup")
    else:
        ctx.info("📦 JavaScript-only project")
        ctx.info(f"💡 Run '{PROG} add-rust' to add Rust if needed")


COMMANDS = [
    CommandSpec("init", "Initialize a new JavaScript project", handle_init, _init_arguments),
    CommandSpec(
        "add-rust",
        "Add Rust to an existing JavaScript project",
        handle_add_rust,
        lambda p: _yes_flag(p, "Do not ask before adding Rust sources to an existing src/"),
    ),
    CommandSpec(
        "remove-rust",
        "Remove Rust from a project",
        handle_remove_rust,
        lambda p: _yes_flag(p, "Remove without prompting"),
    ),
    CommandSpec("rust-status", "Check Rust status in the current project", handle_rust_status),
]
