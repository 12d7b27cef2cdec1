"""Runtime-oriented commands: dev (optionally watched) and run."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from cpm.commands.dispatch import run_tool
from cpm.core import manifest
from cpm.core.classify import has_manifest
from cpm.core.env import DEFAULT_ENTRY, ENTRY_CANDIDATES, PROG
from cpm.core.errors import EntryPointNotFound
from cpm.core.manifest import ManifestKind
from cpm.core.probe import Tool
from cpm.core.process import display, short_label
from cpm.core.registry import CommandSpec, ExecutionContext


def resolve_entry(root: Path) -> Path:
    """js/index.js wins over index.js; returns a path relative to root."""
    for candidate in ENTRY_CANDIDATES:
        if (root / candidate).is_file():
            return Path(candidate)
    raise EntryPointNotFound("read JavaScript entry point", DEFAULT_ENTRY, "File not found")


def runtime_command(ctx: ExecutionContext, script: Path | str, extra: Sequence[str] = ()) -> list[str]:
    """Prefer the JetCrab runtime, fall back to Node.js."""
    ctx.info("🔍 Looking for JavaScript runtime...")
    native = ctx.probe.probe(Tool.JETCRAB)
    if native is not None:
        ctx.info("🦀 Using JetCrab runtime...")
        return [*native.argv, "run", str(script), *extra]
    ctx.info("🟨 Using Node.js runtime...")
    return [*ctx.probe.command(Tool.NODE), str(script), *extra]


def watch_command(ctx: ExecutionContext, argv: Sequence[str]) -> Optional[list[str]]:
    """Wrap argv in the watcher's restart-on-change mode, or None if there is no watcher."""
    watcher = ctx.probe.probe(Tool.WATCHER)
    if watcher is None:
        ctx.warn(f"⚠️  '{ctx.config.watcher}' not found; running without watch (pip install watchfiles)")
        return None
    ctx.info(f"👀 Watching {ctx.root} for changes...")
    return [*watcher.argv, "--target-type", "command", display(argv), "."]


def _dev_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-w", "--watch", action="store_true", help="Restart when files change")


def handle_dev(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    ctx.info("🚀 Starting development server...")
    try:
        entry = resolve_entry(ctx.root)
    except EntryPointNotFound:
        ctx.info(f"💡 Tip: Run '{PROG} init' to create a new project or ensure index.js exists")
        raise
    argv = runtime_command(ctx, entry, args.passthrough)
    label = short_label(argv)
    if args.watch:
        argv = watch_command(ctx, argv) or argv
    run_tool(ctx, argv, capture=False, label=label)


def _run_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("script", help="Script name from package.json, or a file to execute")
    parser.epilog = "Arguments after -- are passed to the script."


def handle_run(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    target = args.script
    extra = list(args.passthrough)
    if has_manifest(ctx.root, ManifestKind.SCRIPT):
        scripts = manifest.get_field(manifest.load(ctx.root, ManifestKind.SCRIPT), "scripts")
        if isinstance(scripts, dict) and target in scripts:
            ctx.info(f"▶️  Running script '{target}': {scripts[target]}")
            argv = [*ctx.probe.command(Tool.NPM), "run", target]
            if extra:
                argv += ["--", *extra]
            run_tool(ctx, argv, capture=False, label=f"npm run {target}")
            return

    if not (ctx.root / target).is_file():
        raise EntryPointNotFound(
            "resolve script",
            target,
            "No script with that name in package.json and no such file",
        )
    ctx.info(f"▶️  Running {target}")
    argv = runtime_command(ctx, target, extra)
    run_tool(ctx, argv, capture=False, label=short_label(argv))


COMMANDS = [
    CommandSpec("dev", "Start development server", handle_dev, _dev_arguments),
    CommandSpec("run", "Run a package.json script or a JavaScript file", handle_run, _run_arguments),
]
