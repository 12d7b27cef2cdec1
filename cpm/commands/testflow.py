"""Test command: npm test and/or cargo test depending on the project kind."""
from __future__ import annotations

import argparse
from typing import Optional

from cpm.commands.dispatch import run_tool
from cpm.core import manifest
from cpm.core.classify import require_any_manifest
from cpm.core.env import PROG
from cpm.core.manifest import ManifestKind
from cpm.core.probe import Tool
from cpm.core.registry import CommandSpec, ExecutionContext

NPM_PLACEHOLDER = "no test specified"


def npm_test_skip_reason(doc: manifest.ManifestDocument) -> Optional[str]:
    """Why `npm test` should not run for this package, or None when it should."""
    script = manifest.get_field(doc, ("scripts", "test"))
    if not isinstance(script, str) or not script.strip():
        return "No test script found in package.json"
    if NPM_PLACEHOLDER in script:
        return "package.json still has npm's placeholder test script"
    if script.strip().split()[:2] == [PROG, "test"]:
        # `npm test` would run this command again
        return f"test script delegates back to '{PROG} test'"
    return None


def handle_test(ctx: ExecutionContext, args: argparse.Namespace) -> None:
    kind = require_any_manifest(ctx.root)
    ctx.info("🧪 Running tests...")

    if kind.has_script:
        reason = npm_test_skip_reason(manifest.load(ctx.root, ManifestKind.SCRIPT))
        if reason:
            ctx.warn(f"⚠️  {reason}; skipping JavaScript tests")
            ctx.info("💡 Add a test script to package.json or run tests manually")
        else:
            ctx.info("🟨 Running JavaScript tests...")
            extra = ["--", *args.passthrough] if args.passthrough else []
            run_tool(ctx, [*ctx.probe.command(Tool.NPM), "test", *extra], label="npm test", echo=True)
            ctx.info("✅ JavaScript tests completed!")

    if kind.has_compiled:
        ctx.info("🦀 Running Rust tests...")
        run_tool(ctx, [*ctx.probe.command(Tool.CARGO), "test"], label="cargo test", echo=True)
        ctx.info("✅ Rust tests completed!")


COMMANDS = [
    CommandSpec("test", "Run tests", handle_test),
]
