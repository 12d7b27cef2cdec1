"""Command handlers grouped by feature area."""

from . import build, packages, project, runtime, testflow

# Help listing order
COMMAND_ORDER = (
    "init",
    "add-rust",
    "remove-rust",
    "rust-status",
    "npx",
    "add",
    "remove",
    "lock",
    "workspace",
    "publish",
    "install",
    "build",
    "dev",
    "test",
    "run",
)


def default_commands():
    by_name = {}
    for module in (project, packages, build, runtime, testflow):
        for spec in module.COMMANDS:
            by_name[spec.name] = spec
    return [by_name[name] for name in COMMAND_ORDER]


__all__ = ["COMMAND_ORDER", "default_commands"]
