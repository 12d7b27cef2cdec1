"""
Command registry and dispatcher.

Commands are plain ``CommandSpec`` records registered once at start-up. The
registry owns the argparse tree, picks exactly one handler per run, gives it a
fresh ``ExecutionContext`` and maps the outcome onto an exit status.
"""
from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from rich.console import Console

from .config import CpmConfig
from .errors import CliError, IOFailure
from .logging_adapter import append_command_log, make_logger
from .probe import ToolchainProbe

Handler = Callable[["ExecutionContext", argparse.Namespace], None]
ArgumentBuilder = Callable[[argparse.ArgumentParser], None]


@dataclass(frozen=True)
class CommandSpec:
    name: str
    help: str
    handler: Handler
    arguments: Optional[ArgumentBuilder] = None
    description: Optional[str] = None

    def configure(self, parser: argparse.ArgumentParser) -> None:
        if self.arguments is not None:
            self.arguments(parser)


@dataclass
class ExecutionContext:
    """Per-invocation state handed to a command handler."""

    root: Path
    config: CpmConfig
    probe: ToolchainProbe
    verbose: bool = False
    quiet: bool = False
    info: Callable[[str], None] = field(init=False, repr=False)
    warn: Callable[[str], None] = field(init=False, repr=False)
    debug: Callable[[str], None] = field(init=False, repr=False)
    console: Console = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.info = make_logger("cpm", level="info", enabled=not self.quiet)
        self.warn = make_logger("cpm", level="warning")
        self.debug = make_logger("cpm", level="debug", enabled=self.verbose)
        self.console = Console(stderr=True, quiet=self.quiet, highlight=False)

    @classmethod
    def create(cls, root: Path, *, verbose: bool = False, quiet: bool = False) -> "ExecutionContext":
        config = CpmConfig.load(root)
        return cls(root=root, config=config, probe=ToolchainProbe(config), verbose=verbose, quiet=quiet)


def split_passthrough(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split at the first ``--``; everything after it goes to the child tool untouched."""
    argv = list(argv)
    if "--" in argv:
        idx = argv.index("--")
        return argv[:idx], argv[idx + 1:]
    return argv, []


class CommandRegistry:
    def __init__(self, prog: str, version: str, description: str = "") -> None:
        self.prog = prog
        self.version = version
        self.description = description
        self._commands: Dict[str, CommandSpec] = {}

    def register(self, spec: CommandSpec) -> CommandSpec:
        # A duplicate name is a wiring bug, not a user error.
        assert spec.name not in self._commands, f"duplicate command registered: {spec.name}"
        self._commands[spec.name] = spec
        return spec

    def extend(self, specs: Iterable[CommandSpec]) -> "CommandRegistry":
        for spec in specs:
            self.register(spec)
        return self

    def names(self) -> List[str]:
        return list(self._commands)

    def get(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog=self.prog, description=self.description)
        parser.add_argument("--version", action="version", version=f"{self.prog} {self.version}")
        parser.add_argument("-v", "--verbose", action="store_true", help="Show the toolchain commands being run")
        parser.add_argument("-q", "--quiet", action="store_true", help="Only print warnings and errors")
        sub = parser.add_subparsers(dest="command", metavar="<command>")
        for spec in self._commands.values():
            sp = sub.add_parser(spec.name, help=spec.help, description=spec.description or spec.help)
            spec.configure(sp)
        return parser

    def dispatch(self, argv: Sequence[str], *, root: Path) -> int:
        root = Path(root)
        head, passthrough = split_passthrough(argv)
        parser = self.build_parser()
        try:
            args = parser.parse_args(head)
        except SystemExit as exc:
            # --help/--version exit 0, bad arguments exit 2; argparse already printed.
            if exc.code is None:
                return 0
            return exc.code if isinstance(exc.code, int) else 1
        args.passthrough = passthrough
        if not args.command:
            parser.print_help(sys.stdout)
            return 0
        return self._run(self._commands[args.command], args, root)

    def _run(self, spec: CommandSpec, args: argparse.Namespace, root: Path) -> int:
        start = time.time()
        log_file = None
        rc = 1
        try:
            ctx = ExecutionContext.create(root, verbose=args.verbose, quiet=args.quiet)
            log_file = ctx.config.log_file
            ctx.debug(f"{spec.name}: root={root}")
            spec.handler(ctx, args)
            rc = 0
        except CliError as exc:
            print(f"Error: {exc}", file=sys.stderr)
        except OSError as exc:
            print(f"Error: {IOFailure(exc)}", file=sys.stderr)
        except KeyboardInterrupt:
            print("Interrupted", file=sys.stderr)
            rc = 130
        append_command_log(
            log_file,
            {"command": spec.name, "rc": rc, "duration_sec": round(time.time() - start, 3)},
            root=root,
        )
        return rc


__all__ = ["CommandRegistry", "CommandSpec", "ExecutionContext", "split_passthrough"]
