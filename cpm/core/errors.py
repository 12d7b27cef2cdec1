"""
Error taxonomy for cpm.

Every command handler either returns normally or raises one CliError; the
dispatcher turns the exception into ``Error: <message>`` on stderr and exit
status 1. Low-level failures (OSError, JSON/TOML parse errors) are wrapped so
they print the same way.
"""
from __future__ import annotations

from pathlib import Path


class CliError(Exception):
    """Base class for every error a command can report."""


class FileOperationError(CliError):
    """A precondition or file access failed; usually fixed by user action."""

    def __init__(self, operation: str, path: str | Path, message: str) -> None:
        self.operation = operation
        self.path = str(path)
        self.message = message
        super().__init__(f"File operation '{operation}' failed on '{self.path}': {message}")


class ManifestNotFound(FileOperationError):
    """The expected manifest file is absent."""


class ManifestWriteError(FileOperationError):
    """The manifest could not be rewritten."""


class EntryPointNotFound(FileOperationError):
    """No script entry point could be resolved."""


class FileExists(CliError):
    """Refuse to overwrite an existing path."""

    def __init__(self, path: str | Path) -> None:
        self.path = str(path)
        super().__init__(f"File already exists: {self.path}")


class ExternalCommandFailed(CliError):
    """A delegated toolchain invocation exited non-zero (or could not start)."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        self.message = message
        super().__init__(f"Command '{command}' failed: {message}")


class InternalError(CliError):
    """The engine reached a state that should be impossible."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"Internal error: {message}")


class ManifestParseError(CliError):
    """Manifest content is not well-formed JSON/TOML."""

    def __init__(self, path: str | Path, fmt: str, detail: str) -> None:
        self.path = str(path)
        self.format = fmt
        self.detail = detail
        super().__init__(f"{fmt} error: {detail} ({self.path})")


class IOFailure(CliError):
    """Transparent wrapper for an OSError raised inside a handler."""

    def __init__(self, exc: OSError) -> None:
        self.original = exc
        super().__init__(f"IO error: {exc}")


__all__ = [
    "CliError",
    "EntryPointNotFound",
    "ExternalCommandFailed",
    "FileExists",
    "FileOperationError",
    "InternalError",
    "IOFailure",
    "ManifestNotFound",
    "ManifestParseError",
    "ManifestWriteError",
]
