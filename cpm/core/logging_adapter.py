"""
Logging adapter: consistent stderr output for every cpm command.

Config:
- Env: LOG_JSON=1 switches to one JSON object per line; CPM_LOG_FILE appends a
  JSON-lines record per dispatched command.

Usage:
- `log = make_logger(prefix="cpm"); log("message")`
- `slog = make_structured_logger(prefix="cpm", defaults={"command": "build"}); slog("event", {"status": "ok"})`

Notes:
- Side effects: writes to stderr; home paths are shortened to ~.
- Command log writes are best-effort and never fail a command.
"""
from __future__ import annotations

import json
import os
import sys
import time
from pathlib import Path
from typing import Any, Callable, Optional

__all__ = [
    "append_command_log",
    "make_logger",
    "make_structured_logger",
]


def _json_default() -> bool:
    return os.environ.get("LOG_JSON", "0") == "1"


def make_logger(
    prefix: str = "",
    *,
    level: str = "info",
    enabled: bool = True,
    json_output: Optional[bool] = None,
) -> Callable[[str], None]:
    """
    Create a logger function that writes one line per call to stderr.
    """
    home = str(Path.home())
    pref = f"[{prefix}]" if prefix else ""
    json_output = _json_default() if json_output is None else json_output

    def _log(msg: str) -> None:
        if not enabled:
            return
        sanitized = msg.replace(home, "~") if home and home != "/" else msg
        if json_output:
            payload = {"prefix": prefix, "level": level, "message": sanitized}
            print(json.dumps(payload), file=sys.stderr)
        else:
            print(f"{pref} {sanitized}".strip(), file=sys.stderr)

    return _log


def make_structured_logger(prefix: str = "", defaults: Optional[dict] = None) -> Callable[[str, Optional[dict]], None]:
    """
    Emit structured JSON logs with a consistent schema: {prefix,event,...fields}.
    Defaults are merged into each log line.
    """
    defaults = defaults or {}

    def _log(event: str, fields: Optional[dict] = None) -> None:
        payload = {"prefix": prefix, "event": event}
        payload.update(defaults)
        if fields:
            payload.update(fields)
        print(json.dumps(payload), file=sys.stderr)

    return _log


def append_command_log(log_file: Path | None, entry: dict[str, Any], root: Path | None = None) -> None:
    """Append a structured record for one command run if a log file is configured."""
    if log_file is None:
        return
    payload = dict(entry)
    payload.setdefault("ts", time.time())
    if root is not None:
        payload.setdefault("root", str(root))
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with log_file.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(payload) + "\n")
    except OSError as exc:
        print(f"[cpm] warning: could not write command log ({exc})", file=sys.stderr)
