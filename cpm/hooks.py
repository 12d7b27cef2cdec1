"""
Process-level hooks that run outside the command engine.

The walking-crab banner is a start hook: it fires when CPM_EASTER_EGG=1, or on
roughly one run in ten when stdout is a terminal. CPM_EASTER_EGG=0 turns it
off entirely.
"""
from __future__ import annotations

import hashlib
import os
import sys
import time
from typing import Callable, Sequence

from cpm.core.env import ENV_EASTER_EGG

CLAW_FRAMES = [
    "🦀 Claw     ",
    " 🦀 Claw    ",
    "  🦀 Claw   ",
    "   🦀 Claw  ",
    "    🦀 Claw ",
    "     🦀 Claw",
    "    🦀 Claw ",
    "   🦀 Claw  ",
    "  🦀 Claw   ",
    " 🦀 Claw    ",
]

Hook = Callable[[], None]


def should_trigger_easter_egg(now: float | None = None) -> bool:
    flag = os.environ.get(ENV_EASTER_EGG)
    if flag == "1":
        return True
    if flag == "0" or not sys.stdout.isatty():
        return False
    stamp = str(int(now if now is not None else time.time())).encode()
    return int(hashlib.sha256(stamp).hexdigest(), 16) % 10 == 0


def show_walking_claw(frames: Sequence[str] = CLAW_FRAMES, delay: float = 0.08, loops: int = 2) -> None:
    out = sys.stdout
    print("\n🦀 Claw Easter Egg! 🦀\n", file=out)
    out.write("\x1b[?25l")
    try:
        for _ in range(loops):
            for frame in frames:
                out.write(f"\r{frame}")
                out.flush()
                time.sleep(delay)
    finally:
        out.write("\r\x1b[?25h\n")
        out.flush()


def easter_egg_hook() -> None:
    if should_trigger_easter_egg():
        show_walking_claw()


DEFAULT_START_HOOKS: tuple[Hook, ...] = (easter_egg_hook,)


def run_hooks(hooks: Sequence[Hook]) -> None:
    for hook in hooks:
        hook()
