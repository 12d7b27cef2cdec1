#!/usr/bin/env python3
"""
Canonical cpm CLI entrypoint.

Implementation lives in cpm/cli_app.py; this module is what the console
script points at.
"""
from __future__ import annotations

from .cli_app import main  # re-export


if __name__ == "__main__":
    raise SystemExit(main())
