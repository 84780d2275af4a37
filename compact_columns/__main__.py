#!/usr/bin/env python3
"""Module entrypoint for `compact_columns`.

Usage:
  - `python3 -m compact_columns --results SSFFUFUS --preset last_stable_and_unstable`
"""

from __future__ import annotations

from .cli import _cli


if __name__ == "__main__":
    raise SystemExit(_cli())
