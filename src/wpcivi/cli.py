#!/usr/bin/env python3
"""
wpcivi-deploy CLI entry point.

Thin wrapper so the console script and `python -m wpcivi` share one exit path.
"""

from __future__ import annotations

import sys

from .engine import main as engine_main


def main() -> None:
    raise SystemExit(engine_main(sys.argv[1:]))


if __name__ == "__main__":
    main()
