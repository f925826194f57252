#!/usr/bin/env python3
"""Shared CLI helpers: version lookup and unattended-mode detection."""

from __future__ import annotations

import os
import sys
from importlib.metadata import PackageNotFoundError, version as package_version

from . import DIST_NAME, __version__


def get_cli_version() -> str:
    """Installed distribution version; a source checkout reports its build date."""
    try:
        return package_version(DIST_NAME)
    except PackageNotFoundError:
        return __version__


def is_tty() -> bool:
    """True when both stdin and stdout are attached to a terminal."""
    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def env_flag(name: str, env: dict | None = None) -> bool:
    source = os.environ if env is None else env
    return str(source.get(name, "0")).strip() == "1"
