#!/usr/bin/env python3
"""
Console output and logging setup.

Progress lines go to stdout with flush=True so they interleave correctly with
the output of the external tools we run. Diagnostic detail goes through the
stdlib logger configured by configure_logging().
"""

from __future__ import annotations

import logging

# Color codes for output
BLUE = '\033[94m'
GREEN = '\033[92m'
YELLOW = '\033[93m'
RED = '\033[91m'
BOLD_GREEN = '\033[1;32m'
RESET = '\033[0m'

logger = logging.getLogger('wpcivi')


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure logging module with specified level.
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR
    }

    level = level_map.get(str(log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='[%(levelname)s] %(message)s',
        force=True  # Reconfigure if already configured
    )

    logger.setLevel(level)
    logger.debug(f"Logging configured: {str(log_level).upper()}")


def _emit(prefix: str, msg: str, context: dict) -> None:
    print(f"{prefix} {msg}", flush=True)
    for key, value in context.items():
        print(f"  {key}: {value}", flush=True)


def info(msg, **context):
    """Print info message with optional structured context."""
    _emit(f"{BLUE}[INFO]{RESET}", msg, context)


def success(msg, **context):
    _emit(f"{GREEN}[SUCCESS]{RESET}", msg, context)


def warn(msg, **context):
    """Print warning message; execution continues."""
    _emit(f"{YELLOW}[WARN]{RESET}", msg, context)


def error(msg, **context):
    """Print error message. Callers decide whether to exit."""
    _emit(f"{RED}[ERROR]{RESET}", msg, context)


def header(msg):
    print(f"\n{BOLD_GREEN}==> {msg}{RESET}", flush=True)
