#!/usr/bin/env python3
"""
wpcivi engine.

Provision Traefik (Let's Encrypt), MariaDB, WordPress and CiviCRM on a fresh
Debian/Ubuntu host with Docker Compose.

Execution phases:
- Phase 0: Privilege check (root, unless --dry-run)
- Phase 1: Collect the configuration record (interactive or unattended)
- Phase 2: Run the provisioning pipeline (see provision.py)

Nothing is written to disk before Phase 1 has produced a confirmed record.

Usage:
  Interactive:      sudo wpcivi-deploy
  Non-interactive:  export DOMAIN=example.org CRM_DOMAIN=crm.example.org ...
                    NONINTERACTIVE=1 sudo -E wpcivi-deploy
"""

from __future__ import annotations

import argparse
import logging
import os
import time
from pathlib import Path
from typing import Callable, Mapping, Optional

from . import DIST_NAME
from .cli_utils import env_flag, get_cli_version, is_tty
from .collector import collect_configuration
from .commands import CommandRunner, DryRunRunner
from .config_constants import LOG_LEVEL_ENV, NONINTERACTIVE_ENV
from .console import configure_logging, error, info
from .errors import AbortedByUser, ConfigurationError, DeployError, PrivilegeError, StepFailed
from .provision import build_pipeline
from .steps import DeployContext, run_steps

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    """
    Parse command-line arguments for wpcivi-deploy.

    Supports arguments:
    1. --non-interactive - Read all values from the environment / values file
    2. --values-file <path> - TOML file with pre-set values (unattended mode)
    3. --dry-run - Render files but run no external commands
    4. --log-level <level> - DEBUG, INFO, WARNING or ERROR
    5. --version - Print version and exit
    """
    parser = argparse.ArgumentParser(
        description='Deploy Traefik, MariaDB, WordPress and CiviCRM with Docker Compose',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Interactive: prompts for every value, then asks for confirmation
  sudo %(prog)s

  # Unattended (CI): all values from the environment
  export DOMAIN="example.org" CRM_DOMAIN="crm.example.org" LE_EMAIL="admin@example.org"
  export TZ="Europe/Berlin" WP_DB_USER="wpuser" CIVI_DB_USER="civiuser"
  export WP_ADMIN_USER="wpadmin" CIVI_ADMIN_USER="civiadmin"
  export BASE="/srv" NETWORK_NAME="web"
  NONINTERACTIVE=1 sudo -E %(prog)s

  # Unattended from a TOML values file, rendering files only
  %(prog)s --non-interactive --values-file deploy.toml --dry-run
        '''
    )

    parser.add_argument(
        '--non-interactive',
        action='store_true',
        help=f'Never prompt; take every value from the environment (same as {NONINTERACTIVE_ENV}=1)'
    )

    parser.add_argument(
        '--values-file',
        type=Path,
        default=None,
        metavar='PATH',
        help='TOML file with pre-set values; environment variables take precedence'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Render configuration files but do not run any external command'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        type=str.upper,
        help=f'Log level (default: ${LOG_LEVEL_ENV} or INFO)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f"{DIST_NAME} {get_cli_version()}"
    )

    return parser.parse_args(argv)


def require_root(geteuid: Callable[[], int] = os.geteuid) -> None:
    if geteuid() != 0:
        raise PrivilegeError("Please run as root (or via sudo).")


def is_interactive(non_interactive_flag: bool, env: Mapping[str, str], tty: Optional[bool] = None) -> bool:
    """Interactive only with a terminal on both ends and no unattended switch."""
    if non_interactive_flag or env_flag(NONINTERACTIVE_ENV, env):
        return False
    return is_tty() if tty is None else tty


def main_execution(
    non_interactive: bool = False,
    values_file: Optional[Path] = None,
    dry_run: bool = False,
    env: Optional[Mapping[str, str]] = None,
    runner: Optional[CommandRunner] = None,
    interactive: Optional[bool] = None,
    input_fn: Callable[[str], str] = input,
    geteuid: Callable[[], int] = os.geteuid,
    sleep: Optional[Callable[[float], None]] = None,
) -> dict:
    """
    Main execution pipeline.

    Returns a result dict with 'status' ('success', 'error', 'aborted' or
    'interrupted') and 'message'.
    """
    result = {
        'status': 'success',
        'message': '',
        'dry_run': dry_run,
    }
    env = os.environ if env is None else env
    if runner is None:
        runner = DryRunRunner() if dry_run else CommandRunner()

    try:
        if dry_run:
            info("Dry-run mode: no external command will be executed")
        else:
            require_root(geteuid)

        if interactive is None:
            interactive = is_interactive(non_interactive, env)
        logger.debug(f"Interactive mode: {interactive}")

        record = collect_configuration(
            interactive,
            runner,
            env,
            values_file=values_file,
            input_fn=input_fn,
        )

        ctx = DeployContext(record, runner, sleep=sleep or time.sleep)
        run_steps(build_pipeline(), ctx)
        result['summary'] = ctx.get_summary()

    except AbortedByUser as e:
        result['status'] = 'aborted'
        result['message'] = str(e)
        error(str(e))
    except (EOFError, KeyboardInterrupt):
        result['status'] = 'interrupted'
        result['message'] = 'Input closed or interrupted by user'
        print("", flush=True)
        error(result['message'])
    except (PrivilegeError, ConfigurationError) as e:
        result['status'] = 'error'
        result['message'] = str(e)
        error(str(e))
    except StepFailed as e:
        result['status'] = 'error'
        result['message'] = str(e)
        error(str(e))
        logger.debug("Step failure detail", exc_info=True)
    except DeployError as e:
        result['status'] = 'error'
        result['message'] = str(e)
        error(f"Execution failed: {e}")

    return result


def main(argv: Optional[list] = None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.log_level or os.environ.get(LOG_LEVEL_ENV, 'INFO'))

    result = main_execution(
        non_interactive=args.non_interactive,
        values_file=args.values_file,
        dry_run=args.dry_run,
    )

    if result.get('status') == 'success':
        return EXIT_OK
    if result.get('status') == 'interrupted':
        return EXIT_INTERRUPTED
    return EXIT_FAILURE


if __name__ == '__main__':
    raise SystemExit(main())
