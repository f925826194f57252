#!/usr/bin/env python3
"""
External command execution.

Every call into apt, ufw, timedatectl or docker goes through a CommandRunner so
the provisioning steps can be exercised with a fake runner in tests, and so a
dry run can log the full command sequence without touching the host.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from .console import info
from .errors import CommandError

logger = logging.getLogger(__name__)

# Conventional shell exit status for "command not found".
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    args: tuple
    returncode: int
    stdout: str = ''
    stderr: str = ''

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return ' '.join(shlex.quote(str(arg)) for arg in self.args)


class CommandRunner:
    """Run commands with subprocess and return CommandResult values."""

    dry_run = False

    def run(
        self,
        cmd: Sequence[str],
        check: bool = False,
        env: Optional[dict] = None,
        input: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        args = tuple(str(part) for part in cmd)
        logger.debug(f"Running: {' '.join(args)}")

        run_env = None
        if env:
            run_env = os.environ.copy()
            run_env.update(env)

        try:
            proc = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                env=run_env,
                input=input,
                timeout=timeout,
            )
            result = CommandResult(args, proc.returncode, proc.stdout or '', proc.stderr or '')
        except FileNotFoundError as e:
            result = CommandResult(args, EXIT_NOT_FOUND, '', str(e))

        if not result.ok:
            logger.debug(f"  exit {result.returncode}: {result.stderr.strip()}")
        if check and not result.ok:
            raise CommandError(result)
        return result

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)


class DryRunRunner(CommandRunner):
    """Print each command instead of running it; every call succeeds."""

    dry_run = True

    def __init__(self) -> None:
        self.commands: list[tuple] = []

    def run(
        self,
        cmd: Sequence[str],
        check: bool = False,
        env: Optional[dict] = None,
        input: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        args = tuple(str(part) for part in cmd)
        self.commands.append(args)
        result = CommandResult(args, 0)
        info(f"[dry-run] {result.command_line}")
        return result

    def which(self, name: str) -> Optional[str]:
        # Pretend every tool is installed so the installer branches are skipped.
        return f"/usr/bin/{name}"
