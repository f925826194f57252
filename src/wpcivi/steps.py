#!/usr/bin/env python3
"""
Sequential provisioning runner.

A deployment is an ordered list of named steps. Each step declares whether a
failure is fatal (abort the run) or best-effort (warn and continue). There is
no retry, no parallelism and no rollback.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from .commands import CommandResult, CommandRunner
from .console import header, success, warn
from .errors import DeployError, StepFailed
from .record import ConfigRecord, DeployPaths

logger = logging.getLogger(__name__)


class DeployContext:
    """Everything a step needs: the confirmed record, a runner and loaded secrets."""

    def __init__(
        self,
        record: ConfigRecord,
        runner: CommandRunner,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.deployment_id = uuid.uuid4().hex[:8]
        self.start_time = time.time()
        self.record = record
        self.runner = runner
        self.sleep = sleep
        self.secrets: Dict[str, str] = {}
        self.completed: list[str] = []
        self.warnings: list[str] = []

    @property
    def paths(self) -> DeployPaths:
        return self.record.paths

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def run(self, cmd: Sequence[str], env: Optional[dict] = None) -> CommandResult:
        """Run a command whose failure must stop the deployment."""
        return self.runner.run(cmd, check=True, env=env)

    def try_run(self, cmd: Sequence[str], warning: str, env: Optional[dict] = None) -> CommandResult:
        """Run a best-effort command; a failure is reported and otherwise ignored."""
        result = self.runner.run(cmd, check=False, env=env)
        if not result.ok:
            self.warn(warning)
        return result

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        warn(message)

    def get_summary(self) -> dict:
        return {
            'deployment_id': self.deployment_id,
            'duration_seconds': round(time.time() - self.start_time, 1),
            'steps_completed': list(self.completed),
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class ProvisionStep:
    title: str
    action: Callable[[DeployContext], None]
    best_effort: bool = False


def run_steps(steps: Sequence[ProvisionStep], ctx: DeployContext) -> DeployContext:
    """
    Execute steps in order.

    Raises:
        StepFailed: When a fatal step raises
    """
    for index, step in enumerate(steps, start=1):
        header(step.title)
        logger.debug(f"Step {index}/{len(steps)}: {step.title} (best_effort={step.best_effort})")
        try:
            step.action(ctx)
        except (DeployError, OSError) as e:
            if step.best_effort:
                ctx.warn(f"{step.title} failed, continuing: {e}")
                continue
            raise StepFailed(step.title, e) from e
        ctx.completed.append(step.title)

    success(f"All {len(steps)} steps finished (deployment {ctx.deployment_id})")
    return ctx
