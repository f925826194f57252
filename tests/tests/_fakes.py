"""
Test doubles for wpcivi: a recording command runner and scripted terminal input.
"""
from __future__ import annotations

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
from wpcivi.commands import CommandResult, CommandRunner  # noqa: E402
from wpcivi.errors import CommandError  # noqa: E402


class FakeRunner(CommandRunner):
    """Record every command; fail the ones matching a prefix in `failures`."""

    def __init__(self, installed=("docker", "timedatectl"), failures=(), outputs=None):
        self.calls = []
        self.envs = []
        self.installed = set(installed)
        self.failures = [tuple(prefix) for prefix in failures]
        self.outputs = {tuple(prefix): text for prefix, text in (outputs or {}).items()}

    @staticmethod
    def _matches(args, prefix):
        return args[:len(prefix)] == prefix

    def run(self, cmd, check=False, env=None, input=None, timeout=None):
        args = tuple(str(part) for part in cmd)
        self.calls.append(args)
        self.envs.append(env)
        returncode = 1 if any(self._matches(args, prefix) for prefix in self.failures) else 0
        stdout = next((text for prefix, text in self.outputs.items() if self._matches(args, prefix)), "")
        result = CommandResult(args, returncode, stdout, "boom" if returncode else "")
        if check and not result.ok:
            raise CommandError(result)
        return result

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.installed else None

    def calls_starting_with(self, *prefix):
        return [call for call in self.calls if self._matches(call, tuple(prefix))]


class ScriptedInput:
    """Callable stand-in for input(): replays answers, records prompts."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt=""):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError("no more scripted answers")
        return self.answers.pop(0)


def full_env(base: Path) -> dict:
    return {
        "DOMAIN": "example.org",
        "CRM_DOMAIN": "crm.example.org",
        "LE_EMAIL": "admin@example.org",
        "TZ": "Europe/Berlin",
        "WP_DB_USER": "wpuser",
        "CIVI_DB_USER": "civiuser",
        "WP_ADMIN_USER": "wpadmin",
        "CIVI_ADMIN_USER": "civiadmin",
        "BASE": str(base),
        "NETWORK_NAME": "web",
    }


def answers_for(env: dict) -> list:
    order = [
        "DOMAIN", "CRM_DOMAIN", "LE_EMAIL", "TZ", "WP_DB_USER",
        "CIVI_DB_USER", "WP_ADMIN_USER", "CIVI_ADMIN_USER", "BASE", "NETWORK_NAME",
    ]
    return [env[name] for name in order]
