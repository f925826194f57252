#!/usr/bin/env python3
"""
Persistent secrets file (env format, mode 0600).

Generated passwords are appended once and never rewritten, so re-running the
deployment against the same base directory reuses the existing credentials.
Plain KEY=value lines keep the file readable by `source` and docker compose.
"""

from __future__ import annotations

import logging
import os
import secrets
from pathlib import Path
from typing import Dict, Iterable

from .config_constants import PASSWORD_ALPHABET, PASSWORD_LENGTH

logger = logging.getLogger(__name__)


def generate_password(length: int = PASSWORD_LENGTH, alphabet: str = PASSWORD_ALPHABET) -> str:
    """
    Generate a random password from the CSPRNG.

    Raises:
        ValueError: If length is less than 1
    """
    if length < 1:
        raise ValueError("Password length must be at least 1")
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def parse_env_file(path: Path) -> Dict[str, str]:
    """Minimal .env parser (no shell expansion, last assignment wins)."""
    if not path.exists():
        return {}

    out: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            value = value[1:-1]

        out[key] = value
    return out


class SecretsStore:
    """Append-only KEY=value store backed by a restricted-permission file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def ensure_exists(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(exist_ok=True)
        os.chmod(self.path, 0o600)

    def _lines(self) -> list[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def _append(self, line: str) -> None:
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(f"{line}\n")

    def has_key(self, key: str) -> bool:
        prefix = f"{key}="
        return any(line.startswith(prefix) for line in self._lines())

    def get_or_set(self, key: str) -> bool:
        """
        Append KEY=<random> unless KEY is already stored.

        Returns:
            True if a new secret was generated
        """
        if self.has_key(key):
            logger.debug(f"Reusing stored secret: {key}")
            return False
        self._append(f"{key}={generate_password()}")
        logger.debug(f"Generated secret: {key}")
        return True

    def ensure_line(self, line: str) -> bool:
        """Append line unless the exact line is already present."""
        if line in self._lines():
            return False
        self._append(line)
        return True

    def ensure_secrets(self, keys: Iterable[str]) -> list[str]:
        self.ensure_exists()
        return [key for key in keys if self.get_or_set(key)]

    def load(self) -> Dict[str, str]:
        return parse_env_file(self.path)
