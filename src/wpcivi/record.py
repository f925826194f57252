#!/usr/bin/env python3
"""Configuration record and the paths derived from it."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Mapping

from .config_constants import (
    ACME_STORAGE,
    DOCKER_COMPOSE_OUTPUT,
    INITDB_DIRNAME,
    INITDB_SCRIPT,
    LETSENCRYPT_DIRNAME,
    SECRETS_DIRNAME,
    SECRETS_FILENAME,
    STACK_DIRNAME,
    STACK_ENV_FILE,
    TRAEFIK_CONFIG,
    TRAEFIK_DIRNAME,
)


@dataclass(frozen=True)
class ConfigRecord:
    """Validated deployment parameters. Immutable once confirmed."""

    domain: str
    crm_domain: str
    le_email: str
    tz: str
    wp_db_user: str
    civi_db_user: str
    wp_admin_user: str
    civi_admin_user: str
    base: str
    network_name: str

    @classmethod
    def from_mapping(cls, values: Mapping[str, str]) -> "ConfigRecord":
        """Build from a mapping keyed by env names (DOMAIN, CRM_DOMAIN, ...)."""
        kwargs = {}
        for f in fields(cls):
            env_name = f.name.upper()
            if env_name not in values:
                raise KeyError(f"Missing field: {env_name}")
            kwargs[f.name] = values[env_name]
        return cls(**kwargs)

    def as_env(self) -> Dict[str, str]:
        return {f.name.upper(): getattr(self, f.name) for f in fields(self)}

    @property
    def paths(self) -> "DeployPaths":
        return DeployPaths(Path(self.base))


@dataclass(frozen=True)
class DeployPaths:
    base: Path

    @property
    def secrets_dir(self) -> Path:
        return self.base / SECRETS_DIRNAME

    @property
    def secrets_file(self) -> Path:
        return self.secrets_dir / SECRETS_FILENAME

    @property
    def traefik_dir(self) -> Path:
        return self.base / TRAEFIK_DIRNAME

    @property
    def traefik_config(self) -> Path:
        return self.traefik_dir / TRAEFIK_CONFIG

    @property
    def traefik_compose(self) -> Path:
        return self.traefik_dir / DOCKER_COMPOSE_OUTPUT

    @property
    def letsencrypt_dir(self) -> Path:
        return self.traefik_dir / LETSENCRYPT_DIRNAME

    @property
    def acme_storage(self) -> Path:
        return self.letsencrypt_dir / ACME_STORAGE

    @property
    def stack_dir(self) -> Path:
        return self.base / STACK_DIRNAME

    @property
    def stack_env(self) -> Path:
        return self.stack_dir / STACK_ENV_FILE

    @property
    def stack_compose(self) -> Path:
        return self.stack_dir / DOCKER_COMPOSE_OUTPUT

    @property
    def initdb_script(self) -> Path:
        return self.stack_dir / INITDB_DIRNAME / INITDB_SCRIPT
