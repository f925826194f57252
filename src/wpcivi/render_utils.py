#!/usr/bin/env python3
"""Shared rendering helpers: Jinja2 templates to generated files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from .config_constants import (
    CIVI_DB_NAME,
    INITDB_TEMPLATE,
    SECRET_KEYS,
    STACK_COMPOSE_TEMPLATE,
    STACK_ENV_TEMPLATE,
    TRAEFIK_COMPOSE_TEMPLATE,
    TRAEFIK_CONFIG_TEMPLATE,
    WP_DB_NAME,
    WP_VOLUME,
)
from .errors import RenderError
from .record import ConfigRecord, DeployPaths

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / 'templates'


def _environment(template_dir: Path) -> Environment:
    # Rendered files must keep the final newline of the template.
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )


def build_template_context(record: ConfigRecord, secrets: Optional[Mapping[str, str]] = None) -> dict:
    """
    Flatten record and secrets into the lowercase names the templates use.

    Only generated credentials are taken from secrets; record fields mirrored
    into the secrets file never override the confirmed record.
    """
    context = {key.lower(): value for key, value in record.as_env().items()}
    for key in SECRET_KEYS:
        if secrets and key in secrets:
            context[key.lower()] = secrets[key]
    context.setdefault('wp_db_name', WP_DB_NAME)
    context.setdefault('civi_db_name', CIVI_DB_NAME)
    context.setdefault('wp_volume', WP_VOLUME)
    return context


def render_jinja2(template_name: str, context: Mapping, template_dir: Path = TEMPLATE_DIR) -> str:
    """
    Render a packaged template with the given context.
    """
    logger.debug(f"Rendering Jinja2 template: {template_name}")

    if not (template_dir / template_name).exists():
        logger.error(f"Template file not found: {template_name}")
        raise FileNotFoundError(f"Template file not found: {template_dir / template_name}")

    try:
        template = _environment(template_dir).get_template(template_name)
        rendered = template.render(**context)
        logger.debug(f"  Rendered output size: {len(rendered)} bytes")
        return rendered
    except TemplateError as e:
        logger.error(f"Failed to render template: {e}")
        raise TemplateError(f"Failed to render template {template_name}: {e}") from e


def write_rendered(
    template_name: str,
    output_path: Path,
    context: Mapping,
    mode: Optional[int] = None,
) -> Path:
    """
    Render template_name to output_path, creating parent directories.

    Raises:
        RenderError: If the template fails to render
    """
    try:
        rendered = render_jinja2(template_name, context)
    except TemplateError as e:
        raise RenderError(str(e)) from e
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(rendered, encoding='utf-8')
    if mode is not None:
        os.chmod(output_path, mode)
    logger.debug(f"Wrote {output_path}")
    return output_path


def prepare_acme_storage(paths: DeployPaths) -> Path:
    """Create letsencrypt/ (0700) and acme.json (0600) without truncating it."""
    paths.letsencrypt_dir.mkdir(parents=True, exist_ok=True)
    os.chmod(paths.letsencrypt_dir, 0o700)
    paths.acme_storage.touch(exist_ok=True)
    os.chmod(paths.acme_storage, 0o600)
    return paths.acme_storage


def render_traefik_files(record: ConfigRecord) -> list[Path]:
    paths = record.paths
    context = build_template_context(record)
    prepare_acme_storage(paths)
    return [
        write_rendered(TRAEFIK_CONFIG_TEMPLATE, paths.traefik_config, context),
        write_rendered(TRAEFIK_COMPOSE_TEMPLATE, paths.traefik_compose, context),
    ]


def render_stack_files(record: ConfigRecord, secrets: Mapping[str, str]) -> list[Path]:
    paths = record.paths
    context = build_template_context(record, secrets)
    return [
        write_rendered(STACK_ENV_TEMPLATE, paths.stack_env, context, mode=0o600),
        write_rendered(STACK_COMPOSE_TEMPLATE, paths.stack_compose, context),
        write_rendered(INITDB_TEMPLATE, paths.initdb_script, context),
    ]
