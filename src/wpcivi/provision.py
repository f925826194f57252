#!/usr/bin/env python3
"""
Provisioning steps for the Traefik + MariaDB + WordPress + CiviCRM host.

Step order and failure policy:

    1. Update system & install base tools      fatal
    2. Set timezone                            best-effort
    3. Generate / load secrets                 fatal
    4. Install Docker & Compose (if missing)   fatal
    5. Configure UFW                           best-effort (per command)
    6. Create Docker network                   best-effort
    7. Deploy Traefik                          fatal
    8. Deploy app stack                        fatal
    9. Wait for WordPress                      best-effort (bounded poll)
   10. WordPress install via wp-cli            best-effort (per command)
   11. Summary                                 -
"""

from __future__ import annotations

import logging

from .config_constants import (
    BASE_PACKAGES,
    CURL_IMAGE,
    DOCKER_INSTALL_URL,
    FIREWALL_PORTS,
    MIRRORED_FIELDS,
    READINESS_INTERVAL,
    READINESS_TARGET,
    READINESS_TRIES,
    SECRET_KEYS,
    WP_CLI_IMAGE,
    WP_DB_NAME,
    WP_SITE_TITLE,
    WP_VOLUME,
)
from .console import info, success
from .errors import DeployError
from .render_utils import render_stack_files, render_traefik_files
from .secrets_store import SecretsStore
from .steps import DeployContext, ProvisionStep
from .summary import print_summary

logger = logging.getLogger(__name__)

APT_ENV = {'DEBIAN_FRONTEND': 'noninteractive'}


def install_base_packages(ctx: DeployContext) -> None:
    ctx.run(['apt-get', 'update', '-y'], env=APT_ENV)
    ctx.run(['apt-get', 'upgrade', '-y'], env=APT_ENV)
    ctx.run(['apt-get', 'install', '-y', *BASE_PACKAGES], env=APT_ENV)


def set_timezone(ctx: DeployContext) -> None:
    ctx.try_run(['timedatectl', 'set-timezone', ctx.record.tz], "Could not set timezone.")


def prepare_secrets(ctx: DeployContext) -> None:
    store = SecretsStore(ctx.paths.secrets_file)
    generated = store.ensure_secrets(SECRET_KEYS)
    if generated:
        info(f"Generated {len(generated)} new secret(s): {', '.join(generated)}")
    else:
        info("Reusing existing secrets")

    values = ctx.record.as_env()
    for name in MIRRORED_FIELDS:
        store.ensure_line(f"{name}={values[name]}")

    ctx.secrets = store.load()
    missing = [key for key in SECRET_KEYS if not ctx.secrets.get(key)]
    if missing:
        raise DeployError(f"Secrets missing from {store.path}: {', '.join(missing)}")


def install_docker(ctx: DeployContext) -> None:
    if not ctx.runner.which('docker'):
        info("Docker not found, running the upstream install script...")
        ctx.run(['bash', '-o', 'pipefail', '-c', f"curl -fsSL {DOCKER_INSTALL_URL} | bash"])
    ctx.run(['docker', 'version'])
    ctx.run(['docker', 'compose', 'version'])


def configure_firewall(ctx: DeployContext) -> None:
    for port in FIREWALL_PORTS:
        ctx.try_run(['ufw', 'allow', port], f"ufw allow {port} failed")
    ctx.try_run(['ufw', '--force', 'enable'], "ufw enable failed")


def ensure_network(ctx: DeployContext) -> None:
    network_name = ctx.record.network_name
    inspect = ctx.runner.run(['docker', 'network', 'inspect', network_name])
    if inspect.ok and not ctx.dry_run:
        success(f"Network '{network_name}' already exists")
        return
    ctx.try_run(['docker', 'network', 'create', network_name],
                f"Could not create Docker network '{network_name}'")


def deploy_traefik(ctx: DeployContext) -> None:
    for path in render_traefik_files(ctx.record):
        info(f"Wrote {path}")
    ctx.run(['docker', 'compose', '-f', str(ctx.paths.traefik_compose), 'up', '-d'])


def stack_compose_command(ctx: DeployContext, *args: str) -> list[str]:
    return [
        'docker', 'compose',
        '-f', str(ctx.paths.stack_compose),
        '--env-file', str(ctx.paths.stack_env),
        *args,
    ]


def deploy_stack(ctx: DeployContext) -> None:
    for path in render_stack_files(ctx.record, ctx.secrets):
        info(f"Wrote {path}")
    ctx.run(stack_compose_command(ctx, 'pull'))
    ctx.run(stack_compose_command(ctx, 'up', '-d'))


def wait_http(
    ctx: DeployContext,
    service: str = READINESS_TARGET,
    tries: int = READINESS_TRIES,
    interval: float = READINESS_INTERVAL,
) -> bool:
    """
    Poll http://<service> from inside the Docker network.

    Fixed number of tries with a fixed sleep in between. Returns False when
    the service never answered.
    """
    cmd = [
        'docker', 'run', '--rm', '--network', ctx.record.network_name,
        CURL_IMAGE, '-sSf', f"http://{service}",
    ]
    for attempt in range(1, tries + 1):
        if ctx.runner.run(cmd).ok:
            logger.debug(f"{service} answered after {attempt} attempt(s)")
            return True
        if attempt < tries:
            ctx.sleep(interval)
    return False


def wait_for_wordpress(ctx: DeployContext) -> None:
    info("Waiting for WordPress/DB...")
    if wait_http(ctx):
        success("WordPress is reachable")
    else:
        ctx.warn(f"Could not reach '{READINESS_TARGET}' via HTTP, attempting installation anyway.")


def wp_cli_command(ctx: DeployContext, *wp_args: str, with_db_env: bool = False) -> list[str]:
    cmd = ['docker', 'run', '--rm', '--network', ctx.record.network_name, '-v', f"{WP_VOLUME}:/var/www/html"]
    if with_db_env:
        cmd += [
            '-e', 'WORDPRESS_DB_HOST=db',
            '-e', f"WORDPRESS_DB_USER={ctx.record.wp_db_user}",
            '-e', f"WORDPRESS_DB_PASSWORD={ctx.secrets['WP_DB_PASSWORD']}",
            '-e', f"WORDPRESS_DB_NAME={WP_DB_NAME}",
        ]
    cmd.append(WP_CLI_IMAGE)
    cmd += wp_args
    return cmd


def install_wordpress(ctx: DeployContext) -> None:
    record = ctx.record
    site_url = f"https://{record.domain}"

    ctx.try_run(
        wp_cli_command(
            ctx,
            'php', '-d', 'memory_limit=256M', '/usr/local/bin/wp', 'core', 'install',
            f"--url={site_url}",
            f"--title={WP_SITE_TITLE}",
            f"--admin_user={record.wp_admin_user}",
            f"--admin_password={ctx.secrets['WP_ADMIN_PASSWORD']}",
            f"--admin_email={record.le_email}",
            '--skip-email',
            with_db_env=True,
        ),
        "wp core install failed (WordPress may already be installed)",
    )
    for option in ('home', 'siteurl'):
        ctx.try_run(
            wp_cli_command(ctx, '/usr/local/bin/wp', 'option', 'update', option, site_url),
            f"wp option update {option} failed",
        )


def show_summary(ctx: DeployContext) -> None:
    print_summary(ctx.record, ctx.secrets)


def build_pipeline() -> list[ProvisionStep]:
    return [
        ProvisionStep("Update system & install base tools", install_base_packages),
        ProvisionStep("Set timezone", set_timezone, best_effort=True),
        ProvisionStep("Generate / load secrets", prepare_secrets),
        ProvisionStep("Install Docker & Compose (if missing)", install_docker),
        ProvisionStep("Configure UFW (allow 22, 80, 443)", configure_firewall, best_effort=True),
        ProvisionStep("Create Docker network (if missing)", ensure_network, best_effort=True),
        ProvisionStep("Deploy Traefik (force HTTPS, no dashboard)", deploy_traefik),
        ProvisionStep("Deploy app stack (MariaDB, WordPress, CiviCRM)", deploy_stack),
        ProvisionStep("Wait for WordPress", wait_for_wordpress, best_effort=True),
        ProvisionStep("Initial WordPress install via wp-cli", install_wordpress, best_effort=True),
        ProvisionStep("Done! Credentials & installer hints", show_summary),
    ]
