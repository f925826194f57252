#!/usr/bin/env python3
"""Final credentials and installer hints printed after a deployment."""

from __future__ import annotations

from typing import Mapping

from .config_constants import CIVI_DB_NAME
from .record import ConfigRecord


def build_summary_lines(record: ConfigRecord, secrets: Mapping[str, str]) -> list[str]:
    """Return the lines of the post-deployment summary."""
    paths = record.paths
    return [
        f"Secrets file: {paths.secrets_file} (chmod 600)",
        "",
        "== WordPress ==",
        f"URL:   https://{record.domain}",
        f"User:  {record.wp_admin_user}",
        f"Pass:  {secrets.get('WP_ADMIN_PASSWORD', '')}",
        "",
        "== CiviCRM (Web installer) ==",
        f"URL:   https://{record.crm_domain}",
        "",
        "Use in installer:",
        "  Server (Host): db",
        f"  Database (Name): {CIVI_DB_NAME}",
        f"  Username: {record.civi_db_user}",
        f"  Password: {secrets.get('CIVI_DB_PASSWORD', '')}",
        f"  Base URL: https://{record.crm_domain}",
        "  Public files:  /var/www/html/public",
        "  Private files: /var/www/html/private",
        "  Extensions:    /var/www/html/ext",
        "",
        "Civi admin account:",
        f"  User:  {record.civi_admin_user}",
        f"  Pass:  {secrets.get('CIVI_ADMIN_PASSWORD', '')}",
        f"  Email: {record.le_email}",
        "",
        "== MariaDB root ==",
        f"Root password: {secrets.get('MYSQL_ROOT_PASSWORD', '')}",
        "",
        "Troubleshooting:",
        "- Traefik (ACME):     docker logs traefik --since 3m | egrep -i 'acme|certificate|challenge'",
        f"- Network check:      docker network inspect {record.network_name} | grep Name",
        "- DB health:          docker ps   (db should be 'healthy')",
    ]


def print_summary(record: ConfigRecord, secrets: Mapping[str, str]) -> None:
    for line in build_summary_lines(record, secrets):
        print(line, flush=True)
