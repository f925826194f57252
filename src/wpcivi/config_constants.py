#!/usr/bin/env python3
"""
File, directory and environment name constants for wpcivi-deploy.

CRITICAL: This is the SINGLE SOURCE OF TRUTH for every generated filename.
All modules MUST import from this file instead of using hardcoded strings.

Layout under the base directory chosen at deploy time:
- secrets/verein.env               = persisted credentials (0600)
- traefik/traefik.yml              = proxy static config
- traefik/docker-compose.yml       = proxy compose file
- traefik/letsencrypt/acme.json    = ACME state (0600, never truncated)
- stack/.env                       = stack environment (0600)
- stack/docker-compose.yml         = MariaDB + WordPress + CiviCRM
- stack/initdb/00-init.sql         = database bootstrap script
"""

# ============================================================================
# Directory and file names (CANONICAL - DO NOT HARDCODE)
# ============================================================================

SECRETS_DIRNAME = 'secrets'
SECRETS_FILENAME = 'verein.env'

TRAEFIK_DIRNAME = 'traefik'
TRAEFIK_CONFIG = 'traefik.yml'
LETSENCRYPT_DIRNAME = 'letsencrypt'
ACME_STORAGE = 'acme.json'

STACK_DIRNAME = 'stack'
STACK_ENV_FILE = '.env'
INITDB_DIRNAME = 'initdb'
INITDB_SCRIPT = '00-init.sql'

DOCKER_COMPOSE_OUTPUT = 'docker-compose.yml'

# ============================================================================
# Templates (package data under wpcivi/templates)
# ============================================================================

TRAEFIK_CONFIG_TEMPLATE = 'traefik.yml.j2'
TRAEFIK_COMPOSE_TEMPLATE = 'traefik-compose.yml.j2'
STACK_ENV_TEMPLATE = 'stack.env.j2'
STACK_COMPOSE_TEMPLATE = 'stack-compose.yml.j2'
INITDB_TEMPLATE = 'initdb.sql.j2'

# ============================================================================
# Fixed stack values
# ============================================================================

WP_DB_NAME = 'wordpress'
CIVI_DB_NAME = 'civicrm'
WP_SITE_TITLE = 'Organisation ID'

BASE_PACKAGES = ['ca-certificates', 'curl', 'gnupg', 'lsb-release', 'ufw', 'jq']
FIREWALL_PORTS = ['22/tcp', '80/tcp', '443/tcp']

CURL_IMAGE = 'curlimages/curl:8.8.0'
WP_CLI_IMAGE = 'wordpress:cli'
WP_VOLUME = 'wp_data'
READINESS_TARGET = 'wp'
READINESS_TRIES = 60
READINESS_INTERVAL = 2.0

DOCKER_INSTALL_URL = 'https://get.docker.com'

# ============================================================================
# Secrets
# ============================================================================

SECRET_KEYS = [
    'MYSQL_ROOT_PASSWORD',
    'WP_DB_PASSWORD',
    'CIVI_DB_PASSWORD',
    'WP_ADMIN_PASSWORD',
    'CIVI_ADMIN_PASSWORD',
]

# Record fields mirrored into the secrets file so it is a complete snapshot.
MIRRORED_FIELDS = [
    'LE_EMAIL',
    'DOMAIN',
    'CRM_DOMAIN',
    'TZ',
    'WP_DB_USER',
    'CIVI_DB_USER',
    'WP_ADMIN_USER',
    'CIVI_ADMIN_USER',
]

PASSWORD_ALPHABET = (
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    'abcdefghijklmnopqrstuvwxyz'
    '0123456789'
    '!@#%^+=-_.'
)
PASSWORD_LENGTH = 24

# ============================================================================
# Environment switches
# ============================================================================

NONINTERACTIVE_ENV = 'NONINTERACTIVE'
LOG_LEVEL_ENV = 'WPCIVI_LOG_LEVEL'

