#!/usr/bin/env python3
"""
Field definitions and format predicates for the configuration record.

The regexes are practical rather than RFC-complete; they only need to reject
values that would break the generated compose files, SQL or shell calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

DOMAIN_PATTERN = re.compile(r'^[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9_][A-Za-z0-9_.-]{2,31}$')
ABSOLUTE_PATH_PATTERN = re.compile(r'^/\S*$')
NETWORK_NAME_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_.-]{1,31}$')
TIMEZONE_PATTERN = re.compile(r'^.+$')

USERNAME_HINT = "3–32 chars: A–Z a–z 0–9 _ . -"

PATTERNS = {
    'domain': DOMAIN_PATTERN,
    'email': EMAIL_PATTERN,
    'username': USERNAME_PATTERN,
    'path': ABSOLUTE_PATH_PATTERN,
    'network': NETWORK_NAME_PATTERN,
    'timezone': TIMEZONE_PATTERN,
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    question: str
    kind: str
    hint: str

    def matches(self, value: str) -> bool:
        return is_valid(self.kind, value)


FIELDS = [
    FieldSpec('DOMAIN', "Primary domain for WordPress (e.g. example.org)", 'domain',
              "Provide a valid domain (e.g. example.org)."),
    FieldSpec('CRM_DOMAIN', "CiviCRM domain (e.g. crm.example.org)", 'domain',
              "Provide a valid subdomain (e.g. crm.example.org)."),
    FieldSpec('LE_EMAIL', "Email for Let's Encrypt / admin (e.g. admin@example.org)", 'email',
              "Provide a valid email address."),
    FieldSpec('TZ', "Timezone (e.g. Europe/Berlin)", 'timezone',
              "Provide a valid timezone string (e.g. Europe/Berlin)."),
    FieldSpec('WP_DB_USER', "WordPress DB user (e.g. wpuser)", 'username', USERNAME_HINT),
    FieldSpec('CIVI_DB_USER', "CiviCRM DB user (e.g. civiuser)", 'username', USERNAME_HINT),
    FieldSpec('WP_ADMIN_USER', "WordPress admin user (e.g. wpadmin)", 'username', USERNAME_HINT),
    FieldSpec('CIVI_ADMIN_USER', "CiviCRM admin user (e.g. civiadmin)", 'username', USERNAME_HINT),
    FieldSpec('BASE', "Base directory (absolute, e.g. /srv)", 'path',
              "Provide an absolute path starting with '/'."),
    FieldSpec('NETWORK_NAME', "Docker network name (e.g. web)", 'network',
              "2–32 chars, letters/digits/._-, must not start with '.' or '-'."),
]

FIELD_NAMES = [spec.name for spec in FIELDS]


def get_field(name: str) -> FieldSpec:
    for spec in FIELDS:
        if spec.name == name:
            return spec
    raise KeyError(f"Unknown field: {name}")


def is_valid(kind: str, value: Optional[str]) -> bool:
    """Return True when value matches the predicate for its field class."""
    if value is None:
        return False
    pattern = PATTERNS.get(kind)
    if pattern is None:
        raise ValueError(f"Unknown field class: {kind}")
    return pattern.fullmatch(value) is not None


def is_valid_domain(value: str) -> bool:
    return is_valid('domain', value)


def is_valid_email(value: str) -> bool:
    return is_valid('email', value)


def is_valid_username(value: str) -> bool:
    return is_valid('username', value)


def is_valid_path(value: str) -> bool:
    return is_valid('path', value)


def is_valid_network_name(value: str) -> bool:
    return is_valid('network', value)
