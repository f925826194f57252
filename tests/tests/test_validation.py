#!/usr/bin/env python3
"""
Format predicate tests for configuration fields.
"""

from pathlib import Path

import pytest
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
from wpcivi.validation import (  # noqa: E402
    FIELD_NAMES,
    get_field,
    is_valid,
    is_valid_domain,
    is_valid_email,
    is_valid_network_name,
    is_valid_path,
    is_valid_username,
)


class TestDomain:
    @pytest.mark.parametrize("value", [
        "example.org",
        "crm.example.org",
        "a.bc",
        "my-site.example.co.uk",
        "xn--bcher-kva.de",
    ])
    def test_accepts_dotted_labels_with_alpha_tld(self, value):
        assert is_valid_domain(value)

    @pytest.mark.parametrize("value", [
        "localhost",
        "example",
        "example.o",
        "example.123",
        "example.org.",
        "exa mple.org",
        "example_site.org",
        "",
    ])
    def test_rejects_missing_or_short_tld(self, value):
        assert not is_valid_domain(value)


class TestEmail:
    def test_accepts_plain_address(self):
        assert is_valid_email("admin@example.org")

    @pytest.mark.parametrize("value", [
        "admin",
        "admin@example",
        "admin@@example.org",
        "ad min@example.org",
        "@example.org",
    ])
    def test_rejects_malformed(self, value):
        assert not is_valid_email(value)


class TestUsername:
    @pytest.mark.parametrize("value", ["wpuser", "_svc", "a.b", "abc", "a" * 32, "civi-admin_1"])
    def test_accepts_allowed_charset_and_length(self, value):
        assert is_valid_username(value)

    @pytest.mark.parametrize("value", ["ab", "a" * 33, "", "wp user", "wp@user", "-wpuser", ".wpuser", "wpüser"])
    def test_rejects_length_or_charset_violations(self, value):
        assert not is_valid_username(value)


class TestPathAndNetwork:
    @pytest.mark.parametrize("value", ["/", "/srv", "/opt/verein-stack"])
    def test_absolute_paths(self, value):
        assert is_valid_path(value)

    @pytest.mark.parametrize("value", ["srv", "./srv", "/srv/my dir", ""])
    def test_rejects_relative_or_whitespace_paths(self, value):
        assert not is_valid_path(value)

    @pytest.mark.parametrize("value", ["web", "w1", "proxy_net.v2", "a" * 32])
    def test_network_names(self, value):
        assert is_valid_network_name(value)

    @pytest.mark.parametrize("value", ["w", ".web", "-web", "a" * 33, "my net"])
    def test_rejects_bad_network_names(self, value):
        assert not is_valid_network_name(value)


class TestFieldTable:
    def test_field_order(self):
        assert FIELD_NAMES == [
            "DOMAIN", "CRM_DOMAIN", "LE_EMAIL", "TZ", "WP_DB_USER",
            "CIVI_DB_USER", "WP_ADMIN_USER", "CIVI_ADMIN_USER", "BASE", "NETWORK_NAME",
        ]

    def test_timezone_only_requires_a_value(self):
        spec = get_field("TZ")
        assert spec.matches("Mars/Olympus_Mons")
        assert not spec.matches("")

    def test_unknown_field_raises(self):
        with pytest.raises(KeyError):
            get_field("NOPE")

    def test_unknown_class_raises(self):
        with pytest.raises(ValueError, match="Unknown field class"):
            is_valid("color", "red")

    def test_none_is_invalid(self):
        assert not is_valid("domain", None)
