#!/usr/bin/env python3
"""
Rendering tests for the Traefik and application stack files.
"""

from pathlib import Path
import stat

import pytest
import sys
import yaml
from jinja2 import TemplateError

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
from wpcivi.config_constants import SECRET_KEYS  # noqa: E402
from wpcivi.errors import RenderError  # noqa: E402
from wpcivi.record import ConfigRecord  # noqa: E402
from wpcivi.render_utils import (  # noqa: E402
    build_template_context,
    prepare_acme_storage,
    render_jinja2,
    render_stack_files,
    render_traefik_files,
)

from _fakes import full_env  # noqa: E402

SECRETS = {key: f"{key.lower()}-value" for key in SECRET_KEYS}


class TestTemplateContext:
    def test_record_fields_are_lowercased(self, record):
        context = build_template_context(record)
        assert context["domain"] == "example.org"
        assert context["network_name"] == "web"
        assert context["wp_db_name"] == "wordpress"
        assert context["civi_db_name"] == "civicrm"

    def test_mirrored_fields_in_secrets_do_not_override_record(self, record):
        context = build_template_context(record, {**SECRETS, "DOMAIN": "stale.example.org"})
        assert context["domain"] == "example.org"
        assert context["wp_db_password"] == "wp_db_password-value"


class TestRenderJinja2:
    def test_missing_template(self):
        with pytest.raises(FileNotFoundError):
            render_jinja2("does-not-exist.j2", {})

    def test_missing_variable_is_an_error(self, record):
        with pytest.raises(TemplateError, match="stack.env.j2"):
            render_jinja2("stack.env.j2", build_template_context(record))


class TestTraefikFiles:
    def test_writes_config_and_compose(self, record):
        written = render_traefik_files(record)
        paths = record.paths

        assert written == [paths.traefik_config, paths.traefik_compose]
        config = paths.traefik_config.read_text(encoding="utf-8")
        assert 'email: "admin@example.org"' in config
        assert "dashboard: false" in config
        assert "to: websecure" in config
        compose = paths.traefik_compose.read_text(encoding="utf-8")
        assert "image: traefik:v3" in compose
        assert yaml.safe_load(compose)["networks"] == {"web": {"external": True}}

    def test_acme_storage_permissions(self, record):
        render_traefik_files(record)
        paths = record.paths
        assert stat.S_IMODE(paths.letsencrypt_dir.stat().st_mode) == 0o700
        assert stat.S_IMODE(paths.acme_storage.stat().st_mode) == 0o600

    def test_acme_storage_is_not_truncated(self, record):
        paths = record.paths
        paths.letsencrypt_dir.mkdir(parents=True)
        paths.acme_storage.write_text('{"letsencrypt": {}}', encoding="utf-8")

        prepare_acme_storage(paths)

        assert paths.acme_storage.read_text(encoding="utf-8") == '{"letsencrypt": {}}'

    def test_custom_network_name(self, base_dir):
        env = full_env(base_dir)
        env["NETWORK_NAME"] = "proxy"
        record = ConfigRecord.from_mapping(env)

        render_traefik_files(record)

        config = yaml.safe_load(record.paths.traefik_config.read_text(encoding="utf-8"))
        compose = yaml.safe_load(record.paths.traefik_compose.read_text(encoding="utf-8"))
        assert config["providers"]["docker"]["network"] == "proxy"
        assert compose["networks"] == {"proxy": {"external": True}}

    @pytest.mark.parametrize("network_name", ["123", "1.5", "true", "null"])
    def test_scalar_like_network_name_stays_a_string(self, base_dir, network_name):
        env = full_env(base_dir)
        env["NETWORK_NAME"] = network_name
        record = ConfigRecord.from_mapping(env)

        render_traefik_files(record)
        render_stack_files(record, SECRETS)

        config = yaml.safe_load(record.paths.traefik_config.read_text(encoding="utf-8"))
        assert config["providers"]["docker"]["network"] == network_name
        for compose_path in (record.paths.traefik_compose, record.paths.stack_compose):
            compose = yaml.safe_load(compose_path.read_text(encoding="utf-8"))
            assert list(compose["networks"]) == [network_name]
            for service in compose["services"].values():
                assert service["networks"] == [network_name]


class TestStackFiles:
    def test_writes_env_compose_and_initdb(self, record):
        written = render_stack_files(record, SECRETS)
        paths = record.paths

        assert written == [paths.stack_env, paths.stack_compose, paths.initdb_script]
        assert paths.initdb_script == paths.base / "stack" / "initdb" / "00-init.sql"

    def test_env_file_contents_and_mode(self, record):
        render_stack_files(record, SECRETS)
        env_file = record.paths.stack_env

        lines = env_file.read_text(encoding="utf-8").splitlines()
        assert "DOMAIN=example.org" in lines
        assert "WP_DB_NAME=wordpress" in lines
        assert "CIVI_DB_PASSWORD=civi_db_password-value" in lines
        assert "CIVI_ADMIN_EMAIL=admin@example.org" in lines
        assert stat.S_IMODE(env_file.stat().st_mode) == 0o600

    def test_compose_routes_both_hosts(self, record):
        render_stack_files(record, SECRETS)
        compose = record.paths.stack_compose.read_text(encoding="utf-8")

        assert "image: mariadb:10.11" in compose
        assert "Host(`${DOMAIN}`)" in compose
        assert "Host(`${CRM_DOMAIN}`)" in compose
        assert "condition: service_healthy" in compose
        assert "name: wp_data" in compose

    def test_initdb_creates_both_databases(self, record):
        render_stack_files(record, SECRETS)
        sql = record.paths.initdb_script.read_text(encoding="utf-8")

        assert "CREATE DATABASE IF NOT EXISTS `wordpress`" in sql
        assert "CREATE DATABASE IF NOT EXISTS `civicrm`" in sql
        assert "'wpuser'@'%' IDENTIFIED BY 'wp_db_password-value'" in sql
        assert "ON `civicrm`.* TO 'civiuser'@'%'" in sql

    def test_missing_secrets_raise_render_error(self, record):
        with pytest.raises(RenderError, match="stack.env.j2"):
            render_stack_files(record, {})

        assert not record.paths.stack_env.exists()
