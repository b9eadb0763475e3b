"""Unit tests for server configuration loading and path policy"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from fleetconsole.core.config import (
    ServerConfig, load_config_from, resolve_paths, read_admin_token,
    resolve_admin_token, DEV_ADMIN_TOKEN, CONFIG_ENV_VAR,
)


class TestLoadConfig:
    def test_defaults_when_file_missing(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = load_config_from(str(tmp_path / "missing.yaml"))
        assert config == ServerConfig()
        assert config.port == 8000
        assert config.metrics_days == 7

    def test_yaml_values(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("port: 9000\ntest_mode: true\nsampler_interval: 0\n")
        config = load_config_from(str(path))
        assert config.port == 9000
        assert config.test_mode is True
        assert config.sampler_interval == 0

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config_from(str(path)) == ServerConfig()

    def test_env_var_fallback(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("host: 127.0.0.1\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert load_config_from().host == "127.0.0.1"

    def test_console_delay_validation(self):
        with pytest.raises(ValidationError):
            ServerConfig(console_delay_min=2.0, console_delay_max=1.0)
        with pytest.raises(ValidationError):
            ServerConfig(console_delay_min=-1.0)


class TestPaths:
    def test_resolve_paths(self):
        config = ServerConfig(auth_dir="/etc/fleet", db_path="/var/lib/fleet.db", test_mode=True)
        db_path, token_path, allow_dev, cert, key = resolve_paths(config)
        assert db_path == Path("/var/lib/fleet.db")
        assert token_path == Path("/etc/fleet/admin_token")
        assert allow_dev is True
        assert cert == Path("/etc/fleet/server.crt")
        assert key == Path("/etc/fleet/server.key")

    def test_read_admin_token(self, tmp_path):
        path = tmp_path / "admin_token"
        path.write_text("  tok123\n")
        assert read_admin_token(path) == "tok123"
        assert read_admin_token(tmp_path / "missing") is None

    def test_empty_token_file(self, tmp_path):
        (tmp_path / "admin_token").write_text("\n")
        assert read_admin_token(tmp_path / "admin_token") is None


class TestResolveAdminToken:
    def test_token_from_file(self, tmp_path):
        (tmp_path / "admin_token").write_text("prod-token")
        assert resolve_admin_token(ServerConfig(auth_dir=str(tmp_path))) == "prod-token"

    def test_dev_token_in_test_mode(self, tmp_path):
        assert resolve_admin_token(ServerConfig(auth_dir=str(tmp_path), test_mode=True)) == DEV_ADMIN_TOKEN

    def test_missing_token_fails_in_production(self, tmp_path):
        with pytest.raises(RuntimeError):
            resolve_admin_token(ServerConfig(auth_dir=str(tmp_path)))
