"""Tests for picnic_cli/config.py: persisted JSON settings."""

import json

import pytest

from picnic_cli.config import (
    CliConfig,
    clear_auth,
    config_path,
    load_config,
    save_config,
    set_auth_key,
    set_username,
    set_value,
)
from picnic_cli.errors import ConfigError


@pytest.fixture()
def cfg_file(tmp_path, monkeypatch):
    path = tmp_path / "picnic" / "config.json"
    monkeypatch.setenv("PICNIC_CLI_CONFIG", str(path))
    return path


class TestConfigPath:
    def test_env_override(self, cfg_file):
        assert config_path() == cfg_file

    def test_xdg_config_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PICNIC_CLI_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert config_path() == tmp_path / "picnic-cli" / "config.json"


class TestLoadSave:
    def test_defaults_when_missing(self, cfg_file):
        config = load_config()
        assert config.country_code == "NL"
        assert config.api_version == "15"
        assert config.auth_key is None
        assert config.username is None
        assert config.default_output == "pretty"
        assert not cfg_file.exists()

    def test_round_trip_uses_camel_case_keys(self, cfg_file):
        save_config(CliConfig(country_code="DE", auth_key="abc", default_output="json"))
        raw = json.loads(cfg_file.read_text())
        assert raw == {
            "countryCode": "DE",
            "apiVersion": "15",
            "authKey": "abc",
            "username": None,
            "defaultOutput": "json",
        }
        assert load_config().country_code == "DE"

    def test_invalid_json_raises(self, cfg_file):
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text("{not json")
        with pytest.raises(ConfigError):
            load_config()

    def test_invalid_value_raises(self, cfg_file):
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text(json.dumps({"countryCode": "BE"}))
        with pytest.raises(ConfigError):
            load_config()

    def test_partial_file_fills_defaults(self, cfg_file):
        cfg_file.parent.mkdir(parents=True)
        cfg_file.write_text(json.dumps({"authKey": "k"}))
        config = load_config()
        assert config.auth_key == "k"
        assert config.country_code == "NL"


class TestAuthState:
    def test_login_writes_key_and_username(self, cfg_file):
        set_auth_key("token-1")
        set_username("me@example.com")
        config = load_config()
        assert config.auth_key == "token-1"
        assert config.username == "me@example.com"

    def test_logout_clears_only_auth_key(self, cfg_file):
        set_auth_key("token-1")
        set_username("me@example.com")
        clear_auth()
        config = load_config()
        assert config.auth_key is None
        assert config.username == "me@example.com"


class TestSetValue:
    def test_sets_country_case_insensitive(self, cfg_file):
        assert set_value("countryCode", "de").country_code == "DE"
        assert load_config().country_code == "DE"

    def test_sets_default_output(self, cfg_file):
        set_value("defaultOutput", "TABLE")
        assert load_config().default_output == "table"

    def test_rejects_unknown_key(self, cfg_file):
        with pytest.raises(ConfigError) as exc:
            set_value("authKey", "x")
        assert exc.value.exit_code == 2

    def test_rejects_invalid_value(self, cfg_file):
        with pytest.raises(ConfigError) as exc:
            set_value("countryCode", "FR")
        assert exc.value.exit_code == 2
        assert load_config().country_code == "NL"
