"""Tests for config-file loading and environment selection"""

import logging
import os
from unittest.mock import patch

import pytest

from zklock.core.environments import EnvironmentResolver, load_config_file, normalize_server
from zklock.core.exceptions import ConfigurationError


@pytest.fixture
def resolver():
    return EnvironmentResolver(logging.getLogger("tests.environments"))


TWO_ENVIRONMENTS = {
    "default_environment": "production",
    "environments": {
        "production": {"servers": ["zk1:2181", "zk2:2181"], "ttl": 60},
        "staging": {"servers": [{"host": "zk-stage", "port": 2182}], "root": "/stage", "timeout": 2},
    },
}


class TestNormalizeServer:
    """Test server entry forms"""

    def test_host_port_string(self):
        assert normalize_server("zk1:2182") == "zk1:2182"

    def test_host_only_string_gets_default_port(self):
        assert normalize_server(" zk1 ") == "zk1:2181"

    def test_object_form(self):
        assert normalize_server({"host": "zk1", "port": 2999}) == "zk1:2999"

    def test_object_without_port(self):
        assert normalize_server({"host": "zk1"}) == "zk1:2181"

    @pytest.mark.parametrize("entry", ["", 42, {"port": 2181}, None])
    def test_invalid_entries(self, entry):
        with pytest.raises(ConfigurationError):
            normalize_server(entry)


class TestLoadConfigFile:
    """Test structural checks on the JSON file"""

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_file(path)
        assert exc_info.value.config_file == str(path)

    def test_top_level_must_be_object(self, config_file):
        with pytest.raises(ConfigurationError):
            load_config_file(config_file(["zk1:2181"]))

    def test_environments_must_be_object(self, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_file(config_file({"environments": ["production"]}))
        assert exc_info.value.field == "environments"


class TestEnvironmentResolver:
    """Test config file and environment priority"""

    def test_no_config_file_returns_none(self, resolver):
        assert resolver.resolve() is None

    def test_explicit_missing_file_raises(self, resolver, tmp_path):
        with pytest.raises(ConfigurationError, match="Config file not found"):
            resolver.resolve(config_file=str(tmp_path / "missing.json"))

    def test_env_var_missing_file_raises(self, resolver, monkeypatch, tmp_path):
        monkeypatch.setenv("ZKLOCK_CONFIG", str(tmp_path / "missing.json"))
        with pytest.raises(ConfigurationError):
            resolver.resolve()

    def test_environment_requested_without_file_raises(self, resolver):
        with pytest.raises(ConfigurationError, match="staging"):
            resolver.resolve(environment="staging")

    def test_environment_variable_without_file_raises(self, resolver, monkeypatch):
        monkeypatch.setenv("ZKLOCK_ENV", "staging")
        with pytest.raises(ConfigurationError, match="staging"):
            resolver.resolve()

    @pytest.mark.parametrize("field,value", [("root", 5), ("auth", ["digest", "user:pw"])])
    def test_non_string_value_raises(self, resolver, config_file, field, value):
        path = config_file({"environments": {"default": {field: value}}})
        with pytest.raises(ConfigurationError) as exc_info:
            resolver.resolve(config_file=path)
        assert exc_info.value.field == field

    def test_non_string_default_environment_raises(self, resolver, config_file):
        path = config_file({"default_environment": ["production"], "environments": TWO_ENVIRONMENTS["environments"]})
        with pytest.raises(ConfigurationError) as exc_info:
            resolver.resolve(config_file=path)
        assert exc_info.value.field == "default_environment"

    def test_default_environment_from_file(self, resolver, config_file):
        settings = resolver.resolve(config_file=config_file(TWO_ENVIRONMENTS))
        assert settings.name == "production"
        assert settings.servers == ["zk1:2181", "zk2:2181"]
        assert settings.ttl == 60
        assert settings.root is None

    def test_explicit_environment_wins(self, resolver, config_file, monkeypatch):
        monkeypatch.setenv("ZKLOCK_ENV", "production")
        settings = resolver.resolve(config_file=config_file(TWO_ENVIRONMENTS), environment="staging")
        assert settings.name == "staging"
        assert settings.servers == ["zk-stage:2182"]
        assert settings.root == "/stage"
        assert settings.timeout == 2.0

    def test_env_var_environment_beats_file_default(self, resolver, config_file, monkeypatch):
        monkeypatch.setenv("ZKLOCK_ENV", "staging")
        assert resolver.resolve(config_file=config_file(TWO_ENVIRONMENTS)).name == "staging"

    def test_falls_back_to_environment_named_default(self, resolver, config_file):
        path = config_file({"environments": {"default": {"servers": ["zk1:2181"]}}})
        assert resolver.resolve(config_file=path).name == "default"

    def test_unknown_environment_lists_available(self, resolver, config_file):
        with pytest.raises(ConfigurationError) as exc_info:
            resolver.resolve(config_file=config_file(TWO_ENVIRONMENTS), environment="qa")
        assert "production, staging" in str(exc_info.value)

    def test_config_path_from_env_var(self, resolver, config_file, monkeypatch):
        monkeypatch.setenv("ZKLOCK_CONFIG", config_file(TWO_ENVIRONMENTS, name="elsewhere.json"))
        assert resolver.resolve().name == "production"

    def test_home_config_file_is_used(self, resolver, tmp_path):
        home = tmp_path / "home"
        home.mkdir()
        (home / ".zklock.json").write_text('{"environments": {"default": {"servers": ["zk-home:2181"]}}}')
        assert resolver.resolve().servers == ["zk-home:2181"]

    def test_non_numeric_ttl_raises(self, resolver, config_file):
        path = config_file({"environments": {"default": {"ttl": "soon"}}})
        with pytest.raises(ConfigurationError, match="non-numeric"):
            resolver.resolve(config_file=path)

    def test_unknown_keys_are_warned(self, resolver, config_file, caplog):
        path = config_file({"environments": {"default": {"servers": ["zk1:2181"], "tll": 10}}})
        with caplog.at_level(logging.WARNING, logger="tests.environments"):
            resolver.resolve(config_file=path)
        assert "tll" in caplog.text

    def test_dotenv_supplies_environment(self, resolver, config_file, tmp_path):
        (tmp_path / ".env").write_text("ZKLOCK_ENV=staging\n")
        path = config_file(TWO_ENVIRONMENTS)
        with patch.dict(os.environ):
            assert resolver.resolve(config_file=path).name == "staging"
