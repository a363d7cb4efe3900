import tomllib

import pytest

from conftest import make_record

from mngr.config import AppConfig, ConfigManager
from mngr.core.registry import Registry
from mngr.github.exceptions import StoreError


def __test_load_missing_file__(tmp_path):
    store = ConfigManager(tmp_path / "mngr.toml")
    assert not store.exists()
    assert store.load() is None


def __test_create_then_load__(tmp_path):
    store = ConfigManager(tmp_path / "mngr.toml")
    registry, created = store.load_or_create()
    assert created
    assert store.exists()

    loaded, created = store.load_or_create()
    assert not created
    assert loaded == registry


def __test_create_refuses_existing_file__(tmp_path):
    store = ConfigManager(tmp_path / "mngr.toml")
    store.create()
    with pytest.raises(StoreError, match="already exists"):
        store.create()


def __test_save_writes_toml_layout__(tmp_path):
    path = tmp_path / "mngr.toml"
    store = ConfigManager(path)
    registry = Registry.new(api_token="secret")
    registry.insert("foo", make_record("foo", "v1.2.3", pre_release=True))
    store.save(registry)

    with open(path, 'rb') as f:
        data = tomllib.load(f)
    assert data["id"] == registry.id
    assert data["github_token"] == "secret"
    assert data["plugins"]["foo"]["version"] == "v1.2.3"
    assert data["plugins"]["foo"]["pre_release"] is True
    assert data["plugins"]["foo"]["repository_url"] == "https://github.com/acme/foo"
    assert not (tmp_path / "mngr.toml.tmp").exists()

    assert store.load() == registry


def __test_load_invalid_toml__(tmp_path):
    path = tmp_path / "mngr.toml"
    path.write_text("this is = = not toml")
    with pytest.raises(StoreError, match="Failed to parse"):
        ConfigManager(path).load()


def __test_load_missing_keys__(tmp_path):
    path = tmp_path / "mngr.toml"
    path.write_text('id = "abc"\n')
    with pytest.raises(StoreError, match="Missing key"):
        ConfigManager(path).load()


def __test_load_invalid_plugins_table__(tmp_path):
    path = tmp_path / "mngr.toml"
    path.write_text('id = "abc"\ncreated_date = "2024-01-01T00:00:00Z"\nplugins = 3\n')
    with pytest.raises(StoreError, match="Invalid content"):
        ConfigManager(path).load()


def __test_save_into_missing_directory__(tmp_path):
    store = ConfigManager(tmp_path / "nope" / "mngr.toml")
    with pytest.raises(StoreError, match="Failed to save"):
        store.save(Registry.new())


def __test_app_config_from_env__(monkeypatch):
    monkeypatch.setenv("MNGR_GITHUB_TOKEN", " ghp_token ")
    monkeypatch.setenv("MNGR_LOG_LEVEL", "debug")
    config = AppConfig.from_env()
    assert config.github_token == "ghp_token"
    assert config.log_level == "DEBUG"

    monkeypatch.delenv("MNGR_GITHUB_TOKEN")
    monkeypatch.delenv("MNGR_LOG_LEVEL")
    config = AppConfig.from_env()
    assert config.github_token == ""
    assert config.log_level == "WARNING"
