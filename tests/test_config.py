from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from setae.config.resolver import resolve_backend
from setae.config.store import BackendConfig, ConfigStore, resolve_config_path
from setae.errors import ConfigError


def _store(tmp_path: Path, filename: str = "config.json") -> ConfigStore:
    return ConfigStore(tmp_path / filename)


def test_config_dir_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EXTENDO_CONFIG_DIR", str(tmp_path))

    assert resolve_config_path() == tmp_path / "config.json"


def test_missing_file_reads_as_none(tmp_path: Path) -> None:
    store = _store(tmp_path)

    assert store.read() is None
    assert store.get() is None
    assert store.list_backends() == []


def test_first_backend_becomes_default(tmp_path: Path) -> None:
    store = _store(tmp_path)

    store.set_backend("prod", BackendConfig(url="https://prod.example/", token="p"))
    store.set_backend("dev", BackendConfig(url="https://dev.example", token="d"))

    assert store.get() == BackendConfig(url="https://prod.example", token="p")
    assert store.get("dev").token == "d"
    entries = store.list_backends()
    assert [(entry.name, entry.is_default) for entry in entries] == [("prod", True), ("dev", False)]


def test_written_file_is_json(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.set_backend("prod", BackendConfig(url="https://prod.example", token="p"))

    data = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))

    assert data == {"backends": {"prod": {"url": "https://prod.example", "token": "p"}}, "default": "prod"}


def test_yaml_path_round_trips(tmp_path: Path) -> None:
    store = _store(tmp_path, "config.yaml")
    store.set_backend("prod", BackendConfig(url="https://prod.example", token="p"))

    data = yaml.safe_load((tmp_path / "config.yaml").read_text(encoding="utf-8"))

    assert data["default"] == "prod"
    assert store.get().url == "https://prod.example"


def test_legacy_single_backend_file_migrates(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"url": "https://old.example", "token": "t"}), encoding="utf-8")
    store = ConfigStore(path)

    config = store.read()

    assert config.default == "default"
    assert config.backends["default"].url == "https://old.example"


def test_set_default_unknown_name_lists_available(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.set_backend("prod", BackendConfig(url="https://prod.example", token="p"))

    with pytest.raises(ConfigError) as excinfo:
        store.set_default("staging")

    assert "Available: prod" in str(excinfo.value)


def test_remove_default_moves_to_remaining_backend(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.set_backend("prod", BackendConfig(url="https://prod.example", token="p"))
    store.set_backend("dev", BackendConfig(url="https://dev.example", token="d"))

    store.remove_backend("prod")

    assert store.read().default == "dev"
    store.remove_backend("dev")
    assert store.read().default is None
    with pytest.raises(ConfigError):
        store.remove_backend("dev")


def test_corrupt_file_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigStore(path).read()


def test_resolve_prefers_explicit_url_and_token(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.set_backend("prod", BackendConfig(url="https://prod.example", token="p"))
    environ = {"EXTENDO_URL": "https://env.example", "EXTENDO_TOKEN": "e"}

    backend = resolve_backend(url="https://cli.example/", token="c", environ=environ, store=store)

    assert backend == BackendConfig(url="https://cli.example", token="c")


def test_resolve_uses_environment_before_store(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.set_backend("prod", BackendConfig(url="https://prod.example", token="p"))
    environ = {"EXTENDO_URL": "https://env.example", "EXTENDO_TOKEN": "e"}

    assert resolve_backend(environ=environ, store=store).url == "https://env.example"
    assert resolve_backend("prod", environ=environ, store=store).url == "https://prod.example"


def test_resolve_without_any_backend_fails(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with pytest.raises(ConfigError) as excinfo:
        resolve_backend(environ={}, store=store)
    assert "setae auth add" in str(excinfo.value)

    with pytest.raises(ConfigError) as excinfo:
        resolve_backend("missing", environ={}, store=store)
    assert 'No backend named "missing"' in str(excinfo.value)


def test_backend_entry_missing_token_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"backends": {"prod": {"url": "https://prod.example"}}}), encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        ConfigStore(path).read()

    assert "token" in str(excinfo.value)
