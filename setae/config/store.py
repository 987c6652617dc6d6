from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from setae.artifacts.models import describe_validation_error
from setae.errors import ConfigError

ENV_CONFIG_DIR = "EXTENDO_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "extendo"
CONFIG_FILENAME = "config.json"


class BackendConfig(BaseModel):
    url: str
    token: str


class BackendEntry(BaseModel):
    name: str
    url: str
    is_default: bool = False


class ConfigFile(BaseModel):
    backends: dict[str, BackendConfig] = Field(default_factory=dict)
    default: Optional[str] = None


def resolve_config_path() -> Path:
    config_dir = os.getenv(ENV_CONFIG_DIR)
    base_dir = Path(config_dir).expanduser() if config_dir else DEFAULT_CONFIG_DIR
    return base_dir / CONFIG_FILENAME


class ConfigStore:
    """Named backend credentials persisted on local disk."""

    def __init__(self, path: Optional[Path | str] = None) -> None:
        self.path = Path(path) if path is not None else resolve_config_path()

    def read(self) -> Optional[ConfigFile]:
        if not self.path.exists():
            return None
        data = _load_mapping(self.path)
        try:
            return ConfigFile.model_validate(migrate(data))
        except ValidationError as exc:
            raise ConfigError(f"Invalid backend config {self.path}: {describe_validation_error(exc)}") from exc

    def write(self, config: ConfigFile) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = config.model_dump(exclude_none=True)
        if self.path.suffix in {".yaml", ".yml"}:
            text = yaml.safe_dump(data, sort_keys=False)
        else:
            text = json.dumps(data, indent=2) + "\n"
        self.path.write_text(text, encoding="utf-8")
        logger.debug(f"Wrote backend config to {self.path}")

    def get(self, name: Optional[str] = None) -> Optional[BackendConfig]:
        config = self.read()
        if config is None:
            return None
        key = name or config.default
        if not key:
            return None
        return config.backends.get(key)

    def set_backend(self, name: str, backend: BackendConfig) -> None:
        config = self.read() or ConfigFile()
        config.backends[name] = BackendConfig(url=backend.url.rstrip("/"), token=backend.token)
        if not config.default:
            config.default = name
        self.write(config)

    def set_default(self, name: str) -> None:
        config = self.read() or ConfigFile()
        if name not in config.backends:
            available = ", ".join(config.backends)
            raise ConfigError(f'No backend named "{name}". Available: {available}')
        config.default = name
        self.write(config)

    def list_backends(self) -> list[BackendEntry]:
        config = self.read()
        if config is None:
            return []
        return [
            BackendEntry(name=name, url=backend.url, is_default=name == config.default)
            for name, backend in config.backends.items()
        ]

    def remove_backend(self, name: str) -> None:
        config = self.read() or ConfigFile()
        if name not in config.backends:
            raise ConfigError(f'No backend named "{name}"')
        del config.backends[name]
        if config.default == name:
            config.default = next(iter(config.backends), None)
        self.write(config)


def migrate(data: Mapping[str, Any]) -> dict[str, Any]:
    """Lift a legacy single-backend ``{url, token}`` file into the named layout."""
    if data.get("url") and data.get("token") and not data.get("backends"):
        return {
            "backends": {"default": {"url": data["url"], "token": data["token"]}},
            "default": "default",
        }
    return {"backends": data.get("backends") or {}, "default": data.get("default")}


def _load_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            if path.suffix in {".yaml", ".yml"}:
                data = yaml.safe_load(handle)
            else:
                data = json.load(handle)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid backend config {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Backend config {path} must be a mapping")
    return dict(data)
