from setae.config.resolver import ENV_TOKEN, ENV_URL, resolve_backend
from setae.config.store import (
    BackendConfig,
    BackendEntry,
    ConfigFile,
    ConfigStore,
    resolve_config_path,
)

__all__ = [
    "ENV_TOKEN",
    "ENV_URL",
    "resolve_backend",
    "BackendConfig",
    "BackendEntry",
    "ConfigFile",
    "ConfigStore",
    "resolve_config_path",
]
