from __future__ import annotations

import os
from typing import Mapping, Optional

from setae.config.store import BackendConfig, ConfigStore
from setae.errors import ConfigError

ENV_URL = "EXTENDO_URL"
ENV_TOKEN = "EXTENDO_TOKEN"


def resolve_backend(
    name: Optional[str] = None,
    *,
    url: Optional[str] = None,
    token: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    store: Optional[ConfigStore] = None,
) -> BackendConfig:
    """Pick the backend to talk to.

    Precedence: explicit ``url`` and ``token``, then ``EXTENDO_URL`` /
    ``EXTENDO_TOKEN`` (only when no backend name was requested), then the
    named or default entry of the local store.
    """
    if url and token:
        return BackendConfig(url=url.rstrip("/"), token=token)

    env = os.environ if environ is None else environ
    if not name:
        env_url = env.get(ENV_URL)
        env_token = env.get(ENV_TOKEN)
        if env_url and env_token:
            return BackendConfig(url=env_url.rstrip("/"), token=env_token)

    store = store or ConfigStore()
    backend = store.get(name)
    if backend is not None:
        return backend
    if name:
        raise ConfigError(f'No backend named "{name}". Run: setae auth list')
    raise ConfigError("No backend configured. Run: setae auth add <name> <url> <token>")
