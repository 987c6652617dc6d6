from __future__ import annotations

from typing import Any, Optional

import requests
from loguru import logger

from setae.errors import TransportError

DEFAULT_TIMEOUT_SECONDS = 30.0


class Transport:
    """Bearer-token JSON transport over a ``requests.Session``."""

    def __init__(
        self,
        url: str,
        token: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.url = url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def request(self, path: str, method: str = "GET", body: Any = None) -> Any:
        target = f"{self.url}{path}"
        logger.debug(f"{method} {target}")
        try:
            response = self._session.request(
                method,
                target,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Request to {target} failed: {exc}") from exc

        if not response.ok:
            message = _error_message(response)
            logger.debug(f"{method} {target} -> {response.status_code}: {message}")
            raise TransportError.from_status(response.status_code, message)

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Invalid JSON in response from {target}",
                response.status_code,
            ) from exc

    def close(self) -> None:
        self._session.close()


def _error_message(response: requests.Response) -> str:
    fallback = f"HTTP {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return fallback
