from __future__ import annotations

from typing import Any, Optional


class FakeResponse:
    def __init__(self, status_code: int, data: Any = None, *, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self._data = data
        self._text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._text is not None:
            raise ValueError("not json")
        return self._data


class FakeSession:
    """Scripted stand-in for ``requests.Session``; exceptions in the script are raised."""

    def __init__(self, *responses: Any) -> None:
        self.headers: dict[str, str] = {}
        self.calls: list[dict[str, Any]] = []
        self._responses = list(responses)

    def request(self, method: str, url: str, json: Any = None, timeout: Optional[float] = None):
        self.calls.append({"method": method, "url": url, "json": json, "timeout": timeout})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        return
