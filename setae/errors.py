from __future__ import annotations

from typing import Optional


class SetaeError(Exception):
    """Base error for setae client operations."""


class ParseError(SetaeError, ValueError):
    """Raised when a compact textual spec is malformed."""

    def __init__(self, message: str, literal: str) -> None:
        self.message = message
        self.literal = literal
        super().__init__(message)


class PayloadValidationError(SetaeError, ValueError):
    """Raised when a payload violates the invariants of its variant."""


class ConfigError(SetaeError):
    """Raised when no usable backend configuration can be resolved."""


class WaitTimeoutError(SetaeError):
    """Raised when a waiter deadline elapses before completion."""


class TransportError(SetaeError):
    """
    Failure surfaced by the backend or the HTTP layer.

    ``status_code`` is None when the request never produced a response.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_status(cls, status_code: int, message: str) -> "TransportError":
        if status_code == 404:
            return NotFoundError(message, status_code)
        if status_code == 409:
            return ConflictError(message, status_code)
        if status_code >= 500:
            return BackendError(message, status_code)
        return cls(message, status_code)


class NotFoundError(TransportError):
    """The requested artifact or thread does not exist."""


class ConflictError(TransportError):
    """The artifact is terminal and cannot be modified."""


class BackendError(TransportError):
    """The backend failed to process the request."""
