"""
Poll-based waiters.

Both waiters are small state machines driven by an injectable clock and sleep
so they can run against simulated time:

    POLLING -> COMPLETE | TIMED_OUT | TRANSPORT_FAILED
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from loguru import logger

from setae.artifacts.completion import is_complete
from setae.artifacts.models import Artifact, CompletionRule
from setae.errors import TransportError, WaitTimeoutError

if TYPE_CHECKING:
    from setae.client.models import MessagesResponse, PollResponse, ProtocolMessage

DEFAULT_POLL_INTERVAL_SECONDS = 2.0


class WaitState(str, Enum):
    POLLING = "polling"
    COMPLETE = "complete"
    TIMED_OUT = "timed_out"
    TRANSPORT_FAILED = "transport_failed"


class ArtifactSource(Protocol):
    def get_artifact(self, category: str, name: str) -> Artifact:
        ...


class MessageSource(Protocol):
    def read_messages(self, category: str, name: str) -> "MessagesResponse":
        ...

    def poll(self, since: str) -> "PollResponse":
        ...


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _PollingLoop:
    def __init__(
        self,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        tolerate_errors: bool = False,
    ) -> None:
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep
        self.tolerate_errors = tolerate_errors
        self.state = WaitState.POLLING
        self.polls = 0
        self._deadline = 0.0

    def _start(self, timeout: float) -> None:
        self.state = WaitState.POLLING
        self.polls = 0
        self._deadline = self.clock() + timeout

    def _next_round(self) -> bool:
        """Sleep one interval; False once the deadline has passed."""
        self.sleep(self.poll_interval)
        if self.clock() >= self._deadline:
            self.state = WaitState.TIMED_OUT
            return False
        self.polls += 1
        return True

    def _on_transport_error(self, exc: TransportError) -> None:
        if not self.tolerate_errors:
            self.state = WaitState.TRANSPORT_FAILED
            raise exc
        logger.warning(f"Poll {self.polls} failed, continuing until deadline: {exc}")


class ArtifactWaiter(_PollingLoop):
    """Block until an artifact satisfies its completion rule."""

    def __init__(self, source: ArtifactSource, **kwargs) -> None:
        super().__init__(**kwargs)
        self.source = source

    def wait(
        self,
        category: str,
        name: str,
        timeout: float,
        completion: Optional[CompletionRule] = None,
    ) -> Artifact:
        self._start(timeout)
        logger.debug(f"Waiting up to {timeout}s for artifact {category}/{name}")
        while self._next_round():
            try:
                artifact = self.source.get_artifact(category, name)
            except TransportError as exc:
                self._on_transport_error(exc)
                continue
            rule = completion if completion is not None else artifact.completion
            if is_complete(artifact.status, rule, artifact.payload):
                self.state = WaitState.COMPLETE
                logger.info(f"Artifact {category}/{name} complete after {self.polls} poll(s)")
                return artifact
        raise WaitTimeoutError("Timed out waiting for artifact submission")


class MessageWaiter(_PollingLoop):
    """Block until new messages appear on a thread.

    The poll cursor starts at the wait's start time and is replaced by each
    response's ``serverTime``, so an update is seen at least once.
    """

    def __init__(
        self,
        source: MessageSource,
        *,
        now_iso: Callable[[], str] = utc_now_iso,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.source = source
        self.now_iso = now_iso
        self.cursor: Optional[str] = None

    def wait(self, category: str, name: str, timeout: float) -> list["ProtocolMessage"]:
        self._start(timeout)
        known_count = len(self.source.read_messages(category, name).messages)
        self.cursor = self.now_iso()
        logger.debug(f"Waiting up to {timeout}s for messages on {category}/{name} (known={known_count})")

        while self._next_round():
            try:
                response = self.source.poll(self.cursor)
                self.cursor = response.server_time
                if response.find(category, name) is None:
                    continue
                fresh = self.source.read_messages(category, name).messages
            except TransportError as exc:
                self._on_transport_error(exc)
                continue
            new_messages = fresh[known_count:]
            if new_messages:
                self.state = WaitState.COMPLETE
                return new_messages
        raise WaitTimeoutError("Timed out waiting for new messages.")
