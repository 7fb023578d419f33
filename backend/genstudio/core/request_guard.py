"""Request Lifecycle Guard — single-flight admission control for generation calls.

Invariants:
    - At most one RequestHandle is active at a time
    - Blank prompts (empty / whitespace-only) are never admitted
    - request_count increments exactly once per admitted attempt, never on rejection
    - release() is idempotent; admit() releases on every exit path, including exceptions
    - Correlation ids are unique for the process lifetime: "req-<seq>-<epoch ms>"

Design Decisions:
    - Plain bool check-and-set, no asyncio.Lock: both the check and the set happen
      without a suspension point, which is sufficient on a single event loop
    - Drop, don't queue: a second concurrent attempt is refused, not buffered
    - Clock injected (now_ms callable) so tests control correlation ids
"""

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from genstudio.core.domain_types import CorrelationId


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RequestHandle:
    """One admitted generation attempt."""
    correlation_id: CorrelationId
    seq: int
    prompt: str
    acquired_at: int  # epoch ms


class RequestGuard:
    """Admits at most one in-flight generation and numbers every attempt."""

    def __init__(
        self, request_count: int = 0,
        now_ms: Callable[[], int] = _wall_clock_ms,
    ):
        self._now_ms = now_ms
        self._request_count = request_count
        self._current: RequestHandle | None = None

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def active(self) -> bool:
        return self._current is not None

    @property
    def current(self) -> RequestHandle | None:
        return self._current

    def seed(self, request_count: int) -> None:
        """Continue numbering from a hydrated session. Never moves backwards."""
        self._request_count = max(self._request_count, request_count)

    def try_acquire(self, prompt: str) -> bool:
        """Check-and-set. Returns False when busy or the prompt is blank."""
        if self._current is not None or not prompt or not prompt.strip():
            return False
        self._request_count += 1
        acquired_at = self._now_ms()
        self._current = RequestHandle(
            correlation_id=CorrelationId(
                f"req-{self._request_count}-{acquired_at}",
            ),
            seq=self._request_count,
            prompt=prompt,
            acquired_at=acquired_at,
        )
        return True

    def release(self) -> None:
        self._current = None

    def force_release(self) -> RequestHandle | None:
        """Clear an abandoned lock (session reset). Returns the dropped handle."""
        dropped, self._current = self._current, None
        return dropped

    @contextmanager
    def admit(self, prompt: str) -> Iterator[RequestHandle | None]:
        """Scoped acquisition: yields the handle, or None when refused.

        Release runs on success, failure and unexpected exceptions alike.
        A refused admission never releases someone else's handle.
        """
        if not self.try_acquire(prompt):
            yield None
            return
        handle = self._current
        try:
            yield handle
        finally:
            # reset() may have force-released and a new attempt acquired since
            if self._current is handle:
                self.release()
