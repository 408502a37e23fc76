"""Per-request deadline threaded through every gateway call and join."""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable
from typing import TypeVar

from routing_engine.exceptions import DeadlineExceeded

T = TypeVar("T")


class Deadline:
    """An absolute point on the monotonic clock; ``None`` means unbounded."""

    def __init__(self, timeout_s: float | None) -> None:
        self.timeout_s = timeout_s if timeout_s and timeout_s > 0 else None
        self._expires_at = (
            time.monotonic() + self.timeout_s if self.timeout_s is not None else None
        )

    @classmethod
    def unbounded(cls) -> Deadline:
        return cls(None)

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    async def run(self, awaitable: Awaitable[T], operation: str = "operation") -> T:
        """Await ``awaitable`` within the remaining time, cancelling it on expiry."""
        remaining = self.remaining()
        if remaining is None:
            return await awaitable
        if remaining <= 0:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            elif isinstance(awaitable, asyncio.Future):
                awaitable.cancel()
            raise DeadlineExceeded(f"deadline expired before {operation} started")
        try:
            return await asyncio.wait_for(awaitable, timeout=remaining)
        except asyncio.TimeoutError as e:
            raise DeadlineExceeded(
                f"{operation} did not finish within the {self.timeout_s:.1f}s request deadline"
            ) from e
