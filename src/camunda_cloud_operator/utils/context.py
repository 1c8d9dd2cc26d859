"""Reconcile context: cancellation, deadlines and correlation IDs."""

from __future__ import annotations

import contextvars
import time
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from .errors import ReconcileCancelled

# Context variable for storing correlation ID
correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


class StopFlag(Protocol):
    """Anything exposing ``is_set()``, e.g. kopf's ``stopped`` flag or a threading.Event."""

    def is_set(self) -> bool:
        ...


class ReconcileContext:
    """Cancellation-carrying context threaded through every remote call.

    The context never sleeps or retries; it only answers whether the current
    pass may keep going and how long the next remote call may take.
    """

    def __init__(
        self,
        stopped: StopFlag | None = None,
        timeout: float | None = None,
        corr_id: str | None = None,
    ):
        self.stopped = stopped
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.correlation_id = corr_id or uuid.uuid4().hex

    @property
    def cancelled(self) -> bool:
        """Whether the pass was stopped by the framework."""
        return self.stopped is not None and self.stopped.is_set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self, operation: str = "reconcile") -> None:
        """Raise ReconcileCancelled if the pass must abort before ``operation``."""
        if self.cancelled:
            raise ReconcileCancelled(f"{operation} cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise ReconcileCancelled(f"{operation} exceeded the reconcile deadline")

    def timeout_for(self, default: float) -> float:
        """Timeout for the next remote call, bounded by the remaining deadline."""
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)


def get_correlation_id() -> str | None:
    """Get the correlation ID from the current context."""
    return correlation_id.get()


@contextmanager
def with_correlation_id(corr_id: str) -> Iterator[str]:
    """Context manager to set a correlation ID for the duration of a block.

    Args:
        corr_id: Correlation ID to use

    Yields:
        The correlation ID
    """
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


def get_context_dict(additional: dict[str, Any] | None = None) -> dict[str, Any]:
    """Get a dictionary of context values, including the correlation ID when set."""
    ctx: dict[str, Any] = {}

    corr_id = get_correlation_id()
    if corr_id:
        ctx["correlation_id"] = corr_id

    if additional:
        ctx.update(additional)

    return ctx
