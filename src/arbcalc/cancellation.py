from __future__ import annotations

import threading


class CancellationToken:
    """
    Cooperative cancellation flag scoped to a single evaluation.

    Long-running loops in the algorithms and in factorization poll
    ``is_cancel_requested()`` and unwind with NaN (or a partial result)
    once it is set. Each evaluation owns its own token, so cancelling one
    evaluation never affects another running in parallel.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def request_cancel(self) -> None:
        self._event.set()

    def clear(self) -> None:
        self._event.clear()

    def is_cancel_requested(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        state = "cancelled" if self.is_cancel_requested() else "active"
        return f"<CancellationToken {state}>"


def ensure_token(token: CancellationToken | None) -> CancellationToken:
    """Return `token`, or a fresh never-triggered token when the caller has none."""
    return CancellationToken() if token is None else token
