"""Notification dispatch — keeps notification passes from interleaving.

A set() issued from inside a subscriber is not applied immediately. It is
queued and applied, in issue order, once the outermost pass has finished.
Every subscriber in a pass therefore sees the same value, and for any one
cell subscribers observe values in the order set() was called.
"""

from __future__ import annotations

from collections import deque
from typing import Callable

# Pass depth. When > 0, incoming set() calls are deferred.
_depth: int = 0

# Deferred set() calls, oldest first.
_pending: deque[Callable[[], None]] = deque()


def in_pass() -> bool:
    """True while a notification pass is running."""
    return _depth > 0


def defer(apply: Callable[[], None]) -> None:
    """Queue a set() to run after the current pass."""
    _pending.append(apply)


def run(apply: Callable[[], None]) -> None:
    """Run apply as a notification pass, then drain anything it deferred.

    A subscriber that raises does not cancel sets queued for other cells:
    the queue is drained first and the first exception is raised afterwards.
    """
    global _depth
    _depth += 1
    error: Exception | None = None
    try:
        try:
            apply()
        except Exception as exc:
            error = exc
        while _pending:
            try:
                _pending.popleft()()
            except Exception as exc:
                if error is None:
                    error = exc
    except BaseException:
        _pending.clear()
        raise
    finally:
        _depth -= 1
    if error is not None:
        raise error


def get_pending_count() -> int:
    """Number of set() calls waiting to run. Useful for testing."""
    return len(_pending)
