"""Reactive cells — a current value plus an ordered list of subscribers.

A subscriber is called once with the current value as soon as it
subscribes, then once per set() in registration order. The cell does not
validate; the owning Store does that before handing values over.

Values and subscribers live in _anchor, keyed by the handle's _id. The
entries are released when the handle is garbage-collected.

Thread safety: call set_scheduler() once from the owner thread. After that,
any .set() from a background thread is auto-marshaled. Owner-thread .set()
remains synchronous.
"""

from __future__ import annotations

import threading
import weakref
from typing import Callable, Generic, TypeVar

from stashx import _anchor, _dispatch

T = TypeVar("T")

Unsubscribe = Callable[[], None]

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread cell mutations.

    Call once from the main/UI thread:
        stashx.set_scheduler(app.call_from_thread)

    After this, any ReactiveCell.set() from a background thread is
    automatically marshaled. Main-thread mutations remain synchronous.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread()


class ReactiveCell(Generic[T]):
    """A single value with replaying, ordered subscribers."""

    __slots__ = ("_id", "_writer", "__weakref__")

    def __init__(self, value: T, writer: Callable[[T], None] | None = None) -> None:
        self._id = _anchor.new_id()
        self._writer = writer
        _anchor.values[self._id] = value
        _anchor.subscribers[self._id] = {}
        weakref.finalize(self, _anchor.release, self._id)

    def get(self) -> T:
        return _anchor.values[self._id]

    def set(self, value: T) -> None:
        """Write a new value. Auto-marshals from background threads."""
        if _scheduler is not None and threading.current_thread() != _scheduler_thread:
            _scheduler(lambda v=value: self._set_direct(v))
        else:
            self._set_direct(value)

    def _set_direct(self, value: T) -> None:
        if _dispatch.in_pass():
            _dispatch.defer(lambda: self._apply(value))
        else:
            _dispatch.run(lambda: self._apply(value))

    def _apply(self, value: T) -> None:
        """Update, write through, then notify. Runs inside a dispatch pass."""
        _anchor.values[self._id] = value
        if self._writer is not None:
            self._writer(value)
        self._notify(value)

    def _notify(self, value: T) -> None:
        subs = _anchor.subscribers[self._id]
        for token, callback in list(subs.items()):
            # Unsubscribed earlier in this same pass
            if token in subs:
                callback(value)

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Register a callback and replay the current value to it.

        Returns a function that removes it. Calling that twice is a no-op.
        """
        token = _anchor.new_id()
        subs = _anchor.subscribers[self._id]
        subs[token] = callback

        def _unsubscribe() -> None:
            subs.pop(token, None)

        try:
            callback(_anchor.values[self._id])
        except BaseException:
            _unsubscribe()
            raise
        return _unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(_anchor.subscribers[self._id])

    def __repr__(self) -> str:
        return f"ReactiveCell({_anchor.values[self._id]!r})"
