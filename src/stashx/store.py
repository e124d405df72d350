"""Store — a validated, persistent ReactiveCell bound to one key.

Store.set() validates, then hands the value to the cell, which writes it
through the backend and notifies subscribers. A failed write is logged and
swallowed: the new value stays authoritative for the running process.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Literal, TypeVar

from stashx.backend import Backend
from stashx.cell import ReactiveCell, Unsubscribe
from stashx.errors import BackendError, InvalidValueError
from stashx.schema import Schema

logger = logging.getLogger("stashx.store")

T = TypeVar("T")

Source = Literal["persisted", "default"]


class Store(Generic[T]):
    """Typed handle for one persisted preference.

    Usage:
        hint = stashx.create("radicle.isRemoteHelperHintVisible", True, bool)
        hint.get()                  # True on a fresh install
        hint.subscribe(print)       # prints True immediately
        hint.set(False)             # persisted, then prints False
    """

    def __init__(
        self,
        key: str,
        default: T,
        schema: Schema[T],
        backend: Backend,
        initial: T,
        source: Source = "default",
    ) -> None:
        self._key = key
        self._default = default
        self._schema = schema
        self._backend = backend
        self._source: Source = source
        self._cell: ReactiveCell[T] = ReactiveCell(initial, writer=self._persist)

    @property
    def key(self) -> str:
        return self._key

    @property
    def default(self) -> T:
        return self._default

    @property
    def schema(self) -> Schema[T]:
        return self._schema

    @property
    def source(self) -> Source:
        """Where the current value came from: the backend or the default."""
        return self._source

    def get(self) -> T:
        return self._cell.get()

    def set(self, value: T) -> None:
        """Validate and publish value. Raises InvalidValueError on a mismatch."""
        result = self._schema.validate(value)
        if not result.ok:
            raise InvalidValueError(self._key, result.reason)
        self._cell.set(result.value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self.get()))

    def reset(self) -> None:
        self.set(self._default)

    def subscribe(self, listener: Callable[[T], None]) -> Unsubscribe:
        return self._cell.subscribe(listener)

    def _persist(self, value: T) -> None:
        """Write-through hook, called by the cell before notifying."""
        self._source = "persisted"
        try:
            self._backend.set(self._key, self._schema.dumps(value))
        except (BackendError, OSError):
            logger.exception("Failed to persist %s", self._key)

    def __repr__(self) -> str:
        return f"Store({self._key!r}, {self.get()!r})"
