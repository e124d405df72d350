"""StoreFactory — builds Stores from persisted data, once per key.

create() returns the registered Store when the key is known. Otherwise it
reads the backend, validates what it finds and seeds a new Store:

    nothing stored        -> default, nothing written
    valid entry           -> the stored value
    invalid entry         -> default, and the entry is overwritten with it
    unreadable backend    -> default, logged

The schema and default of a later create() for a known key are ignored.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from stashx import _anchor
from stashx.backend import Backend
from stashx.config import Settings
from stashx.errors import BackendError, InvalidValueError
from stashx.registry import StoreRegistry
from stashx.schema import Schema, schema as as_schema
from stashx.store import Store

logger = logging.getLogger("stashx.factory")

T = TypeVar("T")


class StoreFactory:
    """Composes a backend and a registry into create()."""

    def __init__(self, backend: Backend, registry: StoreRegistry | None = None) -> None:
        self.backend = backend
        self.registry = registry if registry is not None else StoreRegistry()

    def create(self, key: str, default: T, schema: Schema[T] | Any) -> Store[T]:
        return self.registry.get_or_create(
            key, lambda: self._build(key, default, as_schema(schema))
        )

    def _build(self, key: str, default: T, schema: Schema[T]) -> Store[T]:
        checked = schema.validate(default)
        if not checked.ok:
            raise InvalidValueError(key, f"default does not match {schema!r}: {checked.reason}")
        default = checked.value

        raw = self._read(key)
        if raw is None:
            logger.debug("%s: nothing stored, using default", key)
            return Store(key, default, schema, self.backend, default, source="default")

        result = schema.loads(raw)
        if result.ok:
            logger.debug("%s: loaded stored value", key)
            return Store(key, default, schema, self.backend, result.value, source="persisted")

        logger.warning("%s: stored value is invalid (%s), resetting to default", key, result.reason)
        self._heal(key, default, schema)
        return Store(key, default, schema, self.backend, default, source="default")

    def _read(self, key: str) -> str | None:
        try:
            return self.backend.get(key)
        except (BackendError, OSError):
            logger.warning("%s: backend read failed, using default", key, exc_info=True)
            return None

    def _heal(self, key: str, default: T, schema: Schema[T]) -> None:
        try:
            self.backend.set(key, schema.dumps(default))
        except (BackendError, OSError):
            logger.exception("%s: failed to overwrite invalid stored value", key)


def configure(backend: Backend | None = None, registry: StoreRegistry | None = None) -> StoreFactory:
    """Replace the process-default factory. Call before the first create().

    With no backend, one is built from Settings.from_env(). The registry
    defaults to the process registry.
    """
    if backend is None:
        backend = Settings.from_env().build_backend()
    if registry is None:
        registry = default_registry()
    _anchor.default_factory = StoreFactory(backend, registry)
    return _anchor.default_factory


def default_registry() -> StoreRegistry:
    if _anchor.default_registry is None:
        _anchor.default_registry = StoreRegistry()
    return _anchor.default_registry


def default_factory() -> StoreFactory:
    if _anchor.default_factory is None:
        configure()
    return _anchor.default_factory


def create(key: str, default: T, schema: Schema[T] | Any) -> Store[T]:
    """Return the Store for key from the process-default factory.

    Usage:
        hint = create("radicle.isRemoteHelperHintVisible", True, bool)
    """
    return default_factory().create(key, default, schema)
