"""StoreRegistry — one Store per key.

The registry is the only process-wide mutable state in stashx. The default
instance lives in _anchor from first use until the process exits and is
never reset. Tests build their own StoreRegistry() for isolation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterator

if TYPE_CHECKING:
    from stashx.store import Store


class StoreRegistry:
    """Key -> Store map. The first registration for a key wins."""

    def __init__(self) -> None:
        self._stores: dict[str, Store] = {}

    def get_or_create(self, key: str, factory_fn: Callable[[], Store]) -> Store:
        """Return the Store for key, building it with factory_fn if needed.

        Nothing is registered if factory_fn raises.
        """
        store = self._stores.get(key)
        if store is None:
            store = factory_fn()
            self._stores[key] = store
        return store

    def get(self, key: str) -> Store | None:
        return self._stores.get(key)

    def keys(self) -> Iterator[str]:
        return iter(list(self._stores))

    def __contains__(self, key: object) -> bool:
        return key in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    def __repr__(self) -> str:
        return f"StoreRegistry({sorted(self._stores)!r})"
