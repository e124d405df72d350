"""stashx: validated, persistent, reactive value stores for Python."""

from importlib.metadata import version as _version

__version__ = _version("stashx")

from stashx._dispatch import get_pending_count
from stashx.backend import Backend, FileBackend, MemoryBackend
from stashx.cell import ReactiveCell, Unsubscribe, set_scheduler
from stashx.config import Settings
from stashx.errors import (
    BackendError,
    BackendReadError,
    BackendWriteError,
    InvalidValueError,
    StashError,
)
from stashx.factory import StoreFactory, configure, create
from stashx.registry import StoreRegistry
from stashx.schema import MISSING, Invalid, Schema, Valid, schema
from stashx.store import Store
# textual NOT auto-imported — opt-in only

__all__ = [
    "create",
    "configure",
    "Store",
    "StoreFactory",
    "StoreRegistry",
    "ReactiveCell",
    "Unsubscribe",
    "set_scheduler",
    "get_pending_count",
    "Schema",
    "schema",
    "Valid",
    "Invalid",
    "MISSING",
    "Backend",
    "MemoryBackend",
    "FileBackend",
    "Settings",
    "StashError",
    "BackendError",
    "BackendReadError",
    "BackendWriteError",
    "InvalidValueError",
]
