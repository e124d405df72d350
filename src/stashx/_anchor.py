"""Data anchor — plain Python structures that hold all store state.

Cells are thin handles holding an _id; their values and subscribers live
here until the handle is collected and release() drops them. A subscriber
that holds its own cell keeps that cell alive until it unsubscribes.

The process-default registry and factory also live here, so they survive a
reload of the behavior modules.
"""

import itertools

# Cell state
values: dict[int, object] = {}
subscribers: dict[int, dict[int, object]] = {}  # cell_id -> {token: callback}, insertion-ordered

# Process-wide defaults, built lazily by stashx.factory
default_registry = None
default_factory = None

# ID generation — itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)


def release(cell_id: int) -> None:
    values.pop(cell_id, None)
    subscribers.pop(cell_id, None)
