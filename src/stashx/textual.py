"""Textual integration for stashx. Opt-in — requires textual.

Guard, NoMatches handling and thread-marshal are enforced here, not at
callsites. Textual coupling is isolated in this module; core stashx stays
agnostic. _paused_apps has a single owner (this module): an id is present
exactly while that app is inside a pause() block.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Module-owned pause state — keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend bound listeners during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def bind(app, store, fn):
    """store.subscribe() that safely bridges to Textual widgets.

    Skips values while the app is paused or not running, swallows NoMatches
    from widget queries, and marshals calls from other threads via
    call_from_thread. Returns the unsubscribe function.

    Usage:
        bind(app, hint_store, lambda visible: app.query_one(Hint).set_class(not visible, "hidden"))
    """
    _main = threading.get_ident()

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, value)
        else:
            _safe(value)

    def _safe(value):
        try:
            fn(value)
        except NoMatches:
            pass

    return store.subscribe(_guarded)
