"""Tests for stashx.textual — Textual integration layer."""

import threading

import pytest
from textual.css.query import NoMatches

from stashx import MemoryBackend, StoreFactory
from stashx import textual as stx


class _MockApp:
    """Minimal mock matching the Textual App interface stx needs."""

    def __init__(self, *, is_running=True):
        self.is_running = is_running
        self._call_from_thread_log = []

    def call_from_thread(self, fn, *args):
        self._call_from_thread_log.append((fn, args))
        fn(*args)


def _store(default=1):
    return StoreFactory(MemoryBackend()).create("radicle.test", default, int)


class TestBind:
    def test_replays_current_value(self):
        app = _MockApp()
        effects = []
        stx.bind(app, _store(7), effects.append)
        assert effects == [7]

    def test_skips_when_not_running(self):
        app = _MockApp(is_running=False)
        s = _store()
        effects = []
        stx.bind(app, s, effects.append)
        s.set(2)
        assert effects == []

    def test_skips_during_pause(self):
        app = _MockApp()
        s = _store()
        effects = []
        stx.bind(app, s, effects.append)
        with stx.pause(app):
            s.set(2)
        assert effects == [1]

    def test_fires_when_safe(self):
        app = _MockApp()
        s = _store()
        effects = []
        stx.bind(app, s, effects.append)
        s.set(2)
        assert effects == [1, 2]

    def test_catches_nomatch(self):
        """NoMatches from widget queries are silently swallowed."""
        app = _MockApp()
        s = _store()

        def _raise_nomatch(v):
            raise NoMatches("RemoteHelperHint")

        # Should not raise
        unsub = stx.bind(app, s, _raise_nomatch)
        s.set(2)
        unsub()

    def test_propagates_real_errors(self):
        """Non-NoMatches exceptions propagate normally."""
        app = _MockApp()
        s = _store()

        def _raise_value_error(v):
            if v == 2:
                raise ValueError("boom")

        stx.bind(app, s, _raise_value_error)
        with pytest.raises(ValueError, match="boom"):
            s.set(2)

    def test_unsubscribe_stops_updates(self):
        app = _MockApp()
        s = _store()
        effects = []
        unsub = stx.bind(app, s, effects.append)
        s.set(2)
        unsub()
        s.set(3)
        assert effects == [1, 2]

    def test_thread_marshal(self):
        """Sets from a background thread use call_from_thread."""
        app = _MockApp()
        s = _store()
        effects = []
        stx.bind(app, s, effects.append)

        t = threading.Thread(target=lambda: s.set(2))
        t.start()
        t.join()

        assert effects == [1, 2]
        assert len(app._call_from_thread_log) >= 1


class TestPause:
    def test_pause_restores_on_exception(self):
        app = _MockApp()
        assert stx.is_safe(app)

        with pytest.raises(RuntimeError):
            with stx.pause(app):
                assert not stx.is_safe(app)
                raise RuntimeError("oops")

        # Restored despite exception
        assert stx.is_safe(app)

    def test_pause_does_not_mutate_app(self):
        """Pause state lives in the module, not on the app."""
        app = _MockApp()
        attrs_before = set(vars(app))
        with stx.pause(app):
            attrs_during = set(vars(app))
        assert attrs_before == attrs_during
        assert attrs_before == set(vars(app))

    def test_multiple_apps_independent(self):
        """Pausing one app does not affect another."""
        app_a = _MockApp()
        app_b = _MockApp()
        with stx.pause(app_a):
            assert not stx.is_safe(app_a)
            assert stx.is_safe(app_b)
