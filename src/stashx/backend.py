"""Persistence backends — namespaced key -> raw string storage.

Backends store and return opaque strings and never interpret them. get()
returns None when a key is absent. A write is atomic: a reader sees either
the previous value or the new one, never a partial write.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator, Mapping, Protocol, runtime_checkable

from stashx.errors import BackendReadError, BackendWriteError

logger = logging.getLogger("stashx.backend")


@runtime_checkable
class Backend(Protocol):
    """What a Store needs from durable storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, raw: str) -> None: ...


class _Namespaced:
    """Applies the namespace prefix. Full keys are built only here."""

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace

    def _full(self, key: str) -> str:
        return f"{self.namespace}{key}"

    def _strip(self, full_key: str) -> str | None:
        if full_key.startswith(self.namespace):
            return full_key[len(self.namespace):]
        return None


class MemoryBackend(_Namespaced):
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: Mapping[str, str] | None = None, namespace: str = "") -> None:
        super().__init__(namespace)
        self._data: dict[str, str] = {}
        for key, raw in (initial or {}).items():
            self._data[self._full(key)] = raw

    def get(self, key: str) -> str | None:
        return self._data.get(self._full(key))

    def set(self, key: str, raw: str) -> None:
        self._data[self._full(key)] = raw

    def delete(self, key: str) -> None:
        self._data.pop(self._full(key), None)

    def keys(self) -> Iterator[str]:
        for full_key in list(self._data):
            key = self._strip(full_key)
            if key is not None:
                yield key

    def __repr__(self) -> str:
        return f"MemoryBackend({len(self._data)} entries, namespace={self.namespace!r})"


class FileBackend(_Namespaced):
    """One JSON object file mapping full keys to raw strings.

    Every get() reads the file, so it always sees the last completed write.
    set() writes a temp file in the same directory and os.replace()s it over
    the original.
    """

    def __init__(self, path: str | os.PathLike, namespace: str = "") -> None:
        super().__init__(namespace)
        self.path = Path(path)

    def _read(self) -> bytes | None:
        """Raw file contents, or None if the file does not exist. OSError propagates."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def _parse(self, key: str | None, content: bytes | None) -> dict[str, str]:
        """Decode the document. Raises BackendReadError if it is corrupt."""
        if content is None:
            return {}
        try:
            data = json.loads(content.decode("utf-8"))
        except ValueError as exc:
            raise BackendReadError(key, f"{self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise BackendReadError(key, f"{self.path} does not hold a JSON object")
        return data

    def _load(self, key: str | None = None) -> dict[str, str]:
        try:
            content = self._read()
        except OSError as exc:
            raise BackendReadError(key, f"cannot read {self.path}: {exc}") from exc
        return self._parse(key, content)

    def get(self, key: str) -> str | None:
        raw = self._load(key).get(self._full(key))
        # Entries written by something else may not be strings; hand them back re-encoded
        if raw is None or isinstance(raw, str):
            return raw
        return json.dumps(raw)

    def set(self, key: str, raw: str) -> None:
        try:
            content = self._read()
        except OSError as exc:
            # Other keys may still be intact; refuse to overwrite them
            raise BackendWriteError(key, f"cannot read {self.path} before writing: {exc}") from exc
        try:
            data = self._parse(key, content)
        except BackendReadError:
            # A corrupt document is replaced rather than blocking every later write
            logger.warning("Discarding unreadable store file %s", self.path)
            data = {}
        data[self._full(key)] = raw
        self._write(key, data)

    def delete(self, key: str) -> None:
        data = self._load(key)
        if data.pop(self._full(key), None) is not None:
            self._write(key, data)

    def keys(self) -> Iterator[str]:
        for full_key in self._load():
            key = self._strip(full_key)
            if key is not None:
                yield key

    def _write(self, key: str, data: dict[str, str]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise BackendWriteError(key, f"cannot write {self.path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"FileBackend({str(self.path)!r}, namespace={self.namespace!r})"
