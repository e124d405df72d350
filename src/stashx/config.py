"""Configuration for the process-default backend.

Settings come from the environment:

    STASHX_BACKEND     "file" (default) or "memory"
    STASHX_PATH        store file; defaults to $XDG_DATA_HOME/stashx/store.json
    STASHX_NAMESPACE   prefix for every stored key; empty by default
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping

from stashx.backend import Backend, FileBackend, MemoryBackend

BackendKind = Literal["file", "memory"]

_BACKENDS = ("file", "memory")


def default_path(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    data_home = env.get("XDG_DATA_HOME")
    root = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return root / "stashx" / "store.json"


@dataclass(frozen=True)
class Settings:
    path: Path
    namespace: str = ""
    backend: BackendKind = "file"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        kind = env.get("STASHX_BACKEND", "file").strip().lower() or "file"
        if kind not in _BACKENDS:
            raise ValueError(
                f"STASHX_BACKEND must be one of {', '.join(_BACKENDS)}, got {kind!r}"
            )
        raw_path = env.get("STASHX_PATH")
        path = Path(raw_path).expanduser() if raw_path else default_path(env)
        return cls(path=path, namespace=env.get("STASHX_NAMESPACE", ""), backend=kind)

    def build_backend(self) -> Backend:
        if self.backend == "memory":
            return MemoryBackend(namespace=self.namespace)
        return FileBackend(self.path, namespace=self.namespace)
