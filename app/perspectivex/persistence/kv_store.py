"""
Purpose: String-keyed key-value backends for the durable archive.
Why: The archive lives under a single fixed key; the backend is injected so
tests can swap in memory for disk.

What is inside:
InMemoryKeyValueStore (tests, ephemeral runs).
FileKeyValueStore: one UTF-8 file per key under a data directory.

Testing:
In-memory: simple state tests.
File: tmp_path fixture; corrupt file and unwritable directory cases.
"""

from __future__ import annotations
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from ..errors import PersistenceError

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileKeyValueStore:
    def __init__(self, base_dir: str | Path = "./data") -> None:
        self.base_dir = Path(base_dir).resolve()

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.base_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except (OSError, UnicodeError, ValueError) as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e
