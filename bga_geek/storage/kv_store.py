# bga_geek/storage/kv_store.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Protocol


class KeyValueStore(Protocol):
    """
    Synchronous, process-wide string-keyed store.

    Values must be JSON-serializable for the file-backed store.
    """

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStore:
    def __init__(self, data: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


def _write_json_atomic(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


class JsonFileStore:
    """
    Whole-file JSON store.

    The file is read once on construction and rewritten (temp file + replace)
    after every mutation. A missing file is an empty store; a corrupt one
    raises, so a bad cache file never gets silently overwritten.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        self._data: dict[str, Any] = {}
        if self.path.exists():
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"Store file is not a JSON object: {self.path}")
            self._data = data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        _write_json_atomic(self.path, self._data)

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            _write_json_atomic(self.path, self._data)

    def keys(self) -> list[str]:
        return list(self._data)
