"""Generic key-value stores holding whole serialized collections."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from microcredit.exceptions import StorageError


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal string key-value store the repositories persist into."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store, used by tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileKeyValueStore:
    """One JSON file per key inside a directory.

    Every ``set`` rewrites the key's file completely; there is no
    partial update and no locking between processes.
    """

    def __init__(self, data_dir: str | Path) -> None:
        """Initialize the store.

        Parameters
        ----------
        data_dir : str | Path
            Directory holding the ``<key>.json`` files. Created if missing.
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except OSError as exc:
            raise StorageError(f"Cannot read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(value)
        except OSError as exc:
            raise StorageError(f"Cannot write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot delete {path}: {exc}") from exc
