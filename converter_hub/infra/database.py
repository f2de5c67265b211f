from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Protocol

from ..core.exceptions import StorageError
from ..core.utils import normalize_code
from .settings import SettingsLoader

logger = logging.getLogger("converter_hub.storage")


class SelectionStore(Protocol):
    """Durable bag of tracked currency codes."""

    def list_all(self) -> list[str]: ...

    def insert(self, code: str) -> None: ...

    def delete(self, code: str) -> bool: ...


def _atomic_write_json(path: Path, obj: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(obj, ensure_ascii=False, indent=2), encoding="utf-8")
    os.replace(tmp, path)


class JsonSelectionStore:
    """Selected currencies kept as a JSON list of codes.

    One record per code and nothing else: values are always recomputed
    from the catalog on load.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            path = SettingsLoader().get("selection_file")
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> list[str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}") from exc
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Corrupted JSON at {self._path}: {exc}") from exc
        if not isinstance(data, list) or not all(isinstance(c, str) for c in data):
            raise StorageError(f"Expected a list of codes at {self._path}")
        return data

    def list_all(self) -> list[str]:
        with self._lock:
            return self._read()

    def insert(self, code: str) -> None:
        c = normalize_code(code)
        with self._lock:
            rows = self._read()
            if c in rows:
                logger.debug("Selection already contains %s", c)
                return
            rows.append(c)
            _atomic_write_json(self._path, rows)

    def delete(self, code: str) -> bool:
        """Remove ``code``; returns False if it was not stored."""
        c = normalize_code(code)
        with self._lock:
            rows = self._read()
            if c not in rows:
                return False
            rows.remove(c)
            _atomic_write_json(self._path, rows)
            return True
