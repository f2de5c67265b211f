from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from .database import SelectionStore

logger = logging.getLogger("converter_hub.storage")


class PersistenceWriter:
    """Serial background queue for selection-store writes.

    A single worker applies writes in the order they were issued. Failures
    are logged and never reach the caller; the in-memory model does not
    wait for durability.
    """

    def __init__(self, store: SelectionStore) -> None:
        self._store = store
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="converter-persistence"
        )
        self._closed = False

    @property
    def store(self) -> SelectionStore:
        return self._store

    def insert(self, code: str) -> Future[None] | None:
        return self._submit("insert", code)

    def delete(self, code: str) -> Future[None] | None:
        return self._submit("delete", code)

    def _submit(self, op: str, code: str) -> Future[None] | None:
        if self._closed:
            logger.warning("Writer closed, %s of %s not persisted", op, code)
            return None
        return self._executor.submit(self._apply, op, code)

    def _apply(self, op: str, code: str) -> None:
        try:
            if op == "insert":
                self._store.insert(code)
            else:
                self._store.delete(code)
            logger.debug("Persisted %s %s", op, code)
        except Exception:  # noqa: BLE001 - best-effort durability
            logger.exception("Failed to persist %s of %s", op, code)

    def flush(self) -> None:
        """Block until every write issued so far has been applied."""
        if self._closed:
            return
        self._executor.submit(lambda: None).result()

    def close(self) -> None:
        """Drain pending writes and stop the worker. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
