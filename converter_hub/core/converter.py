"""The user's tracked currencies and proportional conversion between them.

``TrackedSet`` keeps two views of the same entries:

- ``tracked``: code -> TrackedEntry, the working set that gets persisted;
- ``ordered``: the entries sorted by code and narrowed by the current search
  text, which is what table rows index into.

Every mutation rebuilds ``ordered`` before returning, so row indexes are
always valid for the current state. Persistence writes go through a serial
background writer and are not awaited.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from ..decorators import log_action
from ..infra.database import SelectionStore
from ..infra.queue import PersistenceWriter
from .currencies import CurrencyCatalog
from .exceptions import (
    AlreadyTrackedError,
    CurrencyNotFoundError,
    DivisionByZeroError,
    IndexOutOfRangeError,
    NotTrackedError,
    StorageError,
)
from .models import PresentedRow, SelectionToggleEntry, TrackedEntry
from .utils import format_value, matches_search, normalize_code, parse_value

logger = logging.getLogger("converter_hub.converter")

DEFAULT_CODES: tuple[str, ...] = ("USD", "EUR", "RUB", "UAH", "GBP", "AUD")


class TrackedSet:
    """Currencies the user chose to follow, with their live amounts.

    Not thread-safe: a single owner drives all reads and mutations.
    """

    def __init__(
        self,
        catalog: CurrencyCatalog,
        store: SelectionStore,
        *,
        default_codes: Iterable[str] = DEFAULT_CODES,
        writer: PersistenceWriter | None = None,
    ) -> None:
        self._catalog = catalog
        self._writer = writer or PersistenceWriter(store)
        self._tracked: dict[str, TrackedEntry] = {}
        self._ordered: list[TrackedEntry] = []
        self._search_text = ""
        try:
            persisted = store.list_all()
        except StorageError:
            logger.exception("Cannot read saved selection, starting from defaults")
            self.load((), default_codes, persist=False)
        else:
            self.load(persisted, default_codes)

    # Views
    @property
    def catalog(self) -> CurrencyCatalog:
        return self._catalog

    @property
    def tracked(self) -> Mapping[str, TrackedEntry]:
        return MappingProxyType(self._tracked)

    @property
    def ordered(self) -> tuple[TrackedEntry, ...]:
        return tuple(self._ordered)

    @property
    def search_text(self) -> str:
        return self._search_text

    @property
    def count(self) -> int:
        """Number of rows currently visible (after filtering)."""
        return len(self._ordered)

    def tracked_codes(self) -> list[str]:
        return sorted(self._tracked)

    def __len__(self) -> int:
        return len(self._tracked)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._tracked

    @property
    def available_currencies(self) -> list[SelectionToggleEntry]:
        """The whole catalog with ``on`` set for tracked codes, sorted by code."""
        return [
            SelectionToggleEntry(country=info.country, code=code, on=code in self._tracked)
            for code, info in sorted(self._catalog.items())
        ]

    # Lifecycle
    def load(
        self,
        persisted_codes: Iterable[str],
        default_codes: Iterable[str] = (),
        *,
        persist: bool = True,
    ) -> None:
        """Rebuild the working set from persisted codes.

        On first run (nothing persisted) the default codes are tracked and,
        unless ``persist`` is False, written to the store.
        """
        self._tracked.clear()
        persisted = [normalize_code(c) for c in persisted_codes]
        for code in persisted:
            if not self._track_from_catalog(code):
                logger.warning("Persisted currency %s is not in the catalog, skipped", code)

        if not persisted:
            for code in (normalize_code(c) for c in default_codes):
                if self._track_from_catalog(code) and persist:
                    self._writer.insert(code)
            logger.info("First run: seeded %s", ", ".join(sorted(self._tracked)))

        self._rebuild_ordered()

    def flush(self) -> None:
        """Wait until pending persistence writes are applied."""
        self._writer.flush()

    def close(self) -> None:
        self._writer.close()

    def __enter__(self) -> "TrackedSet":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Mutations
    @log_action("CONVERT")
    def convert(self, code: str, value: Any) -> None:
        """Set ``code`` to ``value`` and rescale every tracked currency.

        Raises:
            NotTrackedError: ``code`` is not tracked
            DivisionByZeroError: the catalog rate of ``code`` is zero
            ConverterError: ``value`` is not a finite number
        """
        self._convert(normalize_code(code), parse_value(value))

    def _convert(self, code: str, value: float) -> None:
        entry = self._tracked.get(code)
        if entry is None:
            raise NotTrackedError(code)
        anchor = self._rate(code)
        if anchor == 0:
            raise DivisionByZeroError(code)
        ratio = value / anchor
        for other in self._tracked.values():
            other.display_value = self._rate(other.code) * ratio
        entry.display_value = value

    @log_action("ADD")
    def add(self, code: str) -> None:
        """Start tracking ``code`` at the same scale as the existing entries.

        Raises:
            CurrencyNotFoundError: ``code`` is not in the catalog
            AlreadyTrackedError: ``code`` is already tracked
        """
        c = normalize_code(code)
        if c not in self._catalog:
            raise CurrencyNotFoundError(c)
        if c in self._tracked:
            raise AlreadyTrackedError(c)

        anchor = next(
            (e for _, e in sorted(self._tracked.items()) if self._rate(e.code) != 0),
            None,
        )
        self._track_from_catalog(c)
        if anchor is not None:
            self._convert(anchor.code, anchor.display_value)

        self._rebuild_ordered()
        self._writer.insert(c)

    @log_action("DELETE")
    def delete(self, code: str) -> None:
        """Stop tracking ``code``.

        Raises:
            NotTrackedError: ``code`` is not tracked; nothing changes
        """
        c = normalize_code(code)
        if c not in self._tracked:
            raise NotTrackedError(c)
        del self._tracked[c]
        self._rebuild_ordered()
        self._writer.delete(c)

    # Search and rows
    def filter(self, search_text: str) -> None:
        """Narrow the visible rows; never touches the tracked set itself."""
        self._search_text = search_text or ""
        self._rebuild_ordered()

    def present(self, index: int) -> PresentedRow:
        """Row ``index`` of the visible list, value formatted for display."""
        if not 0 <= index < len(self._ordered):
            raise IndexOutOfRangeError(index, len(self._ordered))
        entry = self._ordered[index]
        return PresentedRow(
            country=entry.country,
            code=entry.code,
            formatted_value=format_value(entry.display_value),
        )

    def get_rate(self, code: str) -> str:
        """Formatted value of ``code`` if it is visible under the current filter."""
        c = normalize_code(code)
        for index, entry in enumerate(self._ordered):
            if entry.code == c:
                return self.present(index).formatted_value
        raise NotTrackedError(c)

    # Internals
    def _rate(self, code: str) -> float:
        info = self._catalog.get(code)
        if info is None:
            raise CurrencyNotFoundError(code)
        return info.rate

    def _track_from_catalog(self, code: str) -> bool:
        info = self._catalog.get(code)
        if info is None:
            return False
        self._tracked[code] = TrackedEntry(
            code=code, country=info.country, display_value=info.rate
        )
        return True

    def _rebuild_ordered(self) -> None:
        text = self._search_text
        self._ordered = [
            entry
            for _, entry in sorted(self._tracked.items())
            if matches_search(entry.code, entry.country, text)
        ]
