from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from .exceptions import CurrencyNotFoundError
from .models import SelectionToggleEntry
from .utils import matches_search, normalize_code


class SelectionFilterModel:
    """On/off toggle list used while the user picks currencies to track.

    Built from a snapshot (usually ``TrackedSet.available_currencies``) and
    independent of it afterwards. Toggling changes the backing list only;
    call ``filter`` again to see the new flags in ``filtered``.
    """

    def __init__(self, currencies: Iterable[SelectionToggleEntry]) -> None:
        self._currencies: list[SelectionToggleEntry] = [replace(e) for e in currencies]
        self._filtered: list[SelectionToggleEntry] = [replace(e) for e in self._currencies]

    @property
    def filtered(self) -> tuple[SelectionToggleEntry, ...]:
        return tuple(self._filtered)

    @property
    def entries(self) -> tuple[SelectionToggleEntry, ...]:
        return tuple(self._currencies)

    def filter(self, search_text: str) -> None:
        self._filtered = [
            replace(e)
            for e in self._currencies
            if matches_search(e.code, e.country, search_text or "")
        ]

    def set_on(self, code: str) -> None:
        self._find(code).on = True

    def set_off(self, code: str) -> None:
        self._find(code).on = False

    def selected_codes(self) -> list[str]:
        return [e.code for e in self._currencies if e.on]

    def _find(self, code: str) -> SelectionToggleEntry:
        c = normalize_code(code)
        for entry in self._currencies:
            if entry.code == c:
                return entry
        raise CurrencyNotFoundError(c)
