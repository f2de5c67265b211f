"""Record types shared by the converter models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CurrencyInfo:
    country: str
    rate: float  # units of this currency per 1 unit of the feed's base


@dataclass(slots=True)
class TrackedEntry:
    """A currency the user tracks.

    ``display_value`` is the catalog rate rescaled by the last conversion,
    i.e. the amount of this currency equivalent to what the user last typed.
    """

    code: str
    country: str
    display_value: float


@dataclass(slots=True)
class SelectionToggleEntry:
    country: str
    code: str
    on: bool


@dataclass(frozen=True, slots=True)
class PresentedRow:
    country: str
    code: str
    formatted_value: str
