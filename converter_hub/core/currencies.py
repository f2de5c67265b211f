from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from ..parser_service.api_clients import BaseRateSource, read_json
from .exceptions import SourceUnavailableError
from .models import CurrencyInfo
from .utils import normalize_code

logger = logging.getLogger("converter_hub.catalog")

# Codes the rates feed returns but the country table and UI do not cover:
# precious metals, offshore yuan and a few micro-territory currencies.
UNSUPPORTED_CODES: frozenset[str] = frozenset(
    {"CNH", "GGP", "IMP", "JEP", "XAG", "XAU", "XPD", "XPF", "XPT", "ZMK", "SHP"}
)

NO_COUNTRY = "No Country!"


class CurrencyCatalog:
    """Every known currency: ISO 4217 code -> country name and rate.

    Built once from a rates feed plus the bundled country-name file and
    read-only afterwards. Use ``CurrencyCatalog.build`` rather than the
    constructor when loading from sources.
    """

    def __init__(self, base: str, currencies: Mapping[str, CurrencyInfo]) -> None:
        self._base = normalize_code(base)
        self._currencies: Mapping[str, CurrencyInfo] = MappingProxyType(
            dict(currencies)
        )

    @classmethod
    def build(
        cls, rates_source: BaseRateSource, country_source: BaseRateSource
    ) -> "CurrencyCatalog":
        """Fetch rates and country names and assemble the catalog.

        Raises:
            SourceUnavailableError: either source failed, or a payload is
                missing ``base``/``rates`` or has values of the wrong type.
        """
        payload = read_json(rates_source)
        base, rates = _parse_rates(payload, rates_source.location)
        rates[base] = 1.0

        for code in UNSUPPORTED_CODES:
            rates.pop(code, None)

        countries = _parse_countries(read_json(country_source), country_source.location)
        currencies = {
            code: CurrencyInfo(country=countries.get(code, NO_COUNTRY), rate=rate)
            for code, rate in rates.items()
        }
        missing = sorted(c for c, info in currencies.items() if info.country == NO_COUNTRY)
        if missing:
            logger.warning("No country name for: %s", ", ".join(missing))
        logger.info("Catalog built: base=%s, %d currencies", base, len(currencies))
        return cls(base, currencies)

    @property
    def base(self) -> str:
        return self._base

    def get(self, code: str) -> CurrencyInfo | None:
        return self._currencies.get(normalize_code(code))

    def codes(self) -> list[str]:
        """Return all codes sorted ascending."""
        return sorted(self._currencies)

    def items(self) -> Iterator[tuple[str, CurrencyInfo]]:
        return iter(self._currencies.items())

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_code(code) in self._currencies

    def __len__(self) -> int:
        return len(self._currencies)

    def __repr__(self) -> str:
        return f"CurrencyCatalog(base={self._base!r}, size={len(self)})"


def _parse_rates(payload: dict[str, Any], where: str) -> tuple[str, dict[str, float]]:
    base = payload.get("base")
    if not isinstance(base, str) or not base.strip():
        raise SourceUnavailableError(f"'base' field missing in {where}")
    raw = payload.get("rates")
    if not isinstance(raw, dict):
        raise SourceUnavailableError(f"'rates' object missing in {where}")
    rates: dict[str, float] = {}
    for code, rate in raw.items():
        # bool is an int subclass but never a valid rate
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise SourceUnavailableError(f"non-numeric rate for {code!r} in {where}")
        rates[normalize_code(code)] = float(rate)
    return normalize_code(base), rates


def _parse_countries(payload: dict[str, Any], where: str) -> dict[str, str]:
    raw = payload.get("rates")
    if not isinstance(raw, dict):
        raise SourceUnavailableError(f"'rates' object missing in {where}")
    countries: dict[str, str] = {}
    for code, name in raw.items():
        if not isinstance(name, str):
            raise SourceUnavailableError(f"country for {code!r} is not a string in {where}")
        countries[normalize_code(code)] = name
    return countries
