"""Pytest configuration: repo root on path, shared fakes and fixtures."""

import json
import sys
from pathlib import Path

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from converter_hub.core.currencies import CurrencyCatalog  # noqa: E402
from converter_hub.infra.database import JsonSelectionStore  # noqa: E402
from converter_hub.infra.settings import SettingsLoader  # noqa: E402
from converter_hub.parser_service.api_clients import BaseRateSource  # noqa: E402

COUNTRIES = {
    "rates": {
        "USD": "United States",
        "EUR": "European Union",
        "GBP": "United Kingdom",
        "RUB": "Russia",
        "UAH": "Ukraine",
        "AUD": "Australia",
        "JPY": "Japan",
        "SEK": "Sweden",
    }
}

RATES = {
    "base": "USD",
    "rates": {
        "EUR": 0.9,
        "GBP": 0.8,
        "RUB": 90.0,
        "UAH": 40.0,
        "JPY": 150.0,
        "SEK": 10.5,
        "AUD": 1.5,
        "XAU": 0.0005,
        "CNH": 7.2,
    },
}


class StaticSource(BaseRateSource):
    """In-memory source returning a fixed payload."""

    def __init__(self, payload, location: str = "memory://static") -> None:
        self.location = location
        self.payload = payload

    def fetch(self) -> bytes:
        if isinstance(self.payload, bytes):
            return self.payload
        return json.dumps(self.payload).encode("utf-8")


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path):
    """Point the settings singleton at a throwaway root for every test."""
    SettingsLoader.reset()
    SettingsLoader(root=tmp_path)
    yield
    SettingsLoader.reset()


@pytest.fixture
def catalog() -> CurrencyCatalog:
    return CurrencyCatalog.build(StaticSource(RATES), StaticSource(COUNTRIES))


@pytest.fixture
def store(tmp_path) -> JsonSelectionStore:
    return JsonSelectionStore(tmp_path / "selection.json")
