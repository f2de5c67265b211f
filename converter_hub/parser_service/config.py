from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from ..infra.settings import SettingsLoader


@dataclass(frozen=True)
class SourceConfig:
    # Rates endpoint ({"base": ..., "rates": {...}})
    RATES_URL: str

    # Bundled country file ({"rates": {"USD": "United States", ...}})
    COUNTRIES_FILE_PATH: str

    # Network
    REQUEST_TIMEOUT: float


def load_source_config() -> SourceConfig:
    """Load rate source configuration from env/.env and project settings.

    Environment variables override .env; SettingsLoader provides defaults
    for the rates URL, countries file and HTTP timeout.
    """
    # Load .env once per process (non-overriding), if present
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(dotenv_path=path, override=False)
    settings = SettingsLoader()
    return SourceConfig(
        RATES_URL=os.getenv("CONVERTER_RATES_URL", str(settings.get("rates_url"))),
        COUNTRIES_FILE_PATH=os.getenv(
            "CONVERTER_COUNTRIES_FILE", str(settings.get("countries_file"))
        ),
        REQUEST_TIMEOUT=float(
            os.getenv("CONVERTER_HTTP_TIMEOUT", settings.get("request_timeout", 10))
        ),
    )
