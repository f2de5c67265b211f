"""Startup wiring for the converter model.

Builds the catalog from the configured sources, opens the selection store
and returns a ready TrackedSet for the UI layer.
"""

from __future__ import annotations

from pathlib import Path

from .core.converter import TrackedSet
from .core.currencies import CurrencyCatalog
from .core.selection import SelectionFilterModel
from .infra.database import JsonSelectionStore
from .infra.settings import SettingsLoader
from .logging_config import configure_logging
from .parser_service.api_clients import sources_from_config
from .parser_service.config import load_source_config


def start_converter(selection_file: str | Path | None = None) -> TrackedSet:
    """Build catalog and tracked set in one go.

    Raises:
        SourceUnavailableError: the catalog could not be built; retry from
            scratch, nothing partial is returned.
    """
    logger = configure_logging()
    settings = SettingsLoader()
    settings.ensure_dirs()

    cfg = load_source_config()
    rates_source, country_source = sources_from_config(cfg)
    logger.info("Loading rates from %s...", cfg.RATES_URL)
    catalog = CurrencyCatalog.build(rates_source, country_source)

    store = JsonSelectionStore(selection_file)
    defaults = settings.get("default_currencies") or ()
    return TrackedSet(catalog, store, default_codes=defaults)


def choose_currency_model(tracked: TrackedSet) -> SelectionFilterModel:
    """Snapshot the catalog into a toggle list for the picker screen."""
    return SelectionFilterModel(tracked.available_currencies)
