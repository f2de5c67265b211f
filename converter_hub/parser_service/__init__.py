"""Rate sources.

Raw JSON for the currency catalog: rates from a web API and the bundled
country-name file.

Public entry points:
- api_clients.read_json(source): fetch and parse a JSON object
- config.load_source_config(): rates URL, countries file path, timeout
"""

from __future__ import annotations

__all__ = [
    "config",
    "api_clients",
]
