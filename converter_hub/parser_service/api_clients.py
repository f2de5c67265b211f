from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import requests

from ..core.exceptions import SourceUnavailableError
from .config import SourceConfig

logger = logging.getLogger("converter_hub.sources")


class BaseRateSource(ABC):
    """A place raw JSON can be loaded from (web address or local file)."""

    location: str

    @abstractmethod
    def fetch(self) -> bytes:
        """Return the raw payload or raise SourceUnavailableError."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r})"


class WebRateSource(BaseRateSource):
    def __init__(self, url: str, timeout: float = 10.0) -> None:
        self.location = url
        self.timeout = float(timeout)

    def fetch(self) -> bytes:
        t0 = time.perf_counter()
        try:
            resp = requests.get(self.location, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise SourceUnavailableError(f"network error ({self.location}): {exc}") from exc
        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        logger.debug(
            "GET %s -> HTTP %s in %d ms", self.location, resp.status_code, elapsed_ms
        )
        if resp.status_code != 200:
            raise SourceUnavailableError(f"HTTP {resp.status_code} from {self.location}")
        return resp.content


class FileRateSource(BaseRateSource):
    def __init__(self, path: str | Path) -> None:
        self.location = str(path)

    def fetch(self) -> bytes:
        try:
            return Path(self.location).read_bytes()
        except OSError as exc:
            raise SourceUnavailableError(f"cannot read {self.location}: {exc}") from exc


def read_json(source: BaseRateSource) -> dict[str, Any]:
    """Fetch ``source`` and parse it as a JSON object.

    Raises:
        SourceUnavailableError: fetch failed, payload is not JSON, or the top
            level is not an object.
    """
    raw = source.fetch()
    try:
        data = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SourceUnavailableError(f"malformed JSON from {source.location}: {exc}") from exc
    if not isinstance(data, dict):
        raise SourceUnavailableError(f"expected a JSON object from {source.location}")
    return data


def sources_from_config(cfg: SourceConfig) -> tuple[WebRateSource, FileRateSource]:
    """Build the (rates, countries) source pair described by ``cfg``."""
    return (
        WebRateSource(cfg.RATES_URL, timeout=cfg.REQUEST_TIMEOUT),
        FileRateSource(cfg.COUNTRIES_FILE_PATH),
    )
