from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any


class SettingsLoader:
    """Singleton settings provider.

    Reads pyproject.toml [tool.converter_hub] if present.
    Provides defaults otherwise.
    """

    _instance: "SettingsLoader | None" = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):  # noqa: D401 - singleton boilerplate
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, root: Path | None = None) -> None:
        if getattr(self, "_initialized", False):
            return
        self._initialized = True
        self._root = root or Path(__file__).resolve().parents[2]
        self._config: dict[str, Any] = {}
        self.reload()

    @classmethod
    def reset(cls) -> None:
        """Drop the cached instance so the next call re-reads configuration."""
        with cls._lock:
            cls._instance = None

    def _defaults(self) -> dict[str, Any]:
        root = self._root
        package_dir = Path(__file__).resolve().parents[1]
        return {
            "data_dir": str(root / "data"),
            "logs_dir": str(root / "logs"),
            "log_file": str(root / "logs" / "converter.log"),
            "log_level": "INFO",
            "console_log_level": "WARNING",
            "log_rotation_bytes": 1_048_576,  # 1MB
            "log_backup_count": 5,
            "rates_url": "https://api.frankfurter.app/latest",
            "countries_file": str(package_dir / "data" / "countries.json"),
            "selection_file": str(root / "data" / "selection.json"),
            "request_timeout": 10.0,
            "default_currencies": ["USD", "EUR", "RUB", "UAH", "GBP", "AUD"],
        }

    def reload(self) -> None:
        cfg = self._defaults()
        pyproject = self._root / "pyproject.toml"
        if pyproject.exists():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                section = data.get("tool", {}).get("converter_hub", {})
                if isinstance(section, dict):
                    for k, v in section.items():
                        cfg[k] = v
            except (OSError, tomllib.TOMLDecodeError):
                # Malformed config: stick to defaults
                pass
        self._config = cfg

    def ensure_dirs(self) -> None:
        Path(self._config["data_dir"]).mkdir(parents=True, exist_ok=True)
        Path(self._config["logs_dir"]).mkdir(parents=True, exist_ok=True)

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._config.get(key, default)
