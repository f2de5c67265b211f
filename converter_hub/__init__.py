"""Currency converter model: catalog, tracked set and selection list."""

from __future__ import annotations

__version__ = "0.1.0"
