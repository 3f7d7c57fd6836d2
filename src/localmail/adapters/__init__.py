"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.cli` - rich-click command line interface
    * :mod:`.config` - Configuration loading and display via lib_layered_config
    * :mod:`.events` - In-process send event dispatcher
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.mail` - Local mail transport, OS mail functions, plugins
    * :mod:`.memory` - In-memory adapters used by the testing composition
"""

from __future__ import annotations

__all__: list[str] = []
