"""Layered configuration for ``localmail``: loading, ``--set`` overrides, display."""

from __future__ import annotations

from .display import display_config, require_section
from .loader import MailConfigLoader, get_config, get_default_config_path
from .overrides import TEXT_SETTINGS, apply_overrides

__all__ = [
    "TEXT_SETTINGS",
    "MailConfigLoader",
    "apply_overrides",
    "display_config",
    "get_config",
    "get_default_config_path",
    "require_section",
]
