"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config, get_default_config_path

# Logging services
from ..adapters.logging.setup import init_logging

# Mail services
from ..adapters.mail.config import load_mail_config_from_dict
from ..adapters.mail.functions import build_mail_function

# Each adapter must structurally satisfy its Protocol; pyright checks these
# assignments at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory.mail import MailFunctionSpy
    from ..application.ports import (
        BuildMailFunction,
        DisplayConfig,
        GetConfig,
        InitLogging,
        LoadMailConfigFromDict,
    )

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_load_mail_config_from_dict: LoadMailConfigFromDict = load_mail_config_from_dict
    _assert_build_mail_function: BuildMailFunction = build_mail_function
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    load_mail_config_from_dict: LoadMailConfigFromDict
    build_mail_function: BuildMailFunction
    init_logging: InitLogging


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        load_mail_config_from_dict=load_mail_config_from_dict,
        build_mail_function=build_mail_function,
        init_logging=init_logging,
    )


def build_testing(*, spy: MailFunctionSpy | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        spy: Optional MailFunctionSpy capturing mail function calls. When
            None, a fresh spy is created. Pass your own to assert on calls.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        MailFunctionSpy,
        display_config_in_memory,
        get_config_in_memory,
        init_logging_in_memory,
        load_mail_config_from_dict_in_memory,
    )

    mail_spy = spy if spy is not None else MailFunctionSpy()

    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        load_mail_config_from_dict=load_mail_config_from_dict_in_memory,
        build_mail_function=mail_spy.build,
        init_logging=init_logging_in_memory,
    )


__all__ = [
    # Configuration
    "get_config",
    "get_default_config_path",
    "display_config",
    # Mail
    "load_mail_config_from_dict",
    "build_mail_function",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]
