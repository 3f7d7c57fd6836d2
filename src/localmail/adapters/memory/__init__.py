"""In-memory adapter implementations for testing.

Provides lightweight implementations of the application ports that operate
entirely in memory -- no filesystem, no mail program, no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration and logging adapters
    * :mod:`.mail` - In-memory mail adapters (MailFunctionSpy class)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import (
    display_config_in_memory,
    get_config_in_memory,
    init_logging_in_memory,
)
from .mail import (
    MailFunctionSpy,
    load_mail_config_from_dict_in_memory,
)

# Static conformance assertions
if TYPE_CHECKING:
    from localmail.application.ports import (
        DisplayConfig,
        GetConfig,
        InitLogging,
        LoadMailConfigFromDict,
        MailFunction,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_load_mail_config: LoadMailConfigFromDict = load_mail_config_from_dict_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_mail_function: MailFunction = MailFunctionSpy()

__all__ = [
    "MailFunctionSpy",
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
    "load_mail_config_from_dict_in_memory",
]
