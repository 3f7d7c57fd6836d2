"""Shared pytest fixtures for transport, CLI, and module-entry tests.

All shared fixtures live here; tests receive them through pytest's conftest
discovery. Fixture names read as plain English.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from localmail.adapters.events import SimpleEventDispatcher
from localmail.adapters.mail.transport import MailTransport
from localmail.adapters.memory import MailFunctionSpy
from localmail.domain.message import Message

if TYPE_CHECKING:
    from localmail.composition import AppServices

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use ``result.stdout`` for clean output (e.g., JSON parsing) so log lines
    on stderr do not contaminate it.
    """
    return CliRunner()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests.

    Example:
        def test_info(cli_runner: CliRunner, production_factory: Callable[[], AppServices]) -> None:
            result = cli_runner.invoke(cli, ["info"], obj=production_factory)
            assert result.exit_code == 0
    """
    from localmail.composition import build_production

    return build_production


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test.

    Use this whenever a test reads or mutates the global
    ``lib_cli_exit_tools.config`` traceback flags.
    """
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before each test.

    Only clears before, not after, so a monkeypatched ``get_config`` (which
    lacks ``cache_clear``) cannot break teardown.
    """
    from localmail.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts without filesystem I/O.

    Example:
        def test_mail_section(config_factory: Callable[[dict[str, Any]], Config]) -> None:
            config = config_factory({"mail": {"extra_params": "-f%s -oi"}})
            assert config.get("mail.extra_params") == "-f%s -oi"
    """

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


def _services_with_config(
    get_config: Callable[..., Config],
    *,
    spy: MailFunctionSpy | None = None,
) -> AppServices:
    """Production services with ``get_config`` (and optionally the mail function) replaced."""
    from localmail.adapters.memory import load_mail_config_from_dict_in_memory
    from localmail.composition import AppServices, build_production

    prod = build_production()
    return AppServices(
        get_config=get_config,
        display_config=prod.display_config,
        load_mail_config_from_dict=(
            load_mail_config_from_dict_in_memory if spy is not None else prod.load_mail_config_from_dict
        ),
        build_mail_function=spy.build if spy is not None else prod.build_mail_function,
        init_logging=prod.init_logging,
    )


@pytest.fixture
def inject_config(
    clear_config_cache: None,
) -> Callable[[Config], Callable[[], AppServices]]:
    """Return a factory that provides services with an injected Config.

    Only the I/O boundary (``get_config``) is replaced; the Config object and
    every other adapter stay real.

    Example:
        def test_config_display(cli_runner, config_factory, inject_config) -> None:
            factory = inject_config(config_factory({"section": {"key": "value"}}))
            result = cli_runner.invoke(cli, ["config"], obj=factory)
            assert "key" in result.output
    """

    def _inject(config: Config) -> Callable[[], AppServices]:
        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        services = _services_with_config(_fake_get_config)
        return lambda: services

    return _inject


@pytest.fixture
def inject_config_with_profile_capture(
    clear_config_cache: None,
) -> Callable[[Config, list[str | None]], Callable[[], AppServices]]:
    """Return a factory whose get_config records the profile it receives.

    Example:
        def test_profile_passed(cli_runner, config_factory, inject_config_with_profile_capture) -> None:
            captured: list[str | None] = []
            factory = inject_config_with_profile_capture(config_factory({}), captured)
            cli_runner.invoke(cli, ["--profile", "staging", "config"], obj=factory)
            assert captured == ["staging"]
    """

    def _inject(config: Config, captured_profiles: list[str | None]) -> Callable[[], AppServices]:
        def _capturing_get_config(*, profile: str | None = None, **_kwargs: Any) -> Config:
            captured_profiles.append(profile)
            return config

        services = _services_with_config(_capturing_get_config)
        return lambda: services

    return _inject


@dataclass
class MailCliContext:
    """Container for send-mail CLI test setup.

    Attributes:
        factory: Callable that returns wired AppServices for CLI invocation.
        spy: MailFunctionSpy capturing every mail function call.
    """

    factory: Callable[[], Any]
    spy: MailFunctionSpy


@pytest.fixture
def mail_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], MailCliContext]:
    """Create send-mail CLI test context with configured factory and spy.

    Takes the ``[mail]`` section contents and returns a context whose mail
    function is a spy, so no mail program is ever started.

    Example:
        def test_send(cli_runner, mail_cli_context) -> None:
            ctx = mail_cli_context({"extra_params": "-f%s"})
            result = cli_runner.invoke(
                cli, ["send-mail", "--to", "a@b.com", "--from", "c@d.com", "--subject", "Hi"],
                obj=ctx.factory,
            )
            assert ctx.spy.calls[0]["subject"] == "Hi"
    """

    def _create(mail_data: dict[str, Any]) -> MailCliContext:
        spy = MailFunctionSpy()
        config = Config({"mail": mail_data}, {})

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        services = _services_with_config(_fake_get_config, spy=spy)
        return MailCliContext(factory=lambda: services, spy=spy)

    return _create


@pytest.fixture
def config_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Create a services factory from a raw config dict."""

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        config = Config(config_data, {})

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        services = _services_with_config(_fake_get_config)
        return lambda: services

    return _create


@pytest.fixture
def mail_spy() -> MailFunctionSpy:
    """Provide a fresh mail function spy."""
    return MailFunctionSpy()


@pytest.fixture
def dispatcher() -> SimpleEventDispatcher:
    """Provide a dispatcher with no listeners bound."""
    return SimpleEventDispatcher()


@pytest.fixture
def posix_transport(dispatcher: SimpleEventDispatcher, mail_spy: MailFunctionSpy) -> MailTransport:
    """A transport behaving as on a LF host, wired to ``mail_spy``."""
    return MailTransport(dispatcher, mail_spy, line_ending="\n")


@pytest.fixture
def windows_transport(dispatcher: SimpleEventDispatcher, mail_spy: MailFunctionSpy) -> MailTransport:
    """A transport behaving as on a CRLF host, wired to ``mail_spy``."""
    return MailTransport(dispatcher, mail_spy, line_ending="\r\n")


@pytest.fixture
def simple_message() -> Message:
    """A plain-text message with one recipient in each of To, Cc, and Bcc."""
    return Message(
        subject="Quarterly report",
        body="Numbers attached.\r\n",
        from_={"alice@example.com": "Alice"},
        to="bob@example.com",
        cc="carol@example.com",
        bcc="dave@example.com",
    )
