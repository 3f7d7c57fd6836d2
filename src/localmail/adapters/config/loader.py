"""Layered configuration loader for the ``[mail]`` and ``[lib_log_rich]`` sections.

Configuration is read once per ``(profile, start_dir)`` and reused for the
process lifetime; :meth:`MailConfigLoader.cache_clear` forces a re-read.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lib_layered_config import (
    DEFAULT_MAX_PROFILE_LENGTH,
    Config,
    read_config,
    validate_profile_name,
)

from localmail import __init__conf__


def validate_profile(profile: str, max_length: int | None = None) -> None:
    """Validate a profile name with lib_layered_config's rules.

    Raises:
        ValueError: If the profile name is empty, too long, contains invalid
            characters, or attempts path traversal.

    Examples:
        >>> validate_profile("production")

        >>> validate_profile("../etc/passwd")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        ValueError: profile contains invalid characters: ../etc/passwd
    """
    validate_profile_name(profile, max_length=max_length if max_length is not None else DEFAULT_MAX_PROFILE_LENGTH)


@lru_cache(maxsize=1)
def get_default_config_path() -> Path:
    """Return the path to the bundled ``defaultconfig.toml``.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).parent / "defaultconfig.toml"


@lru_cache(maxsize=4)
def _read_layers(profile: str | None, start_dir: str | None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


class MailConfigLoader:
    """Callable returning the merged configuration, cached per profile.

    Sources in precedence order: defaults -> app -> host -> user -> dotenv ->
    env. Environment variables take the ``LOCALMAIL___MAIL__EXTRA_PARAMS``
    form. A profile inserts a ``profile/<name>/`` directory into every path.

    Example:
        >>> config = get_config()
        >>> config.get("mail", default={}).get("extra_params")
        '-f%s'
    """

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config:
        if profile is not None:
            validate_profile(profile)
        return _read_layers(profile, start_dir)

    def cache_clear(self) -> None:
        """Drop cached configuration so the next call re-reads every layer."""
        _read_layers.cache_clear()


get_config = MailConfigLoader()


__all__ = [
    "MailConfigLoader",
    "get_config",
    "get_default_config_path",
    "validate_profile",
]
