"""Parse and apply ``--set SECTION.KEY=VALUE`` CLI overrides to Config."""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""Union of types that :func:`coerce_value` can produce."""

#: Settings taken verbatim. Mail program arguments (``-1``) and host names
#: (``null``) would otherwise be parsed as JSON.
TEXT_SETTINGS: frozenset[tuple[str, ...]] = frozenset(
    {
        ("mail", "extra_params"),
        ("mail", "sendmail_path"),
        ("mail", "sendmail_from"),
        ("mail", "smtp_host"),
    }
)


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """A single parsed configuration override."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue


def parse_override(raw: str) -> ConfigOverride:
    """Split ``SECTION.KEY[.SUBKEY...]=VALUE`` into a ConfigOverride.

    The first dot ends the section, the first ``=`` ends the dotted path.
    Values are coerced with :func:`coerce_value` unless the key is listed in
    :data:`TEXT_SETTINGS`.

    Raises:
        ValueError: If the string lacks ``=``, has no dot in the key, or has
            empty section/key components.

    Examples:
        >>> override = parse_override("mail.extra_params=-f%s -oi")
        >>> override.section, override.key_path, override.value
        ('mail', ('extra_params',), '-f%s -oi')

        >>> parse_override("mail.smtp_port=2525").value
        2525
        >>> parse_override("mail.smtp_host=null").value
        'null'
    """
    if "=" not in raw:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")

    path_part, value_str = raw.split("=", maxsplit=1)

    if "." not in path_part:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")

    section, *key_parts = path_part.split(".")

    if not section:
        raise ValueError(f"Invalid override {raw!r}: section name is empty")
    if not all(key_parts):
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")

    key_path = tuple(key_parts)
    value = value_str if (section, *key_path) in TEXT_SETTINGS else coerce_value(value_str)
    return ConfigOverride(section=section, key_path=key_path, value=value)


def coerce_value(raw: str) -> CoercedValue:
    """Parse ``raw`` as JSON, falling back to the raw string.

    Examples:
        >>> coerce_value("false")
        False
        >>> coerce_value("25")
        25
        >>> coerce_value("null")
        >>> coerce_value("-f%s")
        '-f%s'
        >>> coerce_value("")
        ''
    """
    if raw == "":
        return ""
    try:
        return orjson.loads(raw)
    except (orjson.JSONDecodeError, ValueError):
        return raw


def _nest_override(target: dict[str, dict[str, object]], override: ConfigOverride) -> None:
    """Write ``override`` into ``target``, creating intermediate dicts.

    Examples:
        >>> d: dict[str, dict[str, object]] = {}
        >>> _nest_override(d, ConfigOverride(section="mail", key_path=("smtp_port",), value=2525))
        >>> d["mail"]["smtp_port"]
        2525
    """
    node: dict[str, object] = target.setdefault(override.section, {})
    for part in override.key_path[:-1]:
        existing = node.setdefault(part, {})
        if not isinstance(existing, dict):
            msg = f"Expected dict at key {part!r}, got {type(existing).__name__}"
            raise TypeError(msg)
        node = cast("dict[str, object]", existing)
    node[override.key_path[-1]] = override.value


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Deep-merge CLI overrides into ``config``.

    Returns:
        New Config with the overrides applied, or ``config`` itself when
        there are none.

    Raises:
        ValueError: If any override string is malformed.

    Examples:
        >>> cfg = Config({"mail": {"smtp_port": 25}}, {})
        >>> apply_overrides(cfg, ("mail.smtp_port=2525",))["mail"]["smtp_port"]
        2525
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    if not raw_overrides:
        return config

    overrides: dict[str, dict[str, object]] = {}
    for raw in raw_overrides:
        _nest_override(overrides, parse_override(raw))

    return config.with_overrides(overrides)


__all__ = [
    "CoercedValue",
    "TEXT_SETTINGS",
    "ConfigOverride",
    "parse_override",
    "coerce_value",
    "apply_overrides",
]
