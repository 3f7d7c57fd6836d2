"""Static package metadata surfaced to CLI commands and documentation.

Kept as plain constants so the CLI can print version and layered-config
identifiers without importing packaging machinery at runtime.
"""

from __future__ import annotations

name = "localmail"
title = "Deliver composed email through the host's local mail facility"
version = "1.0.0"
homepage = "https://pypi.org/project/localmail/"
author = "localmail maintainers"
author_email = "maintainers@localmail.invalid"
shell_command = "localmail"

#: Vendor, application, and slug identifiers used by lib_layered_config to
#: derive platform-specific configuration directories.
LAYEREDCONF_VENDOR = "localmail"
LAYEREDCONF_APP = "localmail"
LAYEREDCONF_SLUG = "localmail"


def print_info() -> None:
    """Print the summarised metadata block used by the ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for localmail:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
