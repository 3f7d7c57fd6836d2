"""Installed ``localmail`` command.

The adapters never import :mod:`localmail.composition`; this module lives at
package level so it can hand the production wiring (subprocess sendmail on
POSIX hosts, SMTP relay on Windows) to the CLI.
"""

from __future__ import annotations

from collections.abc import Sequence

from .adapters.cli.main import main as run_cli
from .composition import build_production


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI against the real mail program and return its exit code.

    ``argv`` defaults to ``sys.argv[1:]`` via Click.
    """
    return run_cli(argv, services_factory=build_production)


__all__ = ["main"]
