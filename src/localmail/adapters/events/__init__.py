"""Events adapter - synchronous listener dispatch.

Contents:
    * :class:`.dispatcher.SimpleEventDispatcher` - In-process dispatcher for send events
"""

from __future__ import annotations

from .dispatcher import SimpleEventDispatcher

__all__ = ["SimpleEventDispatcher"]
