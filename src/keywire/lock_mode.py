from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select locking behavior around container resolution.

    Resolution itself is single-threaded. Use ``THREAD`` when one container is
    shared between threads so that singleton construction, forward-reference
    bookkeeping and cache writes happen under one mutual-exclusion boundary.
    """

    THREAD = "thread"
    """Hold a re-entrant ``threading.RLock`` for the whole of every ``get`` call."""

    NONE = "none"
    """Disable locking. Suitable for single-threaded use."""
