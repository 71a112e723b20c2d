"""Reentrancy gate for pair entry points."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

import structlog

from pairengine.errors import Reentrant

logger = structlog.get_logger()


class LockState(str, Enum):
    """Whether a mutating operation is in flight."""

    UNLOCKED = "unlocked"
    LOCKED = "locked"


class ReentrancyGate:
    """Two-state mutual exclusion for one pair instance.

    Usage:
        with gate.guard("swap"):
            ...  # body; any nested guard() raises Reentrant

    The gate is released on every exit path, so a failed body never leaves
    the pair locked.
    """

    __slots__ = ("_state", "_owner")

    def __init__(self, owner: str = "") -> None:
        self._state = LockState.UNLOCKED
        # For log context only
        self._owner = owner

    @property
    def state(self) -> LockState:
        return self._state

    @property
    def locked(self) -> bool:
        return self._state is LockState.LOCKED

    @contextmanager
    def guard(self, operation: str = "") -> Iterator[None]:
        """Acquire the gate for the duration of the block.

        Raises:
            Reentrant: If the gate is already held. Nothing is changed.
        """
        if self._state is LockState.LOCKED:
            logger.warning("reentrant_call_rejected", pair=self._owner[-8:], operation=operation)
            raise Reentrant(f"Pair is locked; {operation or 'call'} rejected")
        self._state = LockState.LOCKED
        try:
            yield
        finally:
            self._state = LockState.UNLOCKED
