"""In-memory host environment for pairs, tokens and their callers.

The Chain plays the part of the execution environment a pair is deployed
into. It provides:
- Block timestamps (wall clock, or pinned with warp/advance for tests)
- A directory mapping addresses to contract objects (used to resolve
  swap callees)
- An event log, appended to by every emit until trimmed with clear_events()
- All-or-nothing transactions: every registered contract and the event
  log are restored if the transaction body raises

It is a simulation host, not a node. Everything lives in memory: the event
log keeps every event until cleared, and each transaction (so each pair
entry point) snapshots every registered contract, at a cost linear in the
number of contracts. Long-running simulations should call clear_events()
between batches.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import structlog

from pairengine.interfaces import Stateful
from pairengine.models.events import Event
from pairengine.models.types import normalize_address

logger = structlog.get_logger()

E = TypeVar("E", bound=Event)
T = TypeVar("T")


class Chain:
    """Execution environment shared by every contract in a simulation."""

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        """Initialize an empty chain.

        Args:
            clock: Source of wall-clock seconds. Defaults to time.time().
                Ignored while a timestamp is pinned with warp().
        """
        self._clock = clock or (lambda: int(time.time()))
        self._pinned_timestamp: int | None = None
        self._contracts: dict[str, Any] = {}
        self._events: list[Event] = []
        self._open_transactions = 0

    # --- Time ---

    @property
    def block_timestamp(self) -> int:
        """Current block timestamp in seconds."""
        if self._pinned_timestamp is not None:
            return self._pinned_timestamp
        return self._clock()

    def warp(self, timestamp: int) -> None:
        """Pin the block timestamp."""
        if timestamp < 0:
            raise ValueError(f"Timestamp cannot be negative: {timestamp}")
        self._pinned_timestamp = timestamp

    def advance(self, seconds: int) -> int:
        """Move the block timestamp forward and pin it. Returns the new timestamp."""
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards: {seconds}")
        self.warp(self.block_timestamp + seconds)
        return self.block_timestamp

    # --- Contract directory ---

    def register(self, address: str, contract: Any) -> None:
        """Deploy `contract` at `address`.

        Raises:
            ValueError: If the address is invalid or already taken
        """
        addr = normalize_address(address, validate=True)
        if addr in self._contracts:
            raise ValueError(f"Address already in use: {addr}")
        self._contracts[addr] = contract
        logger.debug("contract_registered", address=addr[-8:], kind=type(contract).__name__)

    def contract_at(self, address: str) -> Any | None:
        """Return the contract deployed at `address`, or None."""
        return self._contracts.get(normalize_address(address))

    # --- Events ---

    def emit(self, event: Event) -> None:
        """Append an event to the log."""
        self._events.append(event)

    @property
    def events(self) -> list[Event]:
        """All events emitted so far (copy)."""
        return list(self._events)

    def events_of(self, event_type: type[E], address: str | None = None) -> list[E]:
        """Events of a given type, optionally only those emitted by `address`."""
        addr = normalize_address(address) if address is not None else None
        return [
            e
            for e in self._events
            if isinstance(e, event_type) and (addr is None or e.address == addr)
        ]

    def clear_events(self, keep: int = 0) -> int:
        """Drop all but the newest `keep` events. Returns how many were dropped.

        Raises:
            ValueError: If keep is negative
            RuntimeError: If called inside an open transaction, whose rollback
                depends on the log length at entry
        """
        if keep < 0:
            raise ValueError(f"keep cannot be negative: {keep}")
        if self._open_transactions:
            raise RuntimeError("Cannot clear events inside a transaction")
        dropped = max(len(self._events) - keep, 0)
        del self._events[:dropped]
        logger.debug("events_cleared", dropped=dropped, kept=len(self._events))
        return dropped

    # --- Transactions ---

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run a block with all-or-nothing semantics.

        Snapshots every registered Stateful contract and the event log on
        entry. If the block raises, all of them are restored and the
        exception is re-raised unchanged. Transactions nest: an inner
        failure only rolls back to the inner snapshot.
        """
        snapshots = {
            addr: contract.snapshot()
            for addr, contract in self._contracts.items()
            if isinstance(contract, Stateful)
        }
        event_count = len(self._events)
        self._open_transactions += 1
        try:
            yield
        except BaseException as err:
            for addr, state in snapshots.items():
                self._contracts[addr].restore(state)
            del self._events[event_count:]
            logger.debug("transaction_reverted", error=type(err).__name__, reason=str(err))
            raise
        finally:
            self._open_transactions -= 1

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Invoke `fn` inside a transaction and return its result."""
        with self.transaction():
            return fn(*args, **kwargs)
