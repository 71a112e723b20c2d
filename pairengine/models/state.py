"""Snapshot types returned by pair queries."""

from typing import NamedTuple


class Reserves(NamedTuple):
    """Cached reserves of a pair and the time they were last written."""

    reserve0: int
    reserve1: int
    block_timestamp_last: int
