"""Pydantic models for observational events.

Events are appended to the Chain's event log by the contract that emits
them. They carry no behaviour and are never read back by invariant checks.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from pairengine.models.types import Address, Uint112, Uint256


class Event(BaseModel):
    """Base class for all emitted events.

    Attributes:
        address: The contract that emitted the event
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Event name as it would appear in a log
    name: ClassVar[str] = "Event"

    address: Address


class Transfer(Event):
    """Token (or share) balance moved between two holders."""

    name: ClassVar[str] = "Transfer"

    sender: Address = Field(alias="from")
    recipient: Address = Field(alias="to")
    value: Uint256


class Approval(Event):
    """Allowance set by an owner for a spender."""

    name: ClassVar[str] = "Approval"

    owner: Address
    spender: Address
    value: Uint256


class Sync(Event):
    """Reserves were overwritten with observed balances."""

    name: ClassVar[str] = "Sync"

    reserve0: Uint112
    reserve1: Uint112


class Mint(Event):
    """Liquidity was added."""

    name: ClassVar[str] = "Mint"

    sender: Address
    amount0: Uint256
    amount1: Uint256


class Burn(Event):
    """Liquidity was removed and paid out to `to`."""

    name: ClassVar[str] = "Burn"

    sender: Address
    amount0: Uint256
    amount1: Uint256
    to: Address


class Swap(Event):
    """A trade settled. Inputs are inferred from balance deltas."""

    name: ClassVar[str] = "Swap"

    sender: Address
    amount0_in: Uint256
    amount1_in: Uint256
    amount0_out: Uint256
    amount1_out: Uint256
    to: Address


class PairCreated(Event):
    """The factory created and bound a new pair."""

    name: ClassVar[str] = "PairCreated"

    token0: Address
    token1: Address
    pair: Address
    # 1-based count of pairs after creation
    index: int = Field(ge=1)
