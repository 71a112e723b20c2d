"""Capabilities the pair consumes from its collaborators.

The pair holds references to assets, its share ledger and its factory but
never owns them. Anything satisfying these protocols can stand in, which is
how tests inject misbehaving assets and reentrant callees.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Asset(Protocol):
    """A fungible asset the pair holds custody of."""

    address: str

    def balance_of(self, owner: str) -> int:
        """Authoritative balance of `owner`."""
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Move `amount` from sender to recipient.

        Returns:
            True on success. Implementations may raise instead of returning
            False; either way the pair treats it as a failed transfer.
        """
        ...


@runtime_checkable
class ShareLedger(Protocol):
    """Liquidity-provider claims against a single pair.

    Only the owning pair may mint or burn. The ledger is not registered on
    the chain separately; the pair snapshots and restores it.
    """

    address: str

    @property
    def total_supply(self) -> int: ...

    def balance_of(self, owner: str) -> int: ...

    def mint(self, to: str, amount: int, *, caller: str) -> None: ...

    def burn(self, owner: str, amount: int, *, caller: str) -> None: ...

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...


@runtime_checkable
class FeeRecipientSource(Protocol):
    """Resolves where protocol fees go (the factory)."""

    address: str

    @property
    def fee_to(self) -> str:
        """Fee recipient, or ZERO_ADDRESS when the protocol fee is off."""
        ...


@runtime_checkable
class SwapCallee(Protocol):
    """A swap recipient that supplies input after receiving output."""

    address: str

    def on_swap_callback(
        self,
        sender: str,
        amount0_out: int,
        amount1_out: int,
        data: bytes,
    ) -> None:
        """Called by the pair after output transfers, before the K check.

        Args:
            sender: Identity that called swap
            amount0_out: Amount of token0 sent to this callee
            amount1_out: Amount of token1 sent to this callee
            data: Opaque payload passed through from swap
        """
        ...


@runtime_checkable
class Stateful(Protocol):
    """Contract state that a Chain transaction can snapshot and restore."""

    def snapshot(self) -> Any: ...

    def restore(self, state: Any) -> None: ...
