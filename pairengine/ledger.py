"""Liquidity-provider share ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pairengine.errors import Unauthorized
from pairengine.models.types import normalize_address
from pairengine.tokens import ERC20Token

if TYPE_CHECKING:
    from pairengine.chain import Chain


class ShareLedger(ERC20Token):
    """Share token of a single pair.

    Shares transfer like any token, but only the minter (the pair that owns
    this ledger) may create or destroy them. The ledger shares its address
    with the pair and is not registered on the chain separately; the pair
    snapshots and restores it.
    """

    def __init__(self, chain: Chain, address: str, minter: str) -> None:
        super().__init__(
            chain,
            address,
            name="Pair Engine Shares",
            symbol="PE-LP",
            decimals=18,
            register=False,
        )
        self.minter = normalize_address(minter, validate=True)

    def mint(self, to: str, amount: int, *, caller: str) -> None:  # type: ignore[override]
        self._check_minter(caller)
        self._mint(normalize_address(to), amount)

    def burn(self, owner: str, amount: int, *, caller: str) -> None:
        self._check_minter(caller)
        self._burn(normalize_address(owner), amount)

    def _check_minter(self, caller: str) -> None:
        if normalize_address(caller) != self.minter:
            raise Unauthorized(f"Only {self.minter} may mint or burn shares, not {caller!r}")
