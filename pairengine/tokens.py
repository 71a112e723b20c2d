"""Reference fungible asset.

ERC20Token is the asset accessor used by pairs in simulations and tests.
Caller identity is passed explicitly (`sender`, `caller`) since there is no
implicit message sender in-process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pairengine.constants import ZERO_ADDRESS
from pairengine.models.events import Approval, Transfer
from pairengine.models.types import normalize_address, validate_amount
from pairengine.safe_int import S

if TYPE_CHECKING:
    from pairengine.chain import Chain


class TokenError(Exception):
    """Base error for token operations."""

    pass


class InsufficientBalance(TokenError):
    """Holder does not have enough tokens."""

    pass


class InsufficientAllowance(TokenError):
    """Spender is not approved for enough tokens."""

    pass


@dataclass
class TokenState:
    """Mutable ledger state of a token (what a transaction snapshots)."""

    balances: dict[str, int] = field(default_factory=dict)
    allowances: dict[tuple[str, str], int] = field(default_factory=dict)
    total_supply: int = 0

    def copy(self) -> TokenState:
        return TokenState(dict(self.balances), dict(self.allowances), self.total_supply)


class ERC20Token:
    """In-memory fungible token.

    Attributes:
        address: Contract address of the token
        name: Human-readable name
        symbol: Ticker symbol
        decimals: Display decimals (accounting is always in base units)
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        name: str = "Token",
        symbol: str = "TKN",
        decimals: int = 18,
        *,
        register: bool = True,
    ) -> None:
        self.chain = chain
        self.address = normalize_address(address, validate=True)
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self._state = TokenState()
        if register:
            chain.register(self.address, self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.symbol}, {self.address})"

    # --- Queries ---

    @property
    def total_supply(self) -> int:
        return self._state.total_supply

    def balance_of(self, owner: str) -> int:
        return self._state.balances.get(normalize_address(owner), 0)

    def allowance(self, owner: str, spender: str) -> int:
        key = (normalize_address(owner), normalize_address(spender))
        return self._state.allowances.get(key, 0)

    # --- Transfers ---

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """Move `amount` from sender to recipient.

        Raises:
            InsufficientBalance: If sender holds less than amount
        """
        self._move(normalize_address(sender), normalize_address(recipient), amount)
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        owner_norm = normalize_address(owner)
        spender_norm = normalize_address(spender)
        self._state.allowances[(owner_norm, spender_norm)] = validate_amount(amount)
        self.chain.emit(
            Approval(address=self.address, owner=owner_norm, spender=spender_norm, value=amount)
        )
        return True

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        """Move `amount` from owner to recipient using spender's allowance.

        Raises:
            InsufficientAllowance: If spender is not approved for amount
            InsufficientBalance: If owner holds less than amount
        """
        key = (normalize_address(owner), normalize_address(spender))
        allowed = self._state.allowances.get(key, 0)
        if allowed < validate_amount(amount):
            raise InsufficientAllowance(
                f"{self.symbol}: allowance {allowed} < {amount} for {key[1]}"
            )
        self._move(key[0], normalize_address(recipient), amount)
        self._state.allowances[key] = (S(allowed) - amount).value
        return True

    # --- Supply ---

    def mint(self, to: str, amount: int) -> None:
        """Create `amount` new tokens for `to` (faucet)."""
        self._mint(normalize_address(to), amount)

    def _mint(self, to: str, amount: int) -> None:
        validate_amount(amount)
        self._state.total_supply = (S(self._state.total_supply) + amount).value
        self._state.balances[to] = self._state.balances.get(to, 0) + amount
        self._emit_transfer(ZERO_ADDRESS, to, amount)

    def _burn(self, owner: str, amount: int) -> None:
        validate_amount(amount)
        balance = self._state.balances.get(owner, 0)
        if balance < amount:
            raise InsufficientBalance(f"{self.symbol}: burn {amount} exceeds balance {balance}")
        self._state.balances[owner] = balance - amount
        self._state.total_supply = (S(self._state.total_supply) - amount).value
        self._emit_transfer(owner, ZERO_ADDRESS, amount)

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        validate_amount(amount)
        balance = self._state.balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: transfer {amount} exceeds balance {balance} of {sender}"
            )
        self._state.balances[sender] = balance - amount
        self._state.balances[recipient] = self._state.balances.get(recipient, 0) + amount
        self._emit_transfer(sender, recipient, amount)

    def _emit_transfer(self, sender: str, recipient: str, amount: int) -> None:
        self.chain.emit(
            Transfer(address=self.address, sender=sender, recipient=recipient, value=amount)
        )

    # --- Stateful ---

    def snapshot(self) -> TokenState:
        return self._state.copy()

    def restore(self, state: TokenState) -> None:
        self._state = state.copy()
