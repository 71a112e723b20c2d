"""Constant-product pair engine.

A Pair holds custody of two assets and keeps a cached snapshot of its
balances (the reserves). Callers move assets in first and then call an
entry point; the pair infers what it received from balance deltas:

- mint:  both assets in            -> shares out
- burn:  shares in (to the pair)   -> both assets out
- swap:  assets out first, then inputs are inferred and the fee-adjusted
         product of balances must not fall below the product of reserves
- skim:  surplus over reserves out
- sync:  reserves := balances

Every entry point runs inside a Chain transaction and behind the pair's
reentrancy gate. All arithmetic goes through SafeInt.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

import structlog

from pairengine import ledger
from pairengine.config import DEFAULT_PAIR_CONFIG, PairConfig
from pairengine.constants import ZERO_ADDRESS
from pairengine.errors import (
    CallbackFailed,
    IdenticalAddresses,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidRecipient,
    InvariantViolation,
    ReserveOverflow,
    TransferFailed,
    Unauthorized,
    Uninitialized,
    ZeroAddress,
)
from pairengine.interfaces import Asset, FeeRecipientSource, ShareLedger, SwapCallee
from pairengine.math.uq112x112 import encode, uqdiv
from pairengine.models.events import Burn, Mint, Swap, Sync
from pairengine.models.state import Reserves
from pairengine.models.types import normalize_address, validate_amount
from pairengine.reentrancy import ReentrancyGate
from pairengine.safe_int import S

if TYPE_CHECKING:
    from pairengine.chain import Chain

logger = structlog.get_logger()

RESERVE_BITS = 112
TIMESTAMP_BITS = 32


@dataclass
class PairState:
    """Mutable accounting state of a pair (what a transaction snapshots)."""

    asset0: Asset | None = None
    asset1: Asset | None = None
    reserve0: int = 0
    reserve1: int = 0
    # Truncated to 32 bits
    block_timestamp_last: int = 0
    # UQ112x112 * seconds, wrapping at 2**256
    price0_cumulative_last: int = 0
    price1_cumulative_last: int = 0
    # reserve0 * reserve1 as of the most recent liquidity event (fee on only)
    k_last: int = 0


class Pair:
    """Pool engine for one unordered pair of assets.

    Attributes:
        chain: Environment the pair is deployed on
        address: Identity of the pair (also the address of its share ledger)
        factory: Registry the pair was created by; resolves fee_to
        config: Numeric parameters (fee, minimum liquidity, protocol share)
        shares: Share ledger (any ShareLedger); the pair is its only minter
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        factory: FeeRecipientSource,
        config: PairConfig = DEFAULT_PAIR_CONFIG,
        shares: ShareLedger | None = None,
    ) -> None:
        """Deploy the pair at `address`.

        Args:
            shares: Ledger to account shares in. Defaults to a fresh
                ledger at the pair address with the pair as minter.

        Raises:
            TypeError: If shares does not implement ShareLedger
        """
        self.chain = chain
        self.address = normalize_address(address, validate=True)
        self.factory = factory
        self.config = config
        if shares is None:
            shares = ledger.ShareLedger(chain, self.address, minter=self.address)
        elif not isinstance(shares, ShareLedger):
            raise TypeError(f"{type(shares).__name__} is not a share ledger")
        self.shares = shares
        self._state = PairState()
        self._gate = ReentrancyGate(self.address)
        chain.register(self.address, self)

    def __repr__(self) -> str:
        return f"Pair({self.address}, token0={self.token0}, token1={self.token1})"

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def token0(self) -> str | None:
        return self._state.asset0.address if self._state.asset0 is not None else None

    @property
    def token1(self) -> str | None:
        return self._state.asset1.address if self._state.asset1 is not None else None

    @property
    def price0_cumulative_last(self) -> int:
        return self._state.price0_cumulative_last

    @property
    def price1_cumulative_last(self) -> int:
        return self._state.price1_cumulative_last

    @property
    def k_last(self) -> int:
        return self._state.k_last

    @property
    def minimum_liquidity(self) -> int:
        return self.config.minimum_liquidity

    @property
    def locked(self) -> bool:
        return self._gate.locked

    def get_reserves(self) -> Reserves:
        """Cached reserves and the (32-bit) timestamp they were written at."""
        return Reserves(
            self._state.reserve0,
            self._state.reserve1,
            self._state.block_timestamp_last,
        )

    # =========================================================================
    # Binding
    # =========================================================================

    def initialize(self, token0: str, token1: str, *, caller: str) -> None:
        """Bind the pair to its two assets. Called once, by the factory.

        Raises:
            Unauthorized: If caller is not the factory, or already bound
            IdenticalAddresses: If token0 == token1
            ZeroAddress: If either token is the zero address
            ValueError: If no asset is deployed at a token address
        """
        with self.chain.transaction(), self._gate.guard("initialize"):
            if normalize_address(caller) != normalize_address(self.factory.address):
                raise Unauthorized(f"Only the factory may initialize {self.address}")
            if self._state.asset0 is not None:
                raise Unauthorized(f"Pair {self.address} is already initialized")

            addr0 = normalize_address(token0, validate=True)
            addr1 = normalize_address(token1, validate=True)
            if addr0 == addr1:
                raise IdenticalAddresses(f"Both assets are {addr0}")
            if ZERO_ADDRESS in (addr0, addr1):
                raise ZeroAddress("Pair assets cannot be the zero address")

            self._state.asset0 = self._resolve_asset(addr0)
            self._state.asset1 = self._resolve_asset(addr1)
            logger.debug(
                "pair_initialized",
                pair=self.address[-8:],
                token0=addr0[-8:],
                token1=addr1[-8:],
            )

    def _resolve_asset(self, address: str) -> Asset:
        asset = self.chain.contract_at(address)
        if not isinstance(asset, Asset):
            raise ValueError(f"No asset deployed at {address}")
        return asset

    def _assets(self) -> tuple[Asset, Asset]:
        if self._state.asset0 is None or self._state.asset1 is None:
            raise Uninitialized(f"Pair {self.address} has not been initialized")
        return self._state.asset0, self._state.asset1

    # =========================================================================
    # Internal accounting
    # =========================================================================

    def _update(self, balance0: int, balance1: int, reserve0: int, reserve1: int) -> None:
        """Write observed balances into the reserves and accumulate prices.

        Args:
            balance0: Observed balance of token0 after this call's transfers
            balance1: Observed balance of token1 after this call's transfers
            reserve0: Reserve of token0 before this call
            reserve1: Reserve of token1 before this call

        Raises:
            ReserveOverflow: If either balance does not fit in 112 bits
        """
        if not (S(balance0).is_uint(RESERVE_BITS) and S(balance1).is_uint(RESERVE_BITS)):
            logger.warning(
                "reserve_overflow",
                pair=self.address[-8:],
                balance0=balance0,
                balance1=balance1,
            )
            raise ReserveOverflow(f"Balances ({balance0}, {balance1}) exceed uint112")

        block_timestamp = S(self.chain.block_timestamp).truncate(TIMESTAMP_BITS)
        # Overflow is desired: the 32-bit timestamp may have rolled over
        time_elapsed = block_timestamp.wrapping_sub(
            self._state.block_timestamp_last, TIMESTAMP_BITS
        )

        if time_elapsed > 0 and reserve0 != 0 and reserve1 != 0:
            price0 = uqdiv(encode(reserve1), reserve0)
            price1 = uqdiv(encode(reserve0), reserve1)
            self._state.price0_cumulative_last = (
                S(self._state.price0_cumulative_last).wrapping_add(S(price0) * time_elapsed).value
            )
            self._state.price1_cumulative_last = (
                S(self._state.price1_cumulative_last).wrapping_add(S(price1) * time_elapsed).value
            )

        self._state.reserve0 = balance0
        self._state.reserve1 = balance1
        self._state.block_timestamp_last = block_timestamp.value

        self.chain.emit(Sync(address=self.address, reserve0=balance0, reserve1=balance1))
        logger.debug("pair_sync", pair=self.address[-8:], reserve0=balance0, reserve1=balance1)

    def _mint_fee(self, reserve0: int, reserve1: int) -> bool:
        """Mint the protocol's cut of fee growth since the last liquidity event.

        Growth is measured as sqrt(k) against sqrt(k_last). The protocol gets
        1/protocol_fee_share of it, paid as newly minted shares.

        Returns:
            True if the protocol fee is on (fee_to is set)
        """
        fee_to = normalize_address(self.factory.fee_to)
        fee_on = fee_to != ZERO_ADDRESS
        k_last = self._state.k_last

        if fee_on:
            if k_last != 0:
                root_k = (S(reserve0) * reserve1).sqrt()
                root_k_last = S(k_last).sqrt()
                if root_k > root_k_last:
                    numerator = S(self.shares.total_supply) * (root_k - root_k_last)
                    denominator = root_k * self.config.root_k_multiplier + root_k_last
                    liquidity = (numerator // denominator).value
                    if liquidity > 0:
                        self.shares.mint(fee_to, liquidity, caller=self.address)
                        logger.debug(
                            "protocol_fee_minted",
                            pair=self.address[-8:],
                            fee_to=fee_to[-8:],
                            liquidity=liquidity,
                        )
        elif k_last != 0:
            self._state.k_last = 0

        return fee_on

    def _safe_transfer(self, asset: Asset, to: str, value: int) -> None:
        """Transfer out of the pair, failing loudly.

        Raises:
            TransferFailed: If the asset reports failure
        """
        if not asset.transfer(self.address, to, value):
            raise TransferFailed(f"Transfer of {value} {asset.address} to {to} failed")

    def _balances(self, asset0: Asset, asset1: Asset) -> tuple[int, int]:
        return asset0.balance_of(self.address), asset1.balance_of(self.address)

    # =========================================================================
    # Entry points
    # =========================================================================

    def mint(self, to: str, *, caller: str = ZERO_ADDRESS) -> int:
        """Mint shares for assets already transferred to the pair.

        The first deposit mints sqrt(amount0 * amount1) and locks
        minimum_liquidity of it at the zero address. Later deposits are
        credited for their limiting asset only.

        Args:
            to: Recipient of the minted shares
            caller: Identity calling mint (recorded in the Mint event)

        Returns:
            Shares minted to `to`

        Raises:
            InsufficientLiquidityMinted: If the deposit is worth no shares
        """
        with self.chain.transaction(), self._gate.guard("mint"):
            to_norm = normalize_address(to, validate=True)
            asset0, asset1 = self._assets()
            reserve0, reserve1, _ = self.get_reserves()
            balance0, balance1 = self._balances(asset0, asset1)
            amount0 = (S(balance0) - reserve0).value
            amount1 = (S(balance1) - reserve1).value

            # May mint shares, so read total supply after
            fee_on = self._mint_fee(reserve0, reserve1)
            total_supply = self.shares.total_supply
            minimum_liquidity = self.config.minimum_liquidity

            if total_supply == 0:
                liquidity = (S(amount0) * amount1).sqrt().value - minimum_liquidity
            else:
                liquidity = (
                    (S(amount0) * total_supply // reserve0)
                    .min(S(amount1) * total_supply // reserve1)
                    .value
                )

            if liquidity <= 0:
                logger.debug(
                    "mint_rejected",
                    pair=self.address[-8:],
                    amount0=amount0,
                    amount1=amount1,
                    liquidity=liquidity,
                )
                raise InsufficientLiquidityMinted(
                    f"Deposit ({amount0}, {amount1}) mints {liquidity} shares"
                )

            if total_supply == 0:
                # Permanently lock the first minimum_liquidity shares
                self.shares.mint(ZERO_ADDRESS, minimum_liquidity, caller=self.address)
            self.shares.mint(to_norm, liquidity, caller=self.address)

            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self._state.k_last = (S(self._state.reserve0) * self._state.reserve1).value

            self.chain.emit(
                Mint(address=self.address, sender=caller, amount0=amount0, amount1=amount1)
            )
            logger.debug(
                "pair_mint",
                pair=self.address[-8:],
                to=to_norm[-8:],
                amount0=amount0,
                amount1=amount1,
                liquidity=liquidity,
            )
            return liquidity

    def burn(self, to: str, *, caller: str = ZERO_ADDRESS) -> tuple[int, int]:
        """Redeem every share held by the pair itself.

        Pays out a proportional slice of the pair's current balances (not
        its reserves), so donated surplus goes to the redeemer.

        Args:
            to: Recipient of both assets
            caller: Identity calling burn (recorded in the Burn event)

        Returns:
            Tuple of (amount0, amount1) paid out

        Raises:
            InsufficientLiquidityBurned: If either payout would be zero
        """
        with self.chain.transaction(), self._gate.guard("burn"):
            to_norm = normalize_address(to, validate=True)
            asset0, asset1 = self._assets()
            reserve0, reserve1, _ = self.get_reserves()
            balance0, balance1 = self._balances(asset0, asset1)
            liquidity = self.shares.balance_of(self.address)

            fee_on = self._mint_fee(reserve0, reserve1)
            total_supply = self.shares.total_supply
            if total_supply == 0:
                raise InsufficientLiquidityBurned("Pair has no outstanding shares")

            amount0 = (S(liquidity) * balance0 // total_supply).value
            amount1 = (S(liquidity) * balance1 // total_supply).value
            if amount0 == 0 or amount1 == 0:
                raise InsufficientLiquidityBurned(
                    f"Burning {liquidity} of {total_supply} shares pays ({amount0}, {amount1})"
                )

            self.shares.burn(self.address, liquidity, caller=self.address)
            self._safe_transfer(asset0, to_norm, amount0)
            self._safe_transfer(asset1, to_norm, amount1)

            balance0, balance1 = self._balances(asset0, asset1)
            self._update(balance0, balance1, reserve0, reserve1)
            if fee_on:
                self._state.k_last = (S(self._state.reserve0) * self._state.reserve1).value

            self.chain.emit(
                Burn(
                    address=self.address,
                    sender=caller,
                    amount0=amount0,
                    amount1=amount1,
                    to=to_norm,
                )
            )
            logger.debug(
                "pair_burn",
                pair=self.address[-8:],
                to=to_norm[-8:],
                liquidity=liquidity,
                amount0=amount0,
                amount1=amount1,
            )
            return amount0, amount1

    def swap(
        self,
        amount0_out: int,
        amount1_out: int,
        to: str,
        data: bytes = b"",
        *,
        caller: str = ZERO_ADDRESS,
    ) -> None:
        """Send outputs to `to`, then require enough input to have arrived.

        Outputs are transferred before inputs are measured, so a callee may
        pay for its outputs from inside on_swap_callback (flash swap).

        Args:
            amount0_out: Amount of token0 to send
            amount1_out: Amount of token1 to send
            to: Recipient of the outputs
            data: If non-empty, `to` is called back with this payload
            caller: Identity calling swap (passed to the callback and Swap event)

        Raises:
            InsufficientOutputAmount: If both outputs are zero
            InsufficientLiquidity: If an output is not below its reserve
            InvalidRecipient: If `to` is one of the pair's assets
            CallbackFailed: If data is given but `to` is not a SwapCallee
            InsufficientInputAmount: If no input arrived on either side
            InvariantViolation: If the fee-adjusted product decreased
        """
        with self.chain.transaction(), self._gate.guard("swap"):
            validate_amount(amount0_out, name="amount0_out")
            validate_amount(amount1_out, name="amount1_out")
            to_norm = normalize_address(to, validate=True)
            if amount0_out == 0 and amount1_out == 0:
                raise InsufficientOutputAmount("Swap must request some output")

            asset0, asset1 = self._assets()
            reserve0, reserve1, _ = self.get_reserves()
            if not (amount0_out < reserve0 and amount1_out < reserve1):
                raise InsufficientLiquidity(
                    f"Outputs ({amount0_out}, {amount1_out}) not below reserves "
                    f"({reserve0}, {reserve1})"
                )
            if to_norm in (asset0.address, asset1.address):
                raise InvalidRecipient(f"Cannot swap to pair asset {to_norm}")

            # Optimistic transfers
            if amount0_out > 0:
                self._safe_transfer(asset0, to_norm, amount0_out)
            if amount1_out > 0:
                self._safe_transfer(asset1, to_norm, amount1_out)
            if data:
                self._call_back(to_norm, caller, amount0_out, amount1_out, data)

            balance0, balance1 = self._balances(asset0, asset1)
            amount0_in = S(balance0).saturating_sub(S(reserve0) - amount0_out)
            amount1_in = S(balance1).saturating_sub(S(reserve1) - amount1_out)
            if not amount0_in and not amount1_in:
                raise InsufficientInputAmount("No input received for swap")

            denominator = self.config.swap_fee_denominator
            numerator = self.config.swap_fee_numerator
            balance0_adjusted = S(balance0) * denominator - amount0_in * numerator
            balance1_adjusted = S(balance1) * denominator - amount1_in * numerator
            k_before = S(reserve0) * reserve1 * (denominator * denominator)
            if balance0_adjusted * balance1_adjusted < k_before:
                logger.debug(
                    "k_check_failed",
                    pair=self.address[-8:],
                    amount0_in=amount0_in.value,
                    amount1_in=amount1_in.value,
                    amount0_out=amount0_out,
                    amount1_out=amount1_out,
                )
                raise InvariantViolation("K")

            self._update(balance0, balance1, reserve0, reserve1)

            self.chain.emit(
                Swap(
                    address=self.address,
                    sender=caller,
                    amount0_in=amount0_in.value,
                    amount1_in=amount1_in.value,
                    amount0_out=amount0_out,
                    amount1_out=amount1_out,
                    to=to_norm,
                )
            )
            logger.debug(
                "pair_swap",
                pair=self.address[-8:],
                amount0_in=amount0_in.value,
                amount1_in=amount1_in.value,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
            )

    def _call_back(
        self,
        to: str,
        caller: str,
        amount0_out: int,
        amount1_out: int,
        data: bytes,
    ) -> None:
        callee = self.chain.contract_at(to)
        if not isinstance(callee, SwapCallee):
            raise CallbackFailed(f"{to} cannot receive swap callbacks")
        callee.on_swap_callback(caller, amount0_out, amount1_out, data)

    def skim(self, to: str) -> None:
        """Send any balance above the reserves to `to`.

        Raises:
            Underflow: If a balance is below its reserve
        """
        with self.chain.transaction(), self._gate.guard("skim"):
            to_norm = normalize_address(to, validate=True)
            asset0, asset1 = self._assets()
            balance0, balance1 = self._balances(asset0, asset1)
            excess0 = (S(balance0) - self._state.reserve0).value
            excess1 = (S(balance1) - self._state.reserve1).value
            if excess0 > 0:
                self._safe_transfer(asset0, to_norm, excess0)
            if excess1 > 0:
                self._safe_transfer(asset1, to_norm, excess1)
            logger.debug(
                "pair_skim",
                pair=self.address[-8:],
                to=to_norm[-8:],
                amount0=excess0,
                amount1=excess1,
            )

    def sync(self) -> None:
        """Force reserves to match balances."""
        with self.chain.transaction(), self._gate.guard("sync"):
            asset0, asset1 = self._assets()
            balance0, balance1 = self._balances(asset0, asset1)
            self._update(balance0, balance1, self._state.reserve0, self._state.reserve1)

    # =========================================================================
    # Stateful
    # =========================================================================

    def snapshot(self) -> tuple[PairState, Any]:
        return replace(self._state), self.shares.snapshot()

    def restore(self, state: tuple[PairState, Any]) -> None:
        pair_state, share_state = state
        self._state = replace(pair_state)
        self.shares.restore(share_state)
