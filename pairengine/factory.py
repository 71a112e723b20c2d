"""Pair factory (registry).

The factory creates exactly one Pair per unordered asset pair, at an
address derived deterministically from the factory address and the sorted
assets, and holds the protocol fee settings every pair consults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog
from eth_abi import encode  # type: ignore[attr-defined]
from eth_utils import keccak

from pairengine.config import DEFAULT_PAIR_CONFIG, PairConfig
from pairengine.constants import ZERO_ADDRESS
from pairengine.errors import PairExists, Unauthorized
from pairengine.interfaces import Asset
from pairengine.library import sort_tokens
from pairengine.models.events import PairCreated
from pairengine.models.types import normalize_address
from pairengine.pair import Pair

if TYPE_CHECKING:
    from pairengine.chain import Chain

logger = structlog.get_logger()


def compute_pair_address(factory: str, token_a: str, token_b: str) -> str:
    """Deterministic address of the pair for two tokens (order independent).

    address = last 20 bytes of keccak(0xff || factory || keccak(abi(token0, token1)))
    """
    token0, token1 = sort_tokens(token_a, token_b)
    salt = keccak(encode(["address", "address"], [token0, token1]))
    factory_bytes = bytes.fromhex(normalize_address(factory, validate=True)[2:])
    digest = keccak(b"\xff" + factory_bytes + salt)
    return "0x" + digest[-20:].hex()


@dataclass
class FactoryState:
    """Mutable registry state (what a transaction snapshots)."""

    fee_to: str = ZERO_ADDRESS
    fee_to_setter: str = ZERO_ADDRESS
    pairs: dict[tuple[str, str], Pair] = field(default_factory=dict)
    all_pairs: list[str] = field(default_factory=list)

    def copy(self) -> FactoryState:
        return FactoryState(self.fee_to, self.fee_to_setter, dict(self.pairs), list(self.all_pairs))


class Factory:
    """Registry of pairs and holder of the protocol fee recipient.

    Attributes:
        chain: Environment pairs are deployed on
        address: Identity of the factory (the only caller allowed to bind pairs)
        config: Passed to every pair created
    """

    def __init__(
        self,
        chain: Chain,
        address: str,
        fee_to_setter: str,
        config: PairConfig = DEFAULT_PAIR_CONFIG,
    ) -> None:
        self.chain = chain
        self.address = normalize_address(address, validate=True)
        self.config = config
        self._state = FactoryState(fee_to_setter=normalize_address(fee_to_setter, validate=True))
        chain.register(self.address, self)

    # --- Fee settings ---

    @property
    def fee_to(self) -> str:
        """Protocol fee recipient; ZERO_ADDRESS means the protocol fee is off."""
        return self._state.fee_to

    @property
    def fee_to_setter(self) -> str:
        return self._state.fee_to_setter

    def set_fee_to(self, fee_to: str, *, caller: str) -> None:
        """Set the protocol fee recipient (ZERO_ADDRESS turns the fee off).

        Raises:
            Unauthorized: If caller is not fee_to_setter
        """
        self._check_setter(caller)
        self._state.fee_to = normalize_address(fee_to, validate=True)
        logger.info("fee_to_updated", fee_to=self._state.fee_to[-8:])

    def set_fee_to_setter(self, fee_to_setter: str, *, caller: str) -> None:
        """Hand over control of the fee settings.

        Raises:
            Unauthorized: If caller is not fee_to_setter
        """
        self._check_setter(caller)
        self._state.fee_to_setter = normalize_address(fee_to_setter, validate=True)
        logger.info("fee_to_setter_updated", fee_to_setter=self._state.fee_to_setter[-8:])

    def _check_setter(self, caller: str) -> None:
        if normalize_address(caller) != self._state.fee_to_setter:
            logger.warning("fee_setting_forbidden", caller=normalize_address(caller)[-8:])
            raise Unauthorized(f"{caller} is not the fee_to_setter")

    # --- Pairs ---

    def get_pair(self, token_a: str, token_b: str) -> Pair | None:
        """Get the pair for two tokens (order independent), or None."""
        key = (normalize_address(token_a), normalize_address(token_b))
        return self._state.pairs.get(key)

    @property
    def all_pairs(self) -> list[str]:
        """Addresses of every pair, in creation order."""
        return list(self._state.all_pairs)

    @property
    def all_pairs_length(self) -> int:
        return len(self._state.all_pairs)

    def create_pair(self, token_a: str, token_b: str, *, caller: str = ZERO_ADDRESS) -> Pair:
        """Create and bind the pair for two tokens.

        Args:
            token_a: First token address (any order)
            token_b: Second token address
            caller: Identity creating the pair (log context only)

        Returns:
            The new Pair

        Raises:
            IdenticalAddresses: If token_a == token_b
            ZeroAddress: If either token is the zero address
            PairExists: If the pair was already created
            ValueError: If no asset is deployed at a token address
        """
        token0, token1 = sort_tokens(token_a, token_b)
        if (token0, token1) in self._state.pairs:
            logger.debug("pair_exists", token0=token0[-8:], token1=token1[-8:])
            raise PairExists(f"Pair for ({token0}, {token1}) already exists")
        for token in (token0, token1):
            if not isinstance(self.chain.contract_at(token), Asset):
                raise ValueError(f"No asset deployed at {token}")

        address = compute_pair_address(self.address, token0, token1)
        with self.chain.transaction():
            pair = Pair(self.chain, address, self, self.config)
            pair.initialize(token0, token1, caller=self.address)

            self._state.pairs[(token0, token1)] = pair
            # Populate mapping in the reverse direction
            self._state.pairs[(token1, token0)] = pair
            self._state.all_pairs.append(pair.address)

            self.chain.emit(
                PairCreated(
                    address=self.address,
                    token0=token0,
                    token1=token1,
                    pair=pair.address,
                    index=len(self._state.all_pairs),
                )
            )
        logger.info(
            "pair_created",
            pair=pair.address[-8:],
            token0=token0[-8:],
            token1=token1[-8:],
            caller=normalize_address(caller)[-8:],
            index=len(self._state.all_pairs),
        )
        return pair

    # --- Stateful ---

    def snapshot(self) -> FactoryState:
        return self._state.copy()

    def restore(self, state: FactoryState) -> None:
        self._state = state.copy()
