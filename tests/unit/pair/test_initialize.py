"""Tests for binding a pair to its assets."""

import pytest

from pairengine import Pair
from pairengine.constants import ZERO_ADDRESS
from pairengine.errors import (
    IdenticalAddresses,
    InsufficientLiquidityMinted,
    Unauthorized,
    Uninitialized,
    ZeroAddress,
)
from pairengine.ledger import ShareLedger
from tests.helpers import UNIT, add_liquidity
from tests.helpers.constants import FACTORY, TOKEN_A, TOKEN_B, TOKEN_C, WALLET

PAIR = "0x9999999999999999999999999999999999999999"


@pytest.fixture
def fresh_pair(chain, token_a, token_b, empty_factory) -> Pair:
    """A deployed but unbound pair."""
    return Pair(chain, PAIR, empty_factory)


class TestInitialize:
    def test_factory_binds(self, fresh_pair):
        fresh_pair.initialize(TOKEN_A, TOKEN_B, caller=FACTORY)
        assert (fresh_pair.token0, fresh_pair.token1) == (TOKEN_A, TOKEN_B)

    def test_non_factory_rejected(self, fresh_pair):
        with pytest.raises(Unauthorized):
            fresh_pair.initialize(TOKEN_A, TOKEN_B, caller=WALLET)
        assert fresh_pair.token0 is None

    def test_second_bind_rejected(self, fresh_pair):
        fresh_pair.initialize(TOKEN_A, TOKEN_B, caller=FACTORY)
        with pytest.raises(Unauthorized, match="already initialized"):
            fresh_pair.initialize(TOKEN_B, TOKEN_A, caller=FACTORY)
        assert fresh_pair.token0 == TOKEN_A

    def test_identical_assets_rejected(self, fresh_pair):
        with pytest.raises(IdenticalAddresses):
            fresh_pair.initialize(TOKEN_A, TOKEN_A, caller=FACTORY)

    def test_zero_address_rejected(self, fresh_pair):
        with pytest.raises(ZeroAddress):
            fresh_pair.initialize(ZERO_ADDRESS, TOKEN_A, caller=FACTORY)

    def test_undeployed_asset_rejected(self, fresh_pair):
        with pytest.raises(ValueError, match="No asset deployed"):
            fresh_pair.initialize(TOKEN_A, TOKEN_C, caller=FACTORY)
        # Nothing half-bound
        assert fresh_pair.token0 is None
        assert fresh_pair.token1 is None

    def test_not_locked_after_failure(self, fresh_pair):
        with pytest.raises(Unauthorized):
            fresh_pair.initialize(TOKEN_A, TOKEN_B, caller=WALLET)
        assert not fresh_pair.locked


class TestUnbound:
    def test_reserves_start_empty(self, fresh_pair):
        assert fresh_pair.get_reserves() == (0, 0, 0)
        assert fresh_pair.price0_cumulative_last == 0
        assert fresh_pair.price1_cumulative_last == 0
        assert fresh_pair.k_last == 0

    @pytest.mark.parametrize(
        "call",
        [
            lambda p: p.mint(WALLET),
            lambda p: p.burn(WALLET),
            lambda p: p.swap(0, 1, WALLET),
            lambda p: p.skim(WALLET),
            lambda p: p.sync(),
        ],
        ids=["mint", "burn", "swap", "skim", "sync"],
    )
    def test_entry_points_require_binding(self, fresh_pair, call):
        with pytest.raises(Uninitialized):
            call(fresh_pair)
        assert not fresh_pair.locked

    def test_minimum_liquidity_from_config(self, fresh_pair):
        assert fresh_pair.minimum_liquidity == 1000
        assert fresh_pair.shares.address == PAIR


class TestShareLedgerArgument:
    def test_supplied_ledger_is_used(self, chain, token_a, token_b, empty_factory):
        shares = ShareLedger(chain, PAIR, minter=PAIR)
        pair = Pair(chain, PAIR, empty_factory, shares=shares)
        pair.initialize(TOKEN_A, TOKEN_B, caller=FACTORY)

        minted = add_liquidity(pair, token_a, token_b, UNIT, 4 * UNIT)

        assert pair.shares is shares
        assert minted == 2 * UNIT - 1000
        assert shares.balance_of(WALLET) == minted
        assert shares.total_supply == 2 * UNIT

    def test_supplied_ledger_rolls_back(self, chain, token_a, token_b, empty_factory):
        shares = ShareLedger(chain, PAIR, minter=PAIR)
        pair = Pair(chain, PAIR, empty_factory, shares=shares)
        pair.initialize(TOKEN_A, TOKEN_B, caller=FACTORY)

        # Deposit worth exactly the locked minimum mints nothing
        with pytest.raises(InsufficientLiquidityMinted):
            add_liquidity(pair, token_a, token_b, 1000, 1000)

        assert shares.total_supply == 0

    def test_non_ledger_rejected(self, chain, empty_factory):
        with pytest.raises(TypeError, match="not a share ledger"):
            Pair(chain, PAIR, empty_factory, shares=object())
