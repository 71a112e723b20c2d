"""Tests for Pair.swap."""

import pytest

from pairengine import Chain, ERC20Token, Factory
from pairengine.errors import (
    CallbackFailed,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvalidRecipient,
    InvariantViolation,
    TransferFailed,
)
from pairengine.models.events import Swap
from tests.helpers import (
    FACTORY,
    FEE_SETTER,
    GENESIS_TIMESTAMP,
    OTHER,
    TOKEN_A,
    TOKEN_B,
    UNIT,
    WALLET,
    add_liquidity,
    deposit,
)
from tests.helpers.contracts import FalseReturningToken

# (swap amount, token0 reserve, token1 reserve, expected output), whole units except output
SWAP_CASES = [
    (1, 5, 10, 1662497915624478906),
    (1, 10, 5, 453305446940074565),
    (2, 5, 10, 2851015155847869602),
    (2, 10, 5, 831248957812239453),
    (1, 10, 10, 906610893880149131),
    (1, 100, 100, 987158034397061298),
    (1, 1000, 1000, 996006981039903216),
]


@pytest.mark.parametrize("swap_amount, reserve0, reserve1, expected_output", SWAP_CASES)
def test_get_input_price(pair, token0, token1, swap_amount, reserve0, reserve1, expected_output):
    add_liquidity(pair, token0, token1, reserve0 * UNIT, reserve1 * UNIT)
    deposit(token0, pair, swap_amount * UNIT)

    with pytest.raises(InvariantViolation):
        pair.swap(0, expected_output + 1, WALLET)
    pair.swap(0, expected_output, WALLET)

    assert token1.balance_of(WALLET) == expected_output


class TestSwapToken0ForToken1:
    @pytest.fixture(autouse=True)
    def seeded(self, pair, token0, token1):
        add_liquidity(pair, token0, token1, 5 * UNIT, 10 * UNIT)

    def test_balances_reserves_and_event(self, chain, pair, token0, token1):
        expected_output = 1662497915624478906
        deposit(token0, pair, UNIT)
        pair.swap(0, expected_output, OTHER, caller=WALLET)

        assert pair.get_reserves()[:2] == (6 * UNIT, 10 * UNIT - expected_output)
        assert token0.balance_of(pair.address) == 6 * UNIT
        assert token1.balance_of(pair.address) == 10 * UNIT - expected_output
        assert token1.balance_of(OTHER) == expected_output

        (event,) = chain.events_of(Swap, pair.address)
        assert event.sender == WALLET
        assert event.to == OTHER
        assert (event.amount0_in, event.amount1_in) == (UNIT, 0)
        assert (event.amount0_out, event.amount1_out) == (0, expected_output)

    def test_failed_k_check_rolls_back_output(self, pair, token0, token1):
        deposit(token0, pair, 1)
        balance_before = token1.balance_of(pair.address)
        with pytest.raises(InvariantViolation):
            pair.swap(0, UNIT, WALLET)
        assert token1.balance_of(WALLET) == 0
        assert token1.balance_of(pair.address) == balance_before
        assert not pair.locked


class TestSwapToken1ForToken0:
    def test_reverse_direction(self, chain, pair, token0, token1):
        add_liquidity(pair, token0, token1, 5 * UNIT, 10 * UNIT)
        expected_output = 453305446940074565
        deposit(token1, pair, UNIT)
        pair.swap(expected_output, 0, WALLET)

        assert token0.balance_of(WALLET) == expected_output
        assert pair.get_reserves()[:2] == (5 * UNIT - expected_output, 11 * UNIT)
        (event,) = chain.events_of(Swap, pair.address)
        assert (event.amount0_in, event.amount1_in) == (0, UNIT)


class TestSwapRejections:
    @pytest.fixture(autouse=True)
    def seeded(self, pair, token0, token1):
        add_liquidity(pair, token0, token1, 5 * UNIT, 10 * UNIT)

    def test_no_output(self, pair):
        with pytest.raises(InsufficientOutputAmount):
            pair.swap(0, 0, WALLET)

    def test_output_at_reserve(self, pair):
        with pytest.raises(InsufficientLiquidity):
            pair.swap(5 * UNIT, 0, WALLET)
        with pytest.raises(InsufficientLiquidity):
            pair.swap(0, 10 * UNIT, WALLET)

    def test_recipient_is_pair_asset(self, pair, token0, token1):
        deposit(token0, pair, UNIT)
        with pytest.raises(InvalidRecipient):
            pair.swap(0, 1, token0.address)
        with pytest.raises(InvalidRecipient):
            pair.swap(0, 1, token1.address)

    def test_no_input(self, pair, token1):
        with pytest.raises(InsufficientInputAmount):
            pair.swap(0, 1, WALLET)
        assert token1.balance_of(WALLET) == 0

    def test_negative_output(self, pair):
        with pytest.raises(ValueError):
            pair.swap(-1, 1, WALLET)

    def test_data_to_non_callee(self, pair, token0, token1):
        deposit(token0, pair, UNIT)
        with pytest.raises(CallbackFailed):
            pair.swap(0, 1, OTHER, b"\x01")
        assert token1.balance_of(OTHER) == 0

    def test_output_from_empty_pool(self):
        empty = Chain()
        empty.warp(GENESIS_TIMESTAMP)
        ERC20Token(empty, TOKEN_A)
        ERC20Token(empty, TOKEN_B)
        factory = Factory(empty, FACTORY, fee_to_setter=FEE_SETTER)
        new_pair = factory.create_pair(TOKEN_A, TOKEN_B)
        with pytest.raises(InsufficientLiquidity):
            new_pair.swap(0, 1, WALLET)


class TestTransferFailure:
    def test_false_return_fails_swap(self, chain):
        # TOKEN_A sorts first, so the failing token is token0
        token0 = FalseReturningToken(chain, TOKEN_A)
        token1 = ERC20Token(chain, TOKEN_B)
        factory = Factory(chain, FACTORY, fee_to_setter=FEE_SETTER)
        pair = factory.create_pair(TOKEN_A, TOKEN_B)
        add_liquidity(pair, token0, token1, 5 * UNIT, 10 * UNIT)
        deposit(token1, pair, UNIT)

        token0.fail_transfers = True
        with pytest.raises(TransferFailed):
            pair.swap(1, 0, WALLET)
        assert pair.get_reserves()[:2] == (5 * UNIT, 10 * UNIT)
