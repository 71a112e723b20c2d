"""Tests for the Chain execution environment."""

import pytest

from pairengine import Chain, ERC20Token
from pairengine.models.events import Sync, Transfer
from tests.helpers.constants import GENESIS_TIMESTAMP, OTHER, TOKEN_A, TOKEN_B, WALLET


class TestTime:
    def test_uses_clock_until_warped(self):
        chain = Chain(clock=lambda: 1234)
        assert chain.block_timestamp == 1234
        chain.warp(99)
        assert chain.block_timestamp == 99

    def test_advance(self, chain):
        assert chain.advance(10) == GENESIS_TIMESTAMP + 10
        assert chain.block_timestamp == GENESIS_TIMESTAMP + 10

    def test_advance_backwards_raises(self, chain):
        with pytest.raises(ValueError):
            chain.advance(-1)

    def test_warp_negative_raises(self, chain):
        with pytest.raises(ValueError):
            chain.warp(-5)


class TestDirectory:
    def test_register_and_lookup(self, chain):
        contract = object()
        chain.register(WALLET, contract)
        assert chain.contract_at(WALLET) is contract
        assert chain.contract_at(WALLET.upper().replace("0X", "0x")) is contract
        assert chain.contract_at(OTHER) is None

    def test_register_twice_raises(self, chain):
        chain.register(WALLET, object())
        with pytest.raises(ValueError, match="already in use"):
            chain.register(WALLET, object())

    def test_register_invalid_address_raises(self, chain):
        with pytest.raises(ValueError):
            chain.register("0x1234", object())


class TestEvents:
    def test_events_of_filters_by_type_and_address(self, chain, token_a, token_b):
        token_a.mint(WALLET, 5)
        token_b.mint(WALLET, 7)
        chain.emit(Sync(address=TOKEN_A, reserve0=1, reserve1=1))

        transfers = chain.events_of(Transfer)
        assert [t.value for t in transfers] == [5, 7]
        assert [t.value for t in chain.events_of(Transfer, TOKEN_B)] == [7]
        assert len(chain.events_of(Sync)) == 1
        assert len(chain.events) == 3

    def test_events_is_a_copy(self, chain):
        chain.events.append(Sync(address=TOKEN_A, reserve0=1, reserve1=1))
        assert chain.events == []

    def test_clear_events_keeps_newest(self, chain, token_a):
        for amount in (1, 2, 3):
            token_a.mint(WALLET, amount)

        assert chain.clear_events(keep=1) == 2
        assert [t.value for t in chain.events_of(Transfer)] == [3]
        assert chain.clear_events() == 1
        assert chain.events == []
        assert chain.clear_events() == 0

    def test_clear_events_leaves_state(self, chain, token_a):
        token_a.mint(WALLET, 5)
        chain.clear_events()
        assert token_a.balance_of(WALLET) == 5

    def test_clear_events_negative_keep_raises(self, chain):
        with pytest.raises(ValueError, match="negative"):
            chain.clear_events(keep=-1)

    def test_clear_events_inside_transaction_raises(self, chain, token_a):
        token_a.mint(WALLET, 5)
        with chain.transaction():
            with pytest.raises(RuntimeError, match="inside a transaction"):
                chain.clear_events()
        assert len(chain.events) == 1
        # Closed transactions, including failed ones, release the log
        with pytest.raises(RuntimeError, match="boom"):
            with chain.transaction():
                raise RuntimeError("boom")
        assert chain.clear_events() == 1


class TestTransactions:
    def test_commit_keeps_changes(self, chain, token_a):
        with chain.transaction():
            token_a.mint(WALLET, 100)
        assert token_a.balance_of(WALLET) == 100

    def test_failure_rolls_back_state_and_events(self, chain, token_a):
        token_a.mint(WALLET, 100)
        events_before = len(chain.events)

        with pytest.raises(RuntimeError, match="boom"):
            with chain.transaction():
                token_a.transfer(WALLET, OTHER, 40)
                raise RuntimeError("boom")

        assert token_a.balance_of(WALLET) == 100
        assert token_a.balance_of(OTHER) == 0
        assert len(chain.events) == events_before

    def test_nested_failure_only_rolls_back_inner(self, chain, token_a):
        with chain.transaction():
            token_a.mint(WALLET, 10)
            with pytest.raises(RuntimeError):
                with chain.transaction():
                    token_a.mint(WALLET, 5)
                    raise RuntimeError("inner")
            assert token_a.balance_of(WALLET) == 10
        assert token_a.balance_of(WALLET) == 10

    def test_call_returns_result(self, chain, token_a):
        token_a.mint(WALLET, 10)
        assert chain.call(token_a.transfer, WALLET, OTHER, 3) is True
        assert token_a.balance_of(OTHER) == 3

    def test_call_rolls_back_on_failure(self, chain):
        token = ERC20Token(chain, TOKEN_A)

        def mint_then_fail() -> None:
            token.mint(WALLET, 1)
            raise ValueError("nope")

        with pytest.raises(ValueError):
            chain.call(mint_then_fail)
        assert token.total_supply == 0
