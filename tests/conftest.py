"""Pytest configuration and fixtures."""

import pytest

from pairengine import Chain, ERC20Token, Factory, Pair
from tests.helpers.constants import FACTORY, FEE_SETTER, GENESIS_TIMESTAMP, TOKEN_A, TOKEN_B
from tests.helpers.factories import make_pair


@pytest.fixture
def chain() -> Chain:
    """A fresh chain pinned at GENESIS_TIMESTAMP."""
    chain = Chain()
    chain.warp(GENESIS_TIMESTAMP)
    return chain


# =============================================================================
# Unpaired deployments (for factory and token tests)
# =============================================================================


@pytest.fixture
def token_a(chain: Chain) -> ERC20Token:
    return ERC20Token(chain, TOKEN_A, "Token A", "TKA")


@pytest.fixture
def token_b(chain: Chain) -> ERC20Token:
    return ERC20Token(chain, TOKEN_B, "Token B", "TKB")


@pytest.fixture
def empty_factory(chain: Chain) -> Factory:
    """A factory with no pairs yet."""
    return Factory(chain, FACTORY, fee_to_setter=FEE_SETTER)


# =============================================================================
# Created pair (do not combine with the fixtures above)
# =============================================================================


@pytest.fixture
def deployed(chain: Chain) -> tuple[Chain, Factory, Pair, ERC20Token, ERC20Token]:
    """A created pair with sorted tokens: (chain, factory, pair, token0, token1)."""
    return make_pair(chain=chain)


@pytest.fixture
def factory(deployed) -> Factory:
    return deployed[1]


@pytest.fixture
def pair(deployed) -> Pair:
    return deployed[2]


@pytest.fixture
def token0(deployed) -> ERC20Token:
    return deployed[3]


@pytest.fixture
def token1(deployed) -> ERC20Token:
    return deployed[4]
