"""Pytest configuration and fixtures."""

import pytest

from stableswap.pool import PoolSnapshot
from tests.helpers import WITHDRAW_FEE_BPS, make_fees, make_pool


@pytest.fixture
def reference_pool() -> PoolSnapshot:
    """Balanced 1,000,000 / 1,000,000 pool, A = 100, 0.04% trade fee."""
    return make_pool()


@pytest.fixture
def fee_pool() -> PoolSnapshot:
    """Reference pool with withdraw fees and 50% admin shares."""
    return make_pool(
        fees=make_fees(
            withdraw_fee_bps=WITHDRAW_FEE_BPS,
            admin_trade_fee_bps=5_000,
            admin_withdraw_fee_bps=5_000,
        )
    )


@pytest.fixture
def empty_pool() -> PoolSnapshot:
    """Pre-initialization pool: no reserves, no shares."""
    return make_pool(balances=(0, 0), pool_token_supply=0)
