"""End-to-end pool lifecycle: parse state, seed, trade, ramp, and redeem.

Each step applies the returned quote to a fresh snapshot, the way a state
layer would, and checks the invariants that must hold across the sequence.
"""

from dataclasses import replace

import pytest

from stableswap import (
    calc_deposit,
    calc_swap_out,
    calc_withdraw,
    calc_withdraw_one,
    parse_pool_state,
    virtual_price,
)
from tests.helpers import ONE_DAI, ONE_DAY, ONE_USDC


@pytest.fixture
def seeded_pool():
    """USDC/DAI pool seeded with 1,000,000 of each."""
    empty = parse_pool_state(
        {
            "reserves": [{"balance": 0, "decimals": 6}, {"balance": 0, "decimals": 18}],
            "amplification": {"initialAmp": 100, "targetAmp": 100},
            "fees": {
                "tradeFee": {"numerator": 4},
                "withdrawFee": {"numerator": 5},
                "adminTradeFee": {"numerator": 5000},
                "adminWithdrawFee": {"numerator": 5000},
            },
        }
    )
    seed = calc_deposit(empty, [1_000_000 * ONE_USDC, 1_000_000 * ONE_DAI], now=0)
    return empty.with_balances(seed.new_balances, pool_token_supply=seed.pool_tokens_minted)


class TestPoolLifecycle:
    def test_seed_mints_normalized_invariant(self, seeded_pool):
        assert seeded_pool.pool_token_supply == 2_000_000 * ONE_DAI

    def test_round_trip_trading_grows_virtual_price(self, seeded_pool):
        pool = seeded_pool
        start_price = virtual_price(pool, now=0)
        for _ in range(5):
            there = calc_swap_out(pool, 0, 1, 50_000 * ONE_USDC, now=0)
            pool = pool.with_balances([there.new_balance_in, there.new_balance_out])
            back = calc_swap_out(pool, 1, 0, there.amount_out, now=0)
            pool = pool.with_balances([back.new_balance_out, back.new_balance_in])
            assert back.amount_out < 50_000 * ONE_USDC
        assert virtual_price(pool, now=0) > start_price

    def test_ramp_changes_pricing_over_time(self, seeded_pool):
        ramped = replace(seeded_pool, amp=seeded_pool.amp.start_ramp(1_000, now=0, stop_ts=7 * ONE_DAY))
        trade = 200_000 * ONE_USDC
        early = calc_swap_out(ramped, 0, 1, trade, now=0)
        late = calc_swap_out(ramped, 0, 1, trade, now=7 * ONE_DAY)
        assert early.amp == 100
        assert late.amp == 1_000
        assert late.amount_out > early.amount_out

    def test_redeem_everything(self, seeded_pool):
        pool = seeded_pool
        swap = calc_swap_out(pool, 0, 1, 100_000 * ONE_USDC, now=0)
        pool = pool.with_balances([swap.new_balance_in, swap.new_balance_out])

        burn = pool.pool_token_supply // 20
        one = calc_withdraw_one(pool, burn, 1, now=0)
        balances = pool.balances
        balances[1] = one.new_balance
        pool = pool.with_balances(balances, pool_token_supply=pool.pool_token_supply - burn)

        rest = calc_withdraw(pool, pool.pool_token_supply)
        # Only the pool-retained part of the withdraw fee is left behind
        assert rest.new_balances == tuple(f - a for f, a in zip(rest.fees, rest.admin_fees))
