"""Factory functions for creating test pools.

Usage:
    from tests.helpers import make_pool
    # or
    from tests.helpers.factories import make_pool, make_fees

    pool = make_pool(balances=(1_000_000, 1_000_000), amp=100)
"""

from stableswap.amplification import AmplificationRamp
from stableswap.fees import FeeFraction, Fees
from stableswap.pool import PoolSnapshot, Reserve
from tests.helpers.constants import REFERENCE_AMP, REFERENCE_BALANCE, TRADE_FEE_BPS


def make_fees(
    trade_fee_bps: int = TRADE_FEE_BPS,
    withdraw_fee_bps: int = 0,
    admin_trade_fee_bps: int = 0,
    admin_withdraw_fee_bps: int = 0,
) -> Fees:
    """Create a fee schedule from basis points.

    Admin shares are fractions of the fee, so 5000 means half the fee.
    """
    return Fees(
        trade_fee=FeeFraction.from_bps(trade_fee_bps),
        withdraw_fee=FeeFraction.from_bps(withdraw_fee_bps),
        admin_trade_fee=FeeFraction.from_bps(admin_trade_fee_bps),
        admin_withdraw_fee=FeeFraction.from_bps(admin_withdraw_fee_bps),
    )


def make_pool(
    balances: tuple[int, int] = (REFERENCE_BALANCE, REFERENCE_BALANCE),
    amp: int | AmplificationRamp = REFERENCE_AMP,
    fees: Fees | None = None,
    pool_token_supply: int | None = None,
    scaling_factors: tuple[int, int] = (1, 1),
) -> PoolSnapshot:
    """Create a two-reserve pool snapshot with sensible defaults.

    Args:
        balances: Native reserve balances (default: 1,000,000 each)
        amp: Fixed amplification or a full ramp (default: A = 100)
        fees: Fee schedule (default: 0.04% trade fee, nothing else)
        pool_token_supply: Outstanding shares (default: sum of normalized
            balances, which equals D for a balanced pool)
        scaling_factors: Per-reserve scaling to the common precision

    Returns:
        PoolSnapshot ready for testing
    """
    ramp = amp if isinstance(amp, AmplificationRamp) else AmplificationRamp.fixed(amp)
    if fees is None:
        fees = make_fees()
    if pool_token_supply is None:
        pool_token_supply = sum(b * s for b, s in zip(balances, scaling_factors))
    return PoolSnapshot(
        reserves=tuple(Reserve(balance=b, scaling_factor=s) for b, s in zip(balances, scaling_factors)),
        amp=ramp,
        fees=fees,
        pool_token_supply=pool_token_supply,
    )
