"""StableSwap invariant engine.

Integer-only pricing for a two-reserve StableSwap pool: invariant solvers,
amplification ramp, swap and liquidity calculators, and the fee model.
Every calculator is a pure function of an immutable PoolSnapshot.

Usage:
    from stableswap import AmplificationRamp, Fees, FeeFraction, PoolSnapshot, Reserve, calc_swap_out

    pool = PoolSnapshot(
        reserves=(Reserve(1_000_000), Reserve(1_000_000)),
        amp=AmplificationRamp.fixed(100),
        fees=Fees(trade_fee=FeeFraction.from_bps(4)),
        pool_token_supply=2_000_000,
    )
    quote = calc_swap_out(pool, 0, 1, 10_000, now=0)
"""

from stableswap.amplification import AmplificationRamp
from stableswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from stableswap.errors import (
    ArithmeticOverflow,
    ConvergenceFailure,
    DivisionByZero,
    GetBalanceDidNotConverge,
    InsufficientLiquidity,
    InvalidAmplification,
    InvalidFee,
    InvalidPoolState,
    InvalidRampWindow,
    InvalidScalingFactor,
    InvalidTokenIndex,
    InvariantDidNotConverge,
    SlippageExceeded,
    StableSwapError,
    Underflow,
    ZeroAmount,
    ZeroBalance,
)
from stableswap.fees import FEE_DENOMINATOR, FeeFraction, Fees, apply_fee
from stableswap.invariant import compute_d, compute_y
from stableswap.liquidity import (
    DepositQuote,
    SharesDepositQuote,
    WithdrawOneQuote,
    WithdrawQuote,
    calc_deposit,
    calc_deposit_for_shares,
    calc_withdraw,
    calc_withdraw_one,
    virtual_price,
)
from stableswap.models import PoolStateModel, parse_pool_state
from stableswap.pool import N_COINS, PoolSnapshot, Reserve
from stableswap.swap import SwapQuote, calc_swap_out

__version__ = "0.1.0"
__all__ = [
    # Pool state
    "PoolSnapshot",
    "Reserve",
    "N_COINS",
    "AmplificationRamp",
    "Fees",
    "FeeFraction",
    "FEE_DENOMINATOR",
    "PoolStateModel",
    "parse_pool_state",
    # Config
    "EngineConfig",
    "DEFAULT_ENGINE_CONFIG",
    # Math
    "apply_fee",
    "compute_d",
    "compute_y",
    # Calculators
    "calc_swap_out",
    "calc_deposit",
    "calc_deposit_for_shares",
    "calc_withdraw",
    "calc_withdraw_one",
    "virtual_price",
    # Results
    "SwapQuote",
    "DepositQuote",
    "SharesDepositQuote",
    "WithdrawQuote",
    "WithdrawOneQuote",
    # Errors
    "StableSwapError",
    "ArithmeticOverflow",
    "Underflow",
    "DivisionByZero",
    "ConvergenceFailure",
    "InvariantDidNotConverge",
    "GetBalanceDidNotConverge",
    "InvalidRampWindow",
    "InvalidAmplification",
    "InsufficientLiquidity",
    "ZeroBalance",
    "ZeroAmount",
    "SlippageExceeded",
    "InvalidFee",
    "InvalidScalingFactor",
    "InvalidTokenIndex",
    "InvalidPoolState",
    "__version__",
]
