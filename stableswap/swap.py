"""Swap calculator.

Prices an exact-input swap between the two reserves of a pool snapshot.
The fee is charged on the output side, so the trader receives
raw_amount_out - trade_fee and the invariant grows by the retained fee.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from stableswap.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from stableswap.errors import InvalidTokenIndex, SlippageExceeded, ZeroAmount
from stableswap.invariant import compute_d, compute_y
from stableswap.math.fixed_point import Rounding
from stableswap.pool import PoolSnapshot, scale_down_down, scale_up
from stableswap.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwapQuote:
    """Result of a swap calculation, in native token units.

    Attributes:
        amount_in: Input amount added to the input reserve
        amount_out: Net amount paid to the trader
        raw_amount_out: Output before fees (amount_out + trade_fee)
        trade_fee: Total fee charged on the output, admin share included
        admin_fee: Part of trade_fee that leaves the pool for the admin
        new_balance_in: Input reserve after the swap
        new_balance_out: Output reserve after paying amount_out and admin_fee
        amp: Effective amplification used for the quote
    """

    amount_in: int
    amount_out: int
    raw_amount_out: int
    trade_fee: int
    admin_fee: int
    new_balance_in: int
    new_balance_out: int
    amp: int


def _validate_indices(pool: PoolSnapshot, token_index_in: int, token_index_out: int) -> None:
    n_coins = pool.n_coins
    if token_index_in < 0 or token_index_in >= n_coins:
        raise InvalidTokenIndex(f"token_index_in {token_index_in} out of range for {n_coins} tokens")
    if token_index_out < 0 or token_index_out >= n_coins:
        raise InvalidTokenIndex(f"token_index_out {token_index_out} out of range for {n_coins} tokens")
    if token_index_in == token_index_out:
        raise InvalidTokenIndex("Cannot swap token with itself")


def calc_swap_out(
    pool: PoolSnapshot,
    token_index_in: int,
    token_index_out: int,
    amount_in: int,
    now: int,
    minimum_amount_out: int = 0,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> SwapQuote:
    """Calculate the output of selling amount_in of one reserve for the other.

    Algorithm:
        1. A = effective amplification at `now`
        2. D = invariant at current (normalized) balances
        3. y = output balance that holds D after adding amount_in, rounded up
        4. raw = old_balance_out - y - 1 (1 unit rounding protection)
        5. fee = raw * trade_fee (rounded up), admin_fee = fee * admin share
        6. amount_out = raw - fee

    Since y >= 0, raw is always below the output balance, so a swap never
    empties a reserve. An empty output reserve fails earlier in compute_d.

    Args:
        pool: Current pool snapshot
        token_index_in: Index of the reserve being sold
        token_index_out: Index of the reserve being bought
        amount_in: Input amount in native units
        now: Current timestamp, for the amplification ramp
        minimum_amount_out: Reject the quote if amount_out falls below this
        config: Engine configuration

    Returns:
        SwapQuote. A trade too small to move the output balance yields a
        quote with amount_out == 0.

    Raises:
        ZeroAmount: If amount_in is zero
        InvalidTokenIndex: If indices are out of range or equal
        ZeroBalance: If either reserve is empty
        SlippageExceeded: If amount_out < minimum_amount_out
        ConvergenceFailure: If either solver fails to converge
        ArithmeticOverflow: If any intermediate overflows
    """
    _validate_indices(pool, token_index_in, token_index_out)
    if amount_in <= 0:
        raise ZeroAmount("Swap amount_in must be positive")

    reserve_in = pool.reserves[token_index_in]
    reserve_out = pool.reserves[token_index_out]

    amp = pool.amp.effective_amp(now)
    xp = pool.normalized_balances()
    d = compute_d(amp, xp, config.max_iterations)

    new_xp = list(xp)
    new_xp[token_index_in] = (S(xp[token_index_in]) + scale_up(amount_in, reserve_in.scaling_factor)).value
    new_y = compute_y(amp, new_xp, d, token_index_out, config.max_iterations, rounding=Rounding.UP)

    dy = xp[token_index_out] - new_y - 1
    raw_amount_out = scale_down_down(dy, reserve_out.scaling_factor) if dy > 0 else 0

    trade_fee = pool.fees.trade_fee_amount(raw_amount_out)
    admin_fee = pool.fees.admin_trade_fee_amount(trade_fee)
    amount_out = raw_amount_out - trade_fee

    if amount_out < minimum_amount_out:
        raise SlippageExceeded(f"Swap output {amount_out} below minimum {minimum_amount_out}")

    if raw_amount_out == 0:
        logger.debug(
            "swap_zero_output",
            amount_in=amount_in,
            token_index_in=token_index_in,
            token_index_out=token_index_out,
        )

    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        raw_amount_out=raw_amount_out,
        trade_fee=trade_fee,
        admin_fee=admin_fee,
        new_balance_in=reserve_in.balance + amount_in,
        new_balance_out=(S(reserve_out.balance) - amount_out - admin_fee).value,
        amp=amp,
    )
