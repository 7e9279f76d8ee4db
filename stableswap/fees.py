"""Fee schedule and fee rounding.

Fees are (numerator, denominator) fractions. Rounding always favors the pool
and its remaining holders: fees taken from what the acting party receives
round up, and admin shares are carved out of the already-rounded fee,
rounding down, so rounding never leaks value out of the pool.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stableswap.errors import InvalidFee
from stableswap.math.fixed_point import Rounding, mul_div

# Basis-point denominator used by FeeFraction.from_bps
FEE_DENOMINATOR = 10_000


@dataclass(frozen=True)
class FeeFraction:
    """A fee rate as numerator / denominator.

    Attributes:
        numerator: Fee numerator, 0 <= numerator <= denominator
        denominator: Fee denominator, > 0
    """

    numerator: int
    denominator: int = FEE_DENOMINATOR

    def __post_init__(self) -> None:
        if self.denominator <= 0:
            raise InvalidFee(f"Fee denominator must be positive, got {self.denominator}")
        if not 0 <= self.numerator <= self.denominator:
            raise InvalidFee(
                f"Fee numerator must be in [0, {self.denominator}], got {self.numerator}"
            )

    @classmethod
    def from_bps(cls, bps: int) -> FeeFraction:
        """Create a fee from basis points (4 -> 0.04%)."""
        return cls(numerator=bps, denominator=FEE_DENOMINATOR)

    @classmethod
    def zero(cls) -> FeeFraction:
        return cls(numerator=0)

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0


def apply_fee(amount: int, fraction: FeeFraction, round_up: bool) -> int:
    """Return amount * fraction, rounded in the requested direction.

    Args:
        amount: Amount the fee is charged on (non-negative)
        fraction: Fee rate
        round_up: True for fees charged to the acting party, False for
            shares carved out of an existing fee

    Returns:
        Fee amount, never larger than `amount`
    """
    if amount == 0 or fraction.is_zero:
        return 0
    rounding = Rounding.UP if round_up else Rounding.DOWN
    return mul_div(amount, fraction.numerator, fraction.denominator, rounding)


@dataclass(frozen=True)
class Fees:
    """Pool fee schedule.

    Attributes:
        trade_fee: Charged on swap output
        withdraw_fee: Charged on withdrawn amounts
        admin_trade_fee: Share of the trade fee that goes to the admin
        admin_withdraw_fee: Share of the withdraw fee that goes to the admin
    """

    trade_fee: FeeFraction = field(default_factory=FeeFraction.zero)
    withdraw_fee: FeeFraction = field(default_factory=FeeFraction.zero)
    admin_trade_fee: FeeFraction = field(default_factory=FeeFraction.zero)
    admin_withdraw_fee: FeeFraction = field(default_factory=FeeFraction.zero)

    def trade_fee_amount(self, amount: int) -> int:
        """Trade fee on an output amount, rounded up."""
        return apply_fee(amount, self.trade_fee, round_up=True)

    def withdraw_fee_amount(self, amount: int) -> int:
        """Withdraw fee on a withdrawn amount, rounded up."""
        return apply_fee(amount, self.withdraw_fee, round_up=True)

    def admin_trade_fee_amount(self, fee_amount: int) -> int:
        """Admin share of an already-charged trade fee, rounded down."""
        return apply_fee(fee_amount, self.admin_trade_fee, round_up=False)

    def admin_withdraw_fee_amount(self, fee_amount: int) -> int:
        """Admin share of an already-charged withdraw fee, rounded down."""
        return apply_fee(fee_amount, self.admin_withdraw_fee, round_up=False)

    def normalized_trade_fee(self, n_coins: int, amount: int) -> int:
        """Trade fee scaled by n / (4 * (n - 1)), rounded up.

        Charged on the imbalance of deposits and single-sided withdrawals,
        which are economically a partial swap. For two reserves this is
        half the trade fee.
        """
        if amount == 0 or self.trade_fee.is_zero:
            return 0
        return mul_div(
            amount,
            self.trade_fee.numerator * n_coins,
            self.trade_fee.denominator * 4 * (n_coins - 1),
            Rounding.UP,
        )
