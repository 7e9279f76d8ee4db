"""Test helpers module for shared test utilities.

- constants: Reference pool parameters and token units
- factories: Pool and fee factory functions
"""

from tests.helpers.constants import (
    DAI_DECIMALS,
    ONE_DAI,
    ONE_DAY,
    ONE_USDC,
    REFERENCE_AMP,
    REFERENCE_BALANCE,
    TRADE_FEE_BPS,
    USDC_DECIMALS,
    WITHDRAW_FEE_BPS,
)
from tests.helpers.factories import make_fees, make_pool

__all__ = [
    # Constants
    "ONE_USDC",
    "ONE_DAI",
    "USDC_DECIMALS",
    "DAI_DECIMALS",
    "ONE_DAY",
    "REFERENCE_AMP",
    "REFERENCE_BALANCE",
    "TRADE_FEE_BPS",
    "WITHDRAW_FEE_BPS",
    # Factories
    "make_pool",
    "make_fees",
]
