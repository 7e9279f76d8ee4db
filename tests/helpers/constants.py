"""Shared pool constants for tests.

Usage:
    from tests.helpers import ONE_USDC, ONE_DAI
    # or
    from tests.helpers.constants import ONE_USDC, ONE_DAI
"""

# =============================================================================
# Token units
# =============================================================================

USDC_DECIMALS = 6
DAI_DECIMALS = 18

ONE_USDC = 10**USDC_DECIMALS
ONE_DAI = 10**DAI_DECIMALS

# =============================================================================
# Reference pool
# =============================================================================

# Two reserves of 1,000,000 normalized units each, A = 100
REFERENCE_BALANCE = 1_000_000
REFERENCE_AMP = 100

# 0.04% trade fee, 0.05% withdraw fee
TRADE_FEE_BPS = 4
WITHDRAW_FEE_BPS = 5

ONE_DAY = 86_400
