"""
Earning Calculator for parcel pickups

Piecework pay per logged batch, one pricing rule per courier:

    SPX:   only the first 100 parcels of a batch are incentivized.
           Base ₱0.50 per incentivized parcel, plus a ₱0.50 bonus per
           incentivized parcel when picked up the same day.
           Example: 150 parcels, same day = (100 × 0.50) + (100 × 0.50) = ₱100.00
    Flash: at most 30 parcels per batch, paid a flat ₱3.00 each.

All amounts are Decimal, quantized to the centavo.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

from .models import Courier

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

SPX_INCENTIVE_CAP = 100
SPX_BASE_RATE = Decimal('0.50')
SPX_SAME_DAY_BONUS = Decimal('0.50')

FLASH_PARCEL_CAP = 30
FLASH_RATE = Decimal('3.00')


def to_money(amount) -> Decimal:
    """Quantize any numeric amount to two decimals."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


class PricingRule:
    """Earning formula for a single courier."""

    def earning(self, quantity: int, picked_up_same_day: bool) -> Decimal:
        raise NotImplementedError


class SpxPricing(PricingRule):

    def earning(self, quantity: int, picked_up_same_day: bool) -> Decimal:
        incentivized = min(quantity, SPX_INCENTIVE_CAP)
        rate = SPX_BASE_RATE
        if picked_up_same_day:
            rate += SPX_SAME_DAY_BONUS
        return to_money(incentivized * rate)


class FlashPricing(PricingRule):

    def earning(self, quantity: int, picked_up_same_day: bool) -> Decimal:
        # Same-day pickup does not change Flash pay
        return to_money(min(quantity, FLASH_PARCEL_CAP) * FLASH_RATE)


PRICING_RULES: Dict[str, PricingRule] = {
    Courier.SPX: SpxPricing(),
    Courier.FLASH: FlashPricing(),
}


def calculate_earning(courier, quantity: int, picked_up_same_day: bool = False) -> Decimal:
    """
    Compute the earning of one parcel batch.

    Args:
        courier: Courier value ('SPX' or 'Flash')
        quantity: Number of parcels in the batch (validated upstream, >= 0)
        picked_up_same_day: Same-day pickup flag (SPX bonus only)

    Returns:
        Decimal amount with two decimals. Unknown couriers earn 0.00.
    """
    rule = PRICING_RULES.get(courier)
    if rule is None:
        logger.warning(f"[PARCELS] No pricing rule for courier {courier!r}, earning set to 0.00")
        return ZERO
    return rule.earning(max(int(quantity), 0), bool(picked_up_same_day))
