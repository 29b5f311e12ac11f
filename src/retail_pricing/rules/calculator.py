"""
Discount calculation for a single rule against a single price.

All arithmetic stays in integer minor units with half-up rounding, so the
same inputs give the same discount on every platform.
"""

from typing import assert_never

from retail_pricing.shared.money import Money

from .models import DiscountType, PricingRule


def calculate_discount(rule: PricingRule, original_price: Money) -> Money:
    """
    Compute the discount a rule grants on a price.

    Percentage discounts are rounded half-up to the minor unit. Fixed
    discounts do not depend on the price and may exceed it; use
    ``apply_discount`` for the floored result.

    Args:
        rule: Rule supplying discount type and value
        original_price: Price the discount is computed against

    Returns:
        Discount amount in the price's currency
    """
    discount_type = rule.discount_type
    if discount_type is DiscountType.PERCENTAGE:
        return original_price.percentage(rule.discount_value)
    elif discount_type is DiscountType.FIXED_AMOUNT:
        return Money.of(rule.discount_value, original_price.currency)
    else:
        assert_never(discount_type)


def apply_discount(rule: PricingRule, original_price: Money) -> Money:
    """Return the price after the rule's discount, never below zero."""
    discount = calculate_discount(rule, original_price)

    if discount.amount >= original_price.amount:
        return Money.zero(original_price.currency)

    return original_price.subtract(discount)
