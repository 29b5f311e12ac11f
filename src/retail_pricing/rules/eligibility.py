"""
Eligibility evaluation for pricing rules.

Pure functions of (rule, cart context, moment). A rule that does not apply
is normal control flow: the evaluator returns an ineligible
``EvaluationResult`` with a reason instead of raising.
"""

from datetime import datetime

from .models import (
    CartContext,
    EvaluationResult,
    PricingRule,
    PricingRuleStatus,
    PricingRuleType,
    is_timezone_aware,
)

RULE_NOT_ACTIVE = "Rule is not active"
RULE_NOT_VALID_AT_TIME = "Rule is not valid at this time"
PRODUCT_NOT_APPLICABLE = "Product not applicable"
SEGMENT_NOT_APPLICABLE = "Customer segment not applicable"
STOCK_ABOVE_THRESHOLD = "Stock level above threshold"


def sunday_based_weekday(moment: datetime) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday."""
    return (moment.weekday() + 1) % 7


def is_applicable_at(rule: PricingRule, moment: datetime) -> bool:
    """
    Check the rule's date range, weekday set and daily time window.

    Time of day is compared as zero-padded ``HH:MM`` strings; rules whose
    window would cross midnight cannot be constructed. A moment that
    disagrees with the rule bounds on carrying a timezone is never
    applicable.
    """
    if is_timezone_aware(moment) != is_timezone_aware(rule.valid_from):
        return False

    if moment < rule.valid_from:
        return False

    if rule.valid_until is not None and moment > rule.valid_until:
        return False

    if rule.applicable_days and sunday_based_weekday(moment) not in rule.applicable_days:
        return False

    if rule.time_from is not None or rule.time_until is not None:
        current_time = moment.strftime("%H:%M")

        if rule.time_from is not None and current_time < rule.time_from:
            return False

        if rule.time_until is not None and current_time > rule.time_until:
            return False

    return True


def applies_to(
    rule: PricingRule, product_id: str, category_id: str | None = None
) -> bool:
    """Check product/category scope. Exclusions win over any inclusion."""
    if product_id in rule.exclude_product_ids:
        return False

    if not rule.product_ids and not rule.category_ids:
        return True

    if product_id in rule.product_ids:
        return True

    return category_id is not None and category_id in rule.category_ids


def evaluate_eligibility(
    rule: PricingRule, context: CartContext, now: datetime | None = None
) -> EvaluationResult:
    """
    Evaluate whether a rule applies to a cart line.

    Checks run in a fixed order and stop at the first failure, so the
    returned reason always names the earliest unmet precondition.

    Args:
        rule: Rule under evaluation
        context: Cart line snapshot
        now: Moment of evaluation (defaults to ``context.current_time``)

    Returns:
        EvaluationResult with a reason when ineligible
    """
    moment = context.current_time if now is None else now
    conditions = rule.conditions

    if rule.status != PricingRuleStatus.ACTIVE:
        return EvaluationResult.ineligible(RULE_NOT_ACTIVE)

    if not is_applicable_at(rule, moment):
        return EvaluationResult.ineligible(RULE_NOT_VALID_AT_TIME)

    if not applies_to(rule, context.product_id, context.category_id):
        return EvaluationResult.ineligible(PRODUCT_NOT_APPLICABLE)

    if rule.min_quantity is not None and context.quantity < rule.min_quantity:
        return EvaluationResult.ineligible(
            f"Minimum quantity required: {rule.min_quantity}"
        )

    if rule.max_quantity is not None and context.quantity > rule.max_quantity:
        return EvaluationResult.ineligible(
            f"Maximum quantity exceeded: {rule.max_quantity}"
        )

    if rule.customer_segments and (
        context.customer_segment is None
        or context.customer_segment not in rule.customer_segments
    ):
        return EvaluationResult.ineligible(SEGMENT_NOT_APPLICABLE)

    if conditions.min_purchase_amount is not None and (
        context.cart_total is None
        or context.cart_total < conditions.min_purchase_amount
    ):
        return EvaluationResult.ineligible(
            f"Minimum purchase amount required: {conditions.min_purchase_amount}"
        )

    if (
        conditions.max_purchase_amount is not None
        and context.cart_total is not None
        and context.cart_total > conditions.max_purchase_amount
    ):
        return EvaluationResult.ineligible(
            f"Maximum purchase amount exceeded: {conditions.max_purchase_amount}"
        )

    if conditions.min_cart_items is not None and (
        context.cart_item_count is None
        or context.cart_item_count < conditions.min_cart_items
    ):
        return EvaluationResult.ineligible(
            f"Minimum cart items required: {conditions.min_cart_items}"
        )

    if (
        rule.type == PricingRuleType.INVENTORY_BASED
        and conditions.stock_threshold is not None
    ):
        if context.stock_level is None or context.stock_level > conditions.stock_threshold:
            return EvaluationResult.ineligible(STOCK_ABOVE_THRESHOLD)

    return EvaluationResult.eligible()
