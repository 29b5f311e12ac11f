"""
Multi-rule resolution for a single cart line.

Eligible rules are split into exclusive and combinable sets. The single
highest-priority exclusive rule (ties broken by lowest id) is kept together
with every combinable rule, and the resulting set is applied lowest priority
first, each discount computed on the price left by the previous one.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from retail_pricing.shared.money import Money

from .calculator import calculate_discount
from .eligibility import evaluate_eligibility
from .models import CartContext, PricingRule

logger = logging.getLogger(__name__)


def priority_order_key(rule: PricingRule) -> tuple[int, str]:
    """Sort key: highest priority first, then lowest id."""
    return (-rule.priority, rule.id)


def application_order_key(rule: PricingRule) -> tuple[int, str]:
    """Sort key: lowest priority first, then lowest id."""
    return (rule.priority, rule.id)


def is_saturated(rule: PricingRule, applications: Mapping[str, int] | None) -> bool:
    """True when the rule already reached its per-transaction cap."""
    if rule.max_applications_per_transaction is None or not applications:
        return False
    return applications.get(rule.id, 0) >= rule.max_applications_per_transaction


@dataclass(frozen=True)
class AppliedDiscount:
    """One rule's contribution to a line: the amount actually taken off."""

    rule: PricingRule
    discount_applied: Money


@dataclass(frozen=True)
class Resolution:
    """Ordered discounts applied to a line and the resulting price."""

    original_price: Money
    final_price: Money
    applied: tuple[AppliedDiscount, ...]

    @property
    def total_discount(self) -> Money:
        return self.original_price.subtract(self.final_price)

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(item.rule.id for item in self.applied)


class RuleResolver:
    """
    Stateless resolver deciding which rules apply to a line and in what order.

    The rule collection passed in is treated as a read-only snapshot for the
    duration of one call; nothing is cached between calls.
    """

    def _unique(self, rules: Iterable[PricingRule]) -> list[PricingRule]:
        """Drop repeated rules; conflicting definitions sharing an id are an error."""
        seen: dict[str, PricingRule] = {}
        for rule in rules:
            existing = seen.get(rule.id)
            if existing is None:
                seen[rule.id] = rule
            elif existing != rule:
                raise ValueError(f"Conflicting pricing rules share id '{rule.id}'")
        return list(seen.values())

    def eligible_rules(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        now: datetime | None = None,
        applications: Mapping[str, int] | None = None,
    ) -> list[PricingRule]:
        """
        Filter rules to those eligible for the line.

        Args:
            rules: Candidate rules for the business
            context: Cart line snapshot
            now: Moment of evaluation (defaults to ``context.current_time``)
            applications: Per-rule application counts already consumed in
                the current transaction; saturated rules are skipped

        Returns:
            Eligible rules, highest priority first (ties by lowest id)
        """
        eligible = []
        for rule in self._unique(rules):
            result = evaluate_eligibility(rule, context, now)
            if not result.is_eligible:
                logger.debug(f"Rule {rule.id} skipped: {result.reason}")
                continue
            if is_saturated(rule, applications):
                logger.debug(
                    f"Rule {rule.id} skipped: reached "
                    f"{rule.max_applications_per_transaction} applications"
                )
                continue
            eligible.append(rule)

        return sorted(eligible, key=priority_order_key)

    def select(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        now: datetime | None = None,
        applications: Mapping[str, int] | None = None,
    ) -> list[PricingRule]:
        """Pick the exclusive winner plus every combinable rule, in application order."""
        eligible = self.eligible_rules(rules, context, now, applications)

        exclusive = [rule for rule in eligible if not rule.is_combinable]
        combinable = [rule for rule in eligible if rule.is_combinable]

        # eligible is already in priority order, so the first exclusive wins
        selected = combinable + exclusive[:1]
        if len(exclusive) > 1:
            logger.debug(
                f"Exclusive rule {exclusive[0].id} wins over "
                f"{[rule.id for rule in exclusive[1:]]}"
            )

        return sorted(selected, key=application_order_key)

    def resolve(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        original_price: Money,
        now: datetime | None = None,
        applications: Mapping[str, int] | None = None,
    ) -> Resolution:
        """
        Resolve and apply the winning rule combination for one line.

        Each selected rule's discount is computed against the price left by
        the previous rule and capped at that remaining price, so the price
        floors at zero and the per-rule amounts sum to the total discount.

        Args:
            rules: Candidate rules for the business
            context: Cart line snapshot
            original_price: Line price before discounts
            now: Moment of evaluation (defaults to ``context.current_time``)
            applications: Per-rule application counts already consumed in
                the current transaction

        Returns:
            Resolution with the applied discounts and final price
        """
        current_price = original_price
        applied: list[AppliedDiscount] = []

        for rule in self.select(rules, context, now, applications):
            discount = calculate_discount(rule, current_price)
            taken = discount.min(current_price)
            current_price = current_price.subtract(taken)
            applied.append(AppliedDiscount(rule=rule, discount_applied=taken))

        return Resolution(
            original_price=original_price,
            final_price=current_price,
            applied=tuple(applied),
        )
