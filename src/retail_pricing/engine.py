"""
Pricing engine facade.

Combines eligibility evaluation, rule resolution and discount calculation
into a priced line with an audit trail of applied rules. The engine holds
only immutable configuration, so one instance can serve concurrent callers.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Any

from retail_pricing.config.models import PricingEngineConfig
from retail_pricing.config.settings import load_config
from retail_pricing.rules.calculator import calculate_discount
from retail_pricing.rules.eligibility import evaluate_eligibility
from retail_pricing.rules.models import (
    CartContext,
    DiscountType,
    EvaluationResult,
    PricingRule,
)
from retail_pricing.rules.resolver import Resolution, RuleResolver
from retail_pricing.shared.exceptions import CurrencyMismatchError
from retail_pricing.shared.logging_config import configure_structured_logging
from retail_pricing.shared.logging_utils import get_structured_logger
from retail_pricing.shared.money import Money

logger = logging.getLogger(__name__)
audit_logger = get_structured_logger("retail_pricing.audit")


@dataclass(frozen=True)
class AppliedRule:
    """Audit entry for one rule applied to a line."""

    rule_id: str
    rule_name: str
    discount_type: DiscountType
    discount_value: Decimal
    discount_applied: Money

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "discount_type": self.discount_type.value,
            "discount_value": str(self.discount_value),
            "discount_applied": self.discount_applied.amount,
        }


@dataclass(frozen=True)
class PricingResult:
    """Priced cart line: final price, total discount and per-rule breakdown."""

    original_price: Money
    final_price: Money
    total_discount: Money
    applied_rules: tuple[AppliedRule, ...] = ()
    savings_percentage: Decimal = Decimal("0")

    @property
    def applied_rule_ids(self) -> tuple[str, ...]:
        return tuple(applied.rule_id for applied in self.applied_rules)

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible representation for audit storage."""
        return {
            "currency": self.original_price.currency,
            "original_price": self.original_price.amount,
            "final_price": self.final_price.amount,
            "total_discount": self.total_discount.amount,
            "savings_percentage": str(self.savings_percentage),
            "applied_rules": [applied.to_dict() for applied in self.applied_rules],
        }


@dataclass(frozen=True)
class PotentialSaving:
    """What a customer would save by adding items to reach a rule's minimum."""

    rule: PricingRule
    required_quantity: int
    potential_saving: Money


@dataclass(frozen=True)
class TransactionPricing:
    """All lines of one transaction priced with per-transaction caps enforced."""

    lines: tuple[PricingResult, ...]
    total_original: Money
    total_final: Money
    total_discount: Money
    applications: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({})
    )


class PricingEngine:
    """
    Facade that prices cart lines against a caller-supplied rule snapshot.

    Every public method is a function of its explicit arguments: the rule
    collection, the cart context and the original price. Rules are never
    fetched or cached here.
    """

    def __init__(
        self,
        config: PricingEngineConfig | None = None,
        resolver: RuleResolver | None = None,
    ):
        """
        Initialize pricing engine.

        Args:
            config: Engine settings (defaults apply when omitted)
            resolver: Rule resolver; a fresh stateless one by default
        """
        self.config = config or PricingEngineConfig()
        self.resolver = resolver or RuleResolver()

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> "PricingEngine":
        """
        Build an engine from ``load_config`` and set up logging at its level.

        Args:
            config_path: Config file or directory; the usual locations are
                searched when omitted

        Returns:
            PricingEngine using the loaded configuration
        """
        config = load_config(config_path)
        configure_structured_logging(config.log_level)
        logger.info(f"Pricing engine configured (log level {config.log_level})")
        return cls(config)

    def _savings_percentage(self, original: Money, discount: Money) -> Decimal:
        quantum = Decimal(1).scaleb(-self.config.savings_precision)
        if original.amount == 0:
            return Decimal(0).quantize(quantum)
        ratio = Decimal(discount.amount) * 100 / Decimal(original.amount)
        return ratio.quantize(quantum, rounding=ROUND_HALF_UP)

    def _to_result(self, resolution: Resolution) -> PricingResult:
        applied = tuple(
            AppliedRule(
                rule_id=item.rule.id,
                rule_name=item.rule.name,
                discount_type=item.rule.discount_type,
                discount_value=item.rule.discount_value,
                discount_applied=item.discount_applied,
            )
            for item in resolution.applied
        )
        total_discount = resolution.total_discount
        return PricingResult(
            original_price=resolution.original_price,
            final_price=resolution.final_price,
            total_discount=total_discount,
            applied_rules=applied,
            savings_percentage=self._savings_percentage(
                resolution.original_price, total_discount
            ),
        )

    def price_line(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        original_price: Money,
        now: datetime | None = None,
        applications: Mapping[str, int] | None = None,
    ) -> PricingResult:
        """
        Price a single cart line.

        Args:
            rules: Rule snapshot for the business
            context: Cart line snapshot
            original_price: Line price before discounts
            now: Moment of evaluation (defaults to ``context.current_time``)
            applications: Per-rule application counts already consumed in the
                current transaction, when the caller tracks caps itself

        Returns:
            PricingResult with final price and applied-rule breakdown
        """
        resolution = self.resolver.resolve(
            rules, context, original_price, now=now, applications=applications
        )
        result = self._to_result(resolution)

        if self.config.audit_log_enabled:
            audit_logger.info(
                "Priced cart line",
                product_id=context.product_id,
                quantity=context.quantity,
                evaluated_at=(now or context.current_time).isoformat(),
                **result.to_dict(),
            )

        return result

    def preview_applicable_rules(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        now: datetime | None = None,
    ) -> list[PricingRule]:
        """Return the eligible rules, highest priority first, without pricing."""
        return self.resolver.eligible_rules(rules, context, now)

    def explain(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        now: datetime | None = None,
    ) -> dict[str, EvaluationResult]:
        """Evaluate every rule and return its result keyed by rule id, sorted by id."""
        results = {
            rule.id: evaluate_eligibility(rule, context, now) for rule in rules
        }
        return dict(sorted(results.items()))

    def calculate_potential_savings(
        self,
        rules: Iterable[PricingRule],
        context: CartContext,
        original_price: Money,
    ) -> list[PotentialSaving]:
        """
        Find rules the line would qualify for with a larger quantity.

        Only rules failing on their minimum quantity are considered; each is
        re-evaluated at that minimum and its discount computed on the
        original price.

        Returns:
            Savings opportunities, largest saving first (ties by rule id)
        """
        savings = []

        for rule in rules:
            if rule.min_quantity is None or context.quantity >= rule.min_quantity:
                continue

            upsized = replace(context, quantity=rule.min_quantity)
            if not evaluate_eligibility(rule, upsized).is_eligible:
                continue

            savings.append(
                PotentialSaving(
                    rule=rule,
                    required_quantity=rule.min_quantity - context.quantity,
                    potential_saving=calculate_discount(rule, original_price).min(
                        original_price
                    ),
                )
            )

        return sorted(
            savings, key=lambda saving: (-saving.potential_saving.amount, saving.rule.id)
        )

    def price_transaction(
        self,
        lines: Iterable[tuple[CartContext, Money]],
        rules: Iterable[PricingRule],
        now: datetime | None = None,
    ) -> TransactionPricing:
        """
        Price every line of one transaction in order.

        ``max_applications_per_transaction`` is enforced across the lines
        with a counter local to this call: once a rule reaches its cap it is
        skipped for the remaining lines.

        Args:
            lines: ``(context, original_price)`` pairs, all in one currency
            rules: Rule snapshot for the business
            now: Moment of evaluation (defaults to each line's current_time)

        Returns:
            TransactionPricing with per-line results and totals

        Raises:
            CurrencyMismatchError: If lines use different currencies
        """
        snapshot = tuple(rules)
        applications: Counter[str] = Counter()
        results: list[PricingResult] = []

        with audit_logger.correlation():
            for context, original_price in lines:
                if results and original_price.currency != results[0].original_price.currency:
                    raise CurrencyMismatchError(
                        results[0].original_price.currency, original_price.currency
                    )

                result = self.price_line(
                    snapshot, context, original_price, now=now, applications=applications
                )
                applications.update(result.applied_rule_ids)
                results.append(result)

            currency = (
                results[0].original_price.currency
                if results
                else self.config.default_currency
            )
            total_original = Money.zero(currency)
            total_final = Money.zero(currency)
            for result in results:
                total_original = total_original.add(result.original_price)
                total_final = total_final.add(result.final_price)

            if self.config.audit_log_enabled:
                audit_logger.debug(
                    "Priced transaction",
                    lines=len(results),
                    currency=currency,
                    total_discount=total_original.amount - total_final.amount,
                )

        return TransactionPricing(
            lines=tuple(results),
            total_original=total_original,
            total_final=total_final,
            total_discount=total_original.subtract(total_final),
            applications=MappingProxyType(dict(applications)),
        )
