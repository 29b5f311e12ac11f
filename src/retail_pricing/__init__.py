"""
Retail Pricing

A deterministic pricing and promotion rule engine supporting:
- Self-validating pricing rules (time windows, quantity bounds, segments,
  product/category scope, inventory conditions)
- Exclusive and stackable rule resolution with explicit priorities
- Integer minor-unit money arithmetic with half-up rounding
"""

from retail_pricing.engine import (
    AppliedRule,
    PotentialSaving,
    PricingEngine,
    PricingResult,
    TransactionPricing,
)
from retail_pricing.rules import (
    CartContext,
    DiscountType,
    EvaluationResult,
    PricingConditions,
    PricingRule,
    PricingRuleStatus,
    PricingRuleType,
    RuleRegistry,
    RuleResolver,
)
from retail_pricing.shared.money import Money

__version__ = "1.0.0"
__author__ = "Retail Pricing"

__all__ = [
    "PricingEngine",
    "PricingResult",
    "AppliedRule",
    "PotentialSaving",
    "TransactionPricing",
    "PricingRule",
    "PricingConditions",
    "PricingRuleType",
    "PricingRuleStatus",
    "DiscountType",
    "CartContext",
    "EvaluationResult",
    "RuleResolver",
    "RuleRegistry",
    "Money",
]
