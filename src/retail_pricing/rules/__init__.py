"""
Pricing rule definitions, eligibility evaluation, discount calculation,
and multi-rule resolution.
"""

from .calculator import apply_discount, calculate_discount
from .eligibility import applies_to, evaluate_eligibility, is_applicable_at
from .loader import load_rules_from_file, parse_rules
from .models import (
    CartContext,
    DiscountType,
    EvaluationResult,
    PricingConditions,
    PricingRule,
    PricingRuleStatus,
    PricingRuleType,
)
from .registry import RuleRegistry
from .resolver import AppliedDiscount, Resolution, RuleResolver

__all__ = [
    # Models
    "PricingRule",
    "PricingConditions",
    "PricingRuleType",
    "PricingRuleStatus",
    "DiscountType",
    "CartContext",
    "EvaluationResult",
    # Evaluation
    "evaluate_eligibility",
    "is_applicable_at",
    "applies_to",
    # Calculation
    "calculate_discount",
    "apply_discount",
    # Resolution
    "RuleResolver",
    "Resolution",
    "AppliedDiscount",
    # Snapshots and hydration
    "RuleRegistry",
    "parse_rules",
    "load_rules_from_file",
]
