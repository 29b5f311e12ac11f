"""
Core data models for the pricing rule engine.

This module contains the rule definition model (validated once, at
construction), the cart snapshot supplied per evaluation, and the
eligibility result returned by the evaluator.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from retail_pricing.shared.money import Money

_HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def is_timezone_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.utcoffset() is not None


# ================================
# ENUMERATIONS
# ================================


class PricingRuleType(str, Enum):
    """Kinds of pricing policy. Informational; evaluation runs every check."""

    TIME_BASED = "time_based"
    QUANTITY_BASED = "quantity_based"
    CUSTOMER_SEGMENT = "customer_segment"
    INVENTORY_BASED = "inventory_based"
    BUNDLE = "bundle"
    DYNAMIC_SURGE = "dynamic_surge"


class PricingRuleStatus(str, Enum):
    """Lifecycle status. Only ACTIVE rules can be eligible."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SCHEDULED = "scheduled"
    EXPIRED = "expired"


class DiscountType(str, Enum):
    """How a rule's discount_value is interpreted."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


# ================================
# RULE DEFINITION
# ================================


class PricingConditions(BaseModel):
    """Optional numeric thresholds attached to a rule."""

    min_purchase_amount: int | None = Field(
        None, ge=0, description="Minimum cart total in minor units"
    )
    max_purchase_amount: int | None = Field(
        None, ge=0, description="Maximum cart total in minor units"
    )
    min_cart_items: int | None = Field(
        None, ge=0, description="Minimum number of items in the cart"
    )
    stock_threshold: int | None = Field(
        None,
        ge=0,
        description="Inventory-based rules apply at or below this stock level",
    )
    demand_multiplier: Decimal | None = Field(
        None, ge=0, description="Surge signal carried for reporting; not evaluated"
    )

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )


class PricingRule(BaseModel):
    """
    Immutable description of one discount policy.

    All invariants are enforced when the rule is built; an inconsistent rule
    raises ``pydantic.ValidationError`` and never exists. Field names accept
    both snake_case and the camelCase used by the surrounding application.
    """

    id: str = Field(..., min_length=1, description="Rule identifier")
    business_id: str = Field(..., min_length=1, description="Owning business")
    name: str = Field(..., min_length=1, description="Display name")
    description: str | None = Field(None, description="Free-text description")
    type: PricingRuleType = Field(..., description="Kind of pricing policy")
    priority: int = Field(0, description="Higher wins among exclusive rules")
    status: PricingRuleStatus = Field(
        PricingRuleStatus.ACTIVE, description="Lifecycle status"
    )
    valid_from: datetime = Field(..., description="Inclusive start of validity")
    valid_until: datetime | None = Field(
        None, description="Inclusive end of validity (open-ended if None)"
    )
    conditions: PricingConditions = Field(default_factory=PricingConditions)
    discount_type: DiscountType = Field(..., description="Percentage or fixed amount")
    discount_value: Decimal = Field(
        ...,
        description="Percent (0-100) or fixed amount in minor units",
    )
    min_quantity: int | None = Field(None, description="Per-line minimum quantity")
    max_quantity: int | None = Field(None, description="Per-line maximum quantity")
    applicable_days: frozenset[int] = Field(
        default_factory=frozenset,
        description="Weekdays 0=Sunday..6=Saturday; empty means every day",
    )
    time_from: str | None = Field(None, description="Daily window start, HH:MM")
    time_until: str | None = Field(None, description="Daily window end, HH:MM")
    customer_segments: frozenset[str] = Field(
        default_factory=frozenset, description="Empty means any segment or none"
    )
    product_ids: frozenset[str] = Field(default_factory=frozenset)
    category_ids: frozenset[str] = Field(default_factory=frozenset)
    exclude_product_ids: frozenset[str] = Field(
        default_factory=frozenset, description="Always wins over inclusion"
    )
    is_combinable: bool = Field(
        False, description="May stack with other combinable rules on a line"
    )
    max_applications_per_transaction: int | None = Field(
        None, description="Cap on applications within one transaction"
    )
    metadata: dict[str, str] = Field(
        default_factory=dict, description="Non-normative labels (campaign IDs etc.)"
    )

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    @field_validator("time_from", "time_until")
    @classmethod
    def validate_time_format(cls, v: str | None) -> str | None:
        """Validate zero-padded 24h HH:MM so string comparison orders correctly."""
        if v is not None and not _HHMM_PATTERN.match(v):
            raise ValueError(f"Time must be zero-padded 24h HH:MM, got {v!r}")
        return v

    @field_validator("applicable_days")
    @classmethod
    def validate_weekdays(cls, v: frozenset[int]) -> frozenset[int]:
        """Validate weekday numbers are 0 (Sunday) through 6 (Saturday)."""
        invalid = sorted(day for day in v if not 0 <= day <= 6)
        if invalid:
            raise ValueError(f"Applicable days must be between 0 and 6, got {invalid}")
        return v

    @model_validator(mode="after")
    def validate_invariants(self) -> "PricingRule":
        """Enforce cross-field rule invariants."""
        if self.priority < 0:
            raise ValueError("Priority must be a non-negative number")

        if self.discount_value < 0:
            raise ValueError("Discount value cannot be negative")

        if (
            self.discount_type == DiscountType.PERCENTAGE
            and self.discount_value > 100
        ):
            raise ValueError("Percentage discount cannot exceed 100%")

        if self.min_quantity is not None and self.min_quantity < 1:
            raise ValueError("Minimum quantity must be at least 1")

        if self.max_quantity is not None and self.max_quantity < 1:
            raise ValueError("Maximum quantity must be at least 1")

        if (
            self.min_quantity is not None
            and self.max_quantity is not None
            and self.min_quantity > self.max_quantity
        ):
            raise ValueError("Minimum quantity cannot exceed maximum quantity")

        if self.valid_until is not None:
            if is_timezone_aware(self.valid_from) != is_timezone_aware(self.valid_until):
                raise ValueError(
                    "Valid from and valid until must both be timezone-aware or both naive"
                )
            if self.valid_from >= self.valid_until:
                raise ValueError("Valid from date must be before valid until date")

        if (
            self.time_from is not None
            and self.time_until is not None
            and self.time_from > self.time_until
        ):
            raise ValueError(
                f"Time window {self.time_from}-{self.time_until} crosses midnight; "
                "split it into two rules"
            )

        if (
            self.max_applications_per_transaction is not None
            and self.max_applications_per_transaction < 1
        ):
            raise ValueError("Max applications per transaction must be at least 1")

        return self

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def is_percentage(self) -> bool:
        return self.discount_type == DiscountType.PERCENTAGE

    # Import here to avoid circular dependency: the evaluator and calculator
    # take PricingRule as their first argument.

    def is_applicable_at(self, moment: datetime) -> bool:
        from .eligibility import is_applicable_at

        return is_applicable_at(self, moment)

    def applies_to(self, product_id: str, category_id: str | None = None) -> bool:
        from .eligibility import applies_to

        return applies_to(self, product_id, category_id)

    def evaluate_eligibility(
        self, context: "CartContext", now: datetime | None = None
    ) -> "EvaluationResult":
        from .eligibility import evaluate_eligibility

        return evaluate_eligibility(self, context, now)

    def calculate_discount(self, original_price: "Money") -> "Money":
        from .calculator import calculate_discount

        return calculate_discount(self, original_price)

    def apply_discount(self, original_price: "Money") -> "Money":
        from .calculator import apply_discount

        return apply_discount(self, original_price)


# ================================
# EVALUATION INPUT / OUTPUT
# ================================


@dataclass(frozen=True)
class CartContext:
    """
    Read-only snapshot of one cart line and its cart, supplied per evaluation.

    Monetary fields are integer minor units in the same currency as the line
    price. ``current_time`` must already be in the business's timezone.
    """

    product_id: str
    quantity: int
    current_time: datetime
    category_id: str | None = None
    customer_segment: str | None = None
    stock_level: int | None = None
    cart_total: int | None = None
    cart_item_count: int | None = None


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of an eligibility check; ``reason`` is set only when ineligible."""

    is_eligible: bool
    reason: str | None = None

    @classmethod
    def eligible(cls) -> "EvaluationResult":
        return cls(True)

    @classmethod
    def ineligible(cls, reason: str) -> "EvaluationResult":
        return cls(False, reason)
