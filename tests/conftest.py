"""
Pytest configuration and fixtures for retail pricing engine tests.

Provides rule and cart-context factories plus fixed timestamps. January 2024
starts on a Monday, which keeps weekday arithmetic in tests easy to read.
"""

import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure src/ is on sys.path for local test runs without installation
_SRC = Path(__file__).resolve().parents[1] / "src"
if _SRC.exists() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from retail_pricing.rules.models import (  # noqa: E402
    CartContext,
    DiscountType,
    PricingRule,
    PricingRuleType,
)
from retail_pricing.shared.money import Money  # noqa: E402

MONDAY_AFTERNOON = datetime(2024, 1, 8, 15, 0)


def build_rule(**overrides) -> PricingRule:
    """Build a valid, broadly applicable 10% rule with field overrides."""
    fields = {
        "id": "rule-001",
        "business_id": "biz-001",
        "name": "Storewide 10%",
        "type": PricingRuleType.TIME_BASED,
        "priority": 1,
        "valid_from": datetime(2024, 1, 1),
        "valid_until": datetime(2024, 12, 31, 23, 59),
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
    }
    fields.update(overrides)
    return PricingRule(**fields)


def build_context(**overrides) -> CartContext:
    """Build a single-unit cart line evaluated on a Monday afternoon."""
    fields = {
        "product_id": "prod-001",
        "category_id": "cat-drinks",
        "quantity": 1,
        "current_time": MONDAY_AFTERNOON,
    }
    fields.update(overrides)
    return CartContext(**fields)


@pytest.fixture(scope="session")
def make_rule():
    """Factory fixture for PricingRule instances."""
    return build_rule


@pytest.fixture(scope="session")
def make_context():
    """Factory fixture for CartContext instances."""
    return build_context


@pytest.fixture
def price() -> Money:
    """Line price of 100,000 minor units."""
    return Money(100000, "IDR")


@pytest.fixture
def sample_rule_definitions() -> list[dict]:
    """Rule payloads as the surrounding application sends them (camelCase)."""
    return [
        {
            "id": "happy-hour",
            "businessId": "biz-001",
            "name": "Happy Hour - 30% Off",
            "description": "30% off every product 14:00-16:00 on weekdays",
            "type": "time_based",
            "priority": 10,
            "status": "active",
            "validFrom": "2024-01-01T00:00:00",
            "validUntil": "2024-12-31T23:59:00",
            "conditions": {},
            "discountType": "percentage",
            "discountValue": 30,
            "minQuantity": None,
            "maxQuantity": None,
            "applicableDays": [1, 2, 3, 4, 5],
            "timeFrom": "14:00",
            "timeUntil": "16:00",
            "customerSegments": [],
            "productIds": [],
            "categoryIds": [],
            "excludeProductIds": [],
            "isCombinable": False,
            "maxApplicationsPerTransaction": None,
            "metadata": {"campaignId": "happy-hour-2024"},
        },
        {
            "id": "buy-3-save",
            "businessId": "biz-001",
            "name": "Buy 3 Save 25%",
            "type": "quantity_based",
            "priority": 8,
            "status": "active",
            "validFrom": "2024-01-01T00:00:00",
            "validUntil": "2024-12-31T23:59:00",
            "conditions": {"minCartItems": 3},
            "discountType": "percentage",
            "discountValue": 25,
            "minQuantity": 3,
            "productIds": ["prod-001", "prod-002"],
            "isCombinable": True,
            "maxApplicationsPerTransaction": 1,
        },
        {
            "id": "vip-5000",
            "businessId": "biz-001",
            "name": "VIP 5,000 off",
            "type": "customer_segment",
            "priority": 5,
            "validFrom": "2024-01-01T00:00:00",
            "conditions": {"minPurchaseAmount": 50000},
            "discountType": "fixed_amount",
            "discountValue": 5000,
            "customerSegments": ["vip", "gold"],
            "isCombinable": True,
        },
        {
            "id": "clearance",
            "businessId": "biz-001",
            "name": "Low stock clearance",
            "type": "inventory_based",
            "priority": 3,
            "validFrom": "2024-01-01T00:00:00",
            "conditions": {"stockThreshold": 10},
            "discountType": "percentage",
            "discountValue": 50,
            "categoryIds": ["cat-snacks"],
            "excludeProductIds": ["prod-009"],
            "isCombinable": False,
        },
    ]
