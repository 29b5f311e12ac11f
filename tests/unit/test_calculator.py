"""Unit tests for discount calculation."""

from decimal import Decimal

from retail_pricing.rules.calculator import apply_discount, calculate_discount
from retail_pricing.rules.models import DiscountType
from retail_pricing.shared.money import Money


class TestCalculateDiscount:
    """Test discount amounts per discount type."""

    def test_percentage_discount(self, make_rule, price):
        rule = make_rule(discount_value=Decimal("25"))
        assert calculate_discount(rule, price) == Money(25000, "IDR")

    def test_percentage_rounds_half_up(self, make_rule):
        rule = make_rule(discount_value=Decimal("12.5"))
        # 12.5% of 1004 = 125.5 -> 126
        assert calculate_discount(rule, Money(1004)).amount == 126
        # 12.5% of 1003 = 125.375 -> 125
        assert calculate_discount(rule, Money(1003)).amount == 125

    def test_fractional_percentage(self, make_rule):
        rule = make_rule(discount_value=Decimal("0.5"))
        assert calculate_discount(rule, Money(100000)).amount == 500

    def test_zero_percentage(self, make_rule, price):
        rule = make_rule(discount_value=Decimal("0"))
        assert calculate_discount(rule, price).is_zero()

    def test_full_percentage(self, make_rule, price):
        rule = make_rule(discount_value=Decimal("100"))
        assert calculate_discount(rule, price) == price

    def test_fixed_discount_independent_of_price(self, make_rule):
        rule = make_rule(
            discount_type=DiscountType.FIXED_AMOUNT, discount_value=Decimal("5000")
        )
        assert calculate_discount(rule, Money(100000)).amount == 5000
        assert calculate_discount(rule, Money(1000)).amount == 5000

    def test_fixed_discount_keeps_currency(self, make_rule):
        rule = make_rule(
            discount_type=DiscountType.FIXED_AMOUNT, discount_value=Decimal("150")
        )
        assert calculate_discount(rule, Money(1000, "USD")).currency == "USD"

    def test_fractional_fixed_amount_rounds_half_up(self, make_rule):
        rule = make_rule(
            discount_type=DiscountType.FIXED_AMOUNT, discount_value=Decimal("99.5")
        )
        assert calculate_discount(rule, Money(1000)).amount == 100


class TestApplyDiscount:
    """Test the floored discounted price."""

    def test_percentage_scenario(self, make_rule, price):
        rule = make_rule(discount_value=Decimal("25"))
        assert apply_discount(rule, price).amount == 75000

    def test_fixed_discount_exceeding_price_floors_at_zero(self, make_rule, price):
        rule = make_rule(
            discount_type=DiscountType.FIXED_AMOUNT, discount_value=Decimal("150000")
        )
        assert apply_discount(rule, price) == Money.zero("IDR")

    def test_fixed_discount_equal_to_price(self, make_rule, price):
        rule = make_rule(
            discount_type=DiscountType.FIXED_AMOUNT, discount_value=Decimal("100000")
        )
        assert apply_discount(rule, price).is_zero()

    def test_zero_price(self, make_rule):
        rule = make_rule(discount_value=Decimal("50"))
        assert apply_discount(rule, Money.zero()).is_zero()

    def test_rule_methods_delegate(self, make_rule, price):
        rule = make_rule(discount_value=Decimal("10"))
        assert rule.calculate_discount(price).amount == 10000
        assert rule.apply_discount(price).amount == 90000
