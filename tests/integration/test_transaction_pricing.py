"""
Integration tests for pricing a full transaction.

Rules are loaded from a JSON file, published to a registry and priced by the
engine against a realistic basket:

- happy-hour: exclusive, priority 10, 30% off weekdays 14:00-16:00
- buy-3-save: combinable, priority 8, 25% off prod-001/prod-002 at qty >= 3,
  once per transaction
- vip-5000: combinable, priority 5, 5,000 off for vip/gold above 50,000
- clearance: exclusive, priority 3, 50% off low-stock snacks except prod-009
"""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import pytest

from retail_pricing import CartContext, Money, PricingEngine, RuleRegistry
from retail_pricing.config.models import PricingEngineConfig
from retail_pricing.rules.loader import load_rules_from_file

MONDAY_3PM = datetime(2024, 1, 8, 15, 0)
SATURDAY_3PM = datetime(2024, 1, 13, 15, 0)


@pytest.fixture
def registry(tmp_path, sample_rule_definitions) -> RuleRegistry:
    path = tmp_path / "rules.json"
    path.write_text(json.dumps({"rules": sample_rule_definitions}))
    return RuleRegistry(load_rules_from_file(path))


@pytest.fixture
def engine() -> PricingEngine:
    return PricingEngine(PricingEngineConfig(audit_log_enabled=False))


def basket(moment: datetime) -> list[tuple[CartContext, Money]]:
    shared = {
        "customer_segment": "vip",
        "cart_total": 150000,
        "cart_item_count": 8,
        "current_time": moment,
    }
    return [
        (
            CartContext(product_id="prod-001", category_id="cat-drinks", quantity=3, **shared),
            Money(90000),
        ),
        (
            CartContext(product_id="prod-002", category_id="cat-drinks", quantity=4, **shared),
            Money(40000),
        ),
        (
            CartContext(
                product_id="prod-010",
                category_id="cat-snacks",
                quantity=1,
                stock_level=5,
                **shared,
            ),
            Money(20000),
        ),
    ]


@pytest.mark.integration
class TestTransactionPricing:
    """End-to-end pricing of a multi-line basket."""

    def test_weekday_happy_hour_basket(self, registry, engine):
        priced = engine.price_transaction(basket(MONDAY_3PM), registry.snapshot("biz-001"))

        first, second, third = priced.lines

        # vip 90000 -> 85000, buy-3 25% -> 63750, happy hour 30% -> 44625
        assert first.applied_rule_ids == ("vip-5000", "buy-3-save", "happy-hour")
        assert [a.discount_applied.amount for a in first.applied_rules] == [5000, 21250, 19125]
        assert first.final_price.amount == 44625

        # buy-3-save already used once in this transaction
        assert second.applied_rule_ids == ("vip-5000", "happy-hour")
        assert second.final_price.amount == 24500

        # happy hour outranks clearance as the exclusive rule
        assert third.applied_rule_ids == ("vip-5000", "happy-hour")
        assert third.final_price.amount == 10500

        assert priced.total_original.amount == 150000
        assert priced.total_final.amount == 79625
        assert priced.total_discount.amount == 70375
        assert priced.applications == {"happy-hour": 3, "buy-3-save": 1, "vip-5000": 3}

    def test_weekend_basket_falls_back_to_clearance(self, registry, engine):
        priced = engine.price_transaction(
            basket(SATURDAY_3PM), registry.snapshot("biz-001")
        )

        first, _, third = priced.lines
        assert first.applied_rule_ids == ("vip-5000", "buy-3-save")
        assert third.applied_rule_ids == ("clearance", "vip-5000")
        # clearance (priority 3) runs first: 20000 -> 10000, then vip -> 5000
        assert third.final_price.amount == 5000

    def test_excluded_product_skips_clearance(self, registry, engine):
        context = CartContext(
            product_id="prod-009",
            category_id="cat-snacks",
            quantity=1,
            stock_level=1,
            current_time=SATURDAY_3PM,
        )
        result = engine.price_line(registry.snapshot("biz-001"), context, Money(20000))
        assert result.applied_rules == ()

        explanation = engine.explain(registry.snapshot("biz-001"), context)
        assert explanation["clearance"].reason == "Product not applicable"

    def test_potential_savings_hint(self, registry, engine):
        context = CartContext(
            product_id="prod-001",
            category_id="cat-drinks",
            quantity=1,
            cart_item_count=3,
            current_time=MONDAY_3PM,
        )
        savings = engine.calculate_potential_savings(
            registry.snapshot("biz-001"), context, Money(30000)
        )
        assert [(s.rule.id, s.required_quantity) for s in savings] == [("buy-3-save", 2)]
        assert savings[0].potential_saving.amount == 7500

    def test_unknown_business_prices_at_list(self, registry, engine):
        priced = engine.price_transaction(basket(MONDAY_3PM), registry.snapshot("biz-404"))
        assert priced.total_discount.is_zero()


@pytest.mark.integration
class TestConcurrentPricing:
    """Concurrent readers share snapshots while a writer publishes new ones."""

    def test_parallel_transactions_agree(self, registry, engine):
        rules = registry.snapshot("biz-001")
        expected = engine.price_transaction(basket(MONDAY_3PM), rules)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(
                pool.map(
                    lambda _: engine.price_transaction(basket(MONDAY_3PM), rules),
                    range(32),
                )
            )

        assert all(result == expected for result in results)

    def test_readers_see_whole_snapshots_during_writes(self, registry, engine):
        full = registry.snapshot("biz-001")
        without_vip = tuple(rule for rule in full if rule.id != "vip-5000")
        valid_totals = {
            engine.price_transaction(basket(MONDAY_3PM), full).total_final.amount,
            engine.price_transaction(basket(MONDAY_3PM), without_vip).total_final.amount,
        }

        def writer():
            for i in range(50):
                registry.replace("biz-001", without_vip if i % 2 == 0 else full)

        def reader(_):
            snapshot = registry.snapshot("biz-001")
            return engine.price_transaction(basket(MONDAY_3PM), snapshot).total_final.amount

        with ThreadPoolExecutor(max_workers=8) as pool:
            write = pool.submit(writer)
            totals = list(pool.map(reader, range(100)))
            write.result()

        assert set(totals) <= valid_totals
