"""
Copy-on-write snapshot store for pricing rules.

The engine never owns storage. Applications that cache rules between
requests can keep them here: readers take the current immutable tuple for a
business without locking, and writers build a new tuple and swap it in.
"""

import logging
from collections.abc import Iterable
from threading import Lock
from types import MappingProxyType

from .models import PricingRule

logger = logging.getLogger(__name__)


class RuleRegistry:
    """
    Per-business registry of immutable rule snapshots.

    Attributes:
        version: Incremented on every successful write

    Thread Safety:
        A single lock serializes writers. Readers never lock: each write
        publishes a brand new mapping of tuples, so a reader holding a
        snapshot keeps seeing one consistent rule list for its whole call.
    """

    def __init__(self, rules: Iterable[PricingRule] = ()) -> None:
        self._write_lock = Lock()
        self._snapshots: MappingProxyType[str, tuple[PricingRule, ...]] = (
            MappingProxyType({})
        )
        self.version = 0

        initial = tuple(rules)
        if initial:
            by_business: dict[str, list[PricingRule]] = {}
            for rule in initial:
                by_business.setdefault(rule.business_id, []).append(rule)
            for business_id, business_rules in by_business.items():
                self.replace(business_id, business_rules)

    @staticmethod
    def _freeze(
        business_id: str, rules: Iterable[PricingRule]
    ) -> tuple[PricingRule, ...]:
        by_id: dict[str, PricingRule] = {}
        for rule in rules:
            if rule.business_id != business_id:
                raise ValueError(
                    f"Rule '{rule.id}' belongs to business '{rule.business_id}', "
                    f"not '{business_id}'"
                )
            if rule.id in by_id:
                raise ValueError(f"Duplicate rule id '{rule.id}'")
            by_id[rule.id] = rule
        return tuple(sorted(by_id.values(), key=lambda rule: rule.id))

    def _publish(self, business_id: str, snapshot: tuple[PricingRule, ...]) -> None:
        # Caller holds the write lock
        updated = dict(self._snapshots)
        if snapshot:
            updated[business_id] = snapshot
        else:
            updated.pop(business_id, None)
        self._snapshots = MappingProxyType(updated)
        self.version += 1

    def snapshot(self, business_id: str) -> tuple[PricingRule, ...]:
        """Return the current immutable rule tuple for a business (may be empty)."""
        return self._snapshots.get(business_id, ())

    def businesses(self) -> tuple[str, ...]:
        return tuple(sorted(self._snapshots))

    def replace(self, business_id: str, rules: Iterable[PricingRule]) -> None:
        """
        Atomically replace every rule of a business.

        Raises:
            ValueError: If a rule belongs to another business or ids repeat
        """
        snapshot = self._freeze(business_id, rules)
        with self._write_lock:
            self._publish(business_id, snapshot)
        logger.info(
            f"Published {len(snapshot)} pricing rules for business {business_id}"
        )

    def upsert(self, rule: PricingRule) -> None:
        """Add a rule or replace the rule with the same id."""
        with self._write_lock:
            current = [
                existing
                for existing in self.snapshot(rule.business_id)
                if existing.id != rule.id
            ]
            current.append(rule)
            self._publish(rule.business_id, self._freeze(rule.business_id, current))

    def remove(self, business_id: str, rule_id: str) -> bool:
        """Remove a rule; returns False if it was not registered."""
        with self._write_lock:
            current = self.snapshot(business_id)
            remaining = tuple(rule for rule in current if rule.id != rule_id)
            if len(remaining) == len(current):
                return False
            self._publish(business_id, remaining)
        return True

    def clear(self) -> None:
        with self._write_lock:
            self._snapshots = MappingProxyType({})
            self.version += 1
