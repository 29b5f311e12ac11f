"""
Hydration of pricing rules from plain mappings.

Callers fetch rule definitions from their own storage; this module only
turns the fetched mappings (camelCase or snake_case keys) into validated
``PricingRule`` values and reports every invalid definition at once.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from retail_pricing.shared.exceptions import RuleLoadError

from .models import PricingRule

logger = logging.getLogger(__name__)


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or 'rule'}: {item['msg']}"
        for item in error.errors()
    )


def parse_rules(
    definitions: Iterable[Mapping[str, Any]], source: Path | None = None
) -> tuple[PricingRule, ...]:
    """
    Validate rule definitions.

    Args:
        definitions: Mappings with PricingRule fields
        source: Where the definitions came from, for error messages

    Returns:
        Tuple of validated rules in input order

    Raises:
        RuleLoadError: If any definition is invalid; lists every failure
    """
    rules: list[PricingRule] = []
    errors: list[str] = []

    for index, definition in enumerate(definitions):
        try:
            rules.append(PricingRule.model_validate(definition))
        except ValidationError as e:
            rule_id = definition.get("id", "?") if isinstance(definition, Mapping) else "?"
            errors.append(f"#{index} (id={rule_id}): {_describe(e)}")

    if errors:
        raise RuleLoadError(
            f"{len(errors)} of {len(errors) + len(rules)} pricing rules are invalid",
            source=source,
            validation_errors=errors,
        )

    logger.info(f"Loaded {len(rules)} pricing rules")
    return tuple(rules)


def load_rules_from_file(file_path: str | Path) -> tuple[PricingRule, ...]:
    """
    Load rule definitions from a JSON file holding a list of rule objects.

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuleLoadError: If the JSON is malformed or any rule is invalid
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"Pricing rules file not found: {file_path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RuleLoadError("Invalid JSON", source=path, original_error=e) from e

    if isinstance(data, Mapping):
        data = data.get("rules", [])

    if not isinstance(data, list):
        raise RuleLoadError("Expected a list of rule objects", source=path)

    return parse_rules(data, source=path)
