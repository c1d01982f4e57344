"""Rule lookup for one checkout session."""

from collections.abc import Iterable, Sequence
from datetime import datetime

import structlog

from .errors import EngineInvariantError
from .models import PricingRule, Product

logger = structlog.get_logger()


def index_products(products: Iterable[Product]) -> dict[str, Product]:
    """Build the SKU -> Product lookup. Later duplicates win."""
    return {product.sku: product for product in products}


def effective_rules(
    rules: Iterable[PricingRule],
    at: datetime,
    skus: Iterable[str] | None = None,
) -> list[PricingRule]:
    """Filter rules to those in effect at ``at``.

    With ``skus``, keeps rules that apply to every SKU or name at least one of
    them. Ordered by priority descending, then most recently created first.
    """
    wanted = set(skus) if skus is not None else None
    selected = [
        rule
        for rule in rules
        if rule.in_effect(at) and (wanted is None or rule.skus is None or rule.skus & wanted)
    ]
    selected.sort(key=lambda rule: rule.created_at.timestamp() if rule.created_at else 0.0, reverse=True)
    selected.sort(key=lambda rule: rule.priority, reverse=True)
    return selected


def _tie_break_key(rule: PricingRule) -> tuple:
    # Missing start date sorts before any date.
    if rule.start_date is None:
        return (-rule.priority, 0, 0.0)
    return (-rule.priority, 1, rule.start_date.timestamp())


def highest_priority(rules: Sequence[PricingRule]) -> PricingRule:
    """Pick the preferred rule.

    Highest priority wins; ties go to the earliest start date, then to the rule
    that came first in ``rules``.
    """
    if not rules:
        raise EngineInvariantError("highest_priority called without candidate rules")
    return min(rules, key=_tie_break_key)


class RuleCatalog:
    """Rules applicable to a checkout, restricted to those flagged active."""

    def __init__(self, rules: Iterable[PricingRule]):
        self._rules: list[PricingRule] = [rule for rule in rules if rule.is_active]
        self._by_sku: dict[str, list[PricingRule]] = {}

    def __len__(self) -> int:
        return len(self._rules)

    @property
    def rules(self) -> list[PricingRule]:
        return list(self._rules)

    def rules_for(self, sku: str) -> list[PricingRule]:
        """Every rule that targets ``sku`` or all SKUs, in supplied order."""
        cached = self._by_sku.get(sku)
        if cached is None:
            cached = [rule for rule in self._rules if rule.applies_to(sku)]
            self._by_sku[sku] = cached
        return list(cached)

    def threshold_rules(self, sku: str, quantity: int, ruled_quantity: int = 0) -> list[PricingRule]:
        """Rules for ``sku`` whose minimum quantity is exactly ``quantity``.

        ``ruled_quantity`` is how many units of the SKU already carry a rule;
        a rule with ``max_quantity`` is skipped once applying it would cover
        more units than that limit.
        """
        matches = []
        for rule in self.rules_for(sku):
            if rule.conditions.min_quantity != quantity:
                continue
            limit = rule.conditions.max_quantity
            if limit is not None and ruled_quantity + quantity > limit:
                logger.debug("rule_quantity_limit_reached", sku=sku, rule=rule.name, max_quantity=limit)
                continue
            matches.append(rule)
        return matches
