"""Scan-by-scan rule application for a single checkout.

Each ``scan`` adds one physical unit. Rules trigger when a SKU's running
quantity hits a rule's ``min_quantity`` exactly:

- threshold reached by the whole group: every line of the SKU collapses into
  one line carrying the winning rule;
- otherwise the unit joins the SKU's unruled sub-group, which is promoted into
  the ruled line as soon as its own quantity reaches a threshold. The merged
  line is repriced under that rule for the whole group's quantity, so a rule
  whose formula ignores quantity (BUY_X_GET_Y, PERCENTAGE_OFF) charges the
  same total for every unit of the group.

Scans must be applied in input order; later thresholds depend on earlier ones.
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal

import structlog

from .catalog import RuleCatalog, highest_priority, index_products
from .errors import EngineInvariantError
from .models import PricingRule, Product
from .pricing import price_with_rule
from .state import LineArena, ScannedLine, SkuGroup

logger = structlog.get_logger()


class ScanEngine:
    """Per-order checkout state. Not shared between requests."""

    def __init__(
        self,
        products: Mapping[str, Product] | Iterable[Product],
        rules: RuleCatalog | Iterable[PricingRule] = (),
    ):
        if isinstance(products, Mapping):
            self._products = dict(products)
        else:
            self._products = index_products(products)
        self._rules = rules if isinstance(rules, RuleCatalog) else RuleCatalog(rules)
        self._arena = LineArena()
        self._unknown: list[str] = []

    @property
    def rules(self) -> RuleCatalog:
        return self._rules

    @property
    def lines(self) -> list[ScannedLine]:
        return list(self._arena)

    @property
    def unknown_skus(self) -> list[str]:
        """SKUs that were scanned but are not in the catalog, in scan order."""
        return list(self._unknown)

    def scan(self, sku: str) -> ScannedLine | None:
        """Add one unit of ``sku``. Returns the line it landed on.

        Unknown SKUs are logged and ignored; None is returned.
        """
        log = logger.bind(sku=sku)
        product = self._products.get(sku)
        if product is None:
            log.warning("scan_unknown_sku")
            self._unknown.append(sku)
            return None

        group = self._arena.group(sku)
        if group is None:
            group = self._arena.open(sku)
            group.unruled = ScannedLine.for_product(product)
            line = self._settle_unruled(group, product, log)
        elif not self._rules.rules_for(sku):
            line = self._increment_plain(group, sku)
        else:
            line = self._scan_with_rules(group, product, log)

        group.check(sku)
        log.debug("scanned", quantity=group.quantity, line_total=str(line.line_total()))
        return line

    def scan_all(self, skus: Iterable[str]) -> list[ScannedLine]:
        for sku in skus:
            self.scan(sku)
        return self.lines

    def total(self) -> Decimal:
        """Amount due over all lines. Zero for an empty checkout."""
        return sum((line.line_total() for line in self._arena), Decimal("0"))

    def subtotal(self) -> Decimal:
        """Amount due before any rule."""
        return sum((line.full_price() for line in self._arena), Decimal("0"))

    def total_discount(self) -> Decimal:
        return self.subtotal() - self.total()

    def applied_rules(self) -> list[PricingRule]:
        """Distinct rules that priced a line at any point, in line order.

        A rule later replaced on its line by a larger threshold or by a
        re-promotion is still reported.
        """
        seen: list[PricingRule] = []
        for group in self._arena.groups():
            for rule in group.rules_seen:
                if rule not in seen:
                    seen.append(rule)
        return seen

    def _increment_plain(self, group: SkuGroup, sku: str) -> ScannedLine:
        if group.unruled is None:
            raise EngineInvariantError(f"ruled line exists for {sku!r} without applicable rules")
        group.unruled.quantity += 1
        return group.unruled

    def _scan_with_rules(self, group: SkuGroup, product: Product, log: structlog.BoundLogger) -> ScannedLine:
        existing_quantity = group.quantity + 1
        matches = self._rules.threshold_rules(product.sku, existing_quantity)
        if matches:
            return self._apply(group, product, highest_priority(matches), existing_quantity, log)

        if group.unruled is None:
            group.unruled = ScannedLine.for_product(product)
        else:
            group.unruled.quantity += 1
        return self._settle_unruled(group, product, log)

    def _settle_unruled(self, group: SkuGroup, product: Product, log: structlog.BoundLogger) -> ScannedLine:
        line = group.unruled
        matches = self._rules.threshold_rules(product.sku, line.quantity, group.ruled_quantity)
        if not matches:
            return line
        # The promoted sub-group folds into the ruled one and the rule is
        # priced against the whole group.
        return self._apply(group, product, highest_priority(matches), group.quantity, log)

    def _apply(
        self,
        group: SkuGroup,
        product: Product,
        rule: PricingRule,
        quantity: int,
        log: structlog.BoundLogger,
    ) -> ScannedLine:
        merged = ScannedLine.for_product(product, quantity)
        merged.apply(rule, price_with_rule(rule, product.price, quantity))
        group.collapse(merged)
        log.info("rule_applied", rule=rule.name, quantity=quantity, line_total=str(merged.line_total()))
        return merged
