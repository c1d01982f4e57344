"""Scanned line records, grouped per SKU."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterator

from .errors import EngineInvariantError
from .models import PricingRule, Product
from .pricing import RulePrice


@dataclass
class ScannedLine:
    sku: str
    name: str
    unit_price: Decimal
    quantity: int = 1
    rules_applied: list[PricingRule] = field(default_factory=list)
    total_price: Decimal | None = None
    modified_unit_price: Decimal | None = None

    @classmethod
    def for_product(cls, product: Product, quantity: int = 1) -> "ScannedLine":
        return cls(sku=product.sku, name=product.name, unit_price=product.price, quantity=quantity)

    @property
    def rule(self) -> PricingRule | None:
        return self.rules_applied[0] if self.rules_applied else None

    def has_rule(self) -> bool:
        return bool(self.rules_applied)

    def apply(self, rule: PricingRule, price: RulePrice) -> None:
        self.rules_applied = [rule]
        self.total_price = price.total_price
        self.modified_unit_price = price.modified_unit_price

    def full_price(self) -> Decimal:
        return self.unit_price * self.quantity

    def line_total(self) -> Decimal:
        if self.total_price is not None:
            return self.total_price
        if self.modified_unit_price is not None:
            return self.modified_unit_price * self.quantity
        return self.full_price()

    def to_dict(self) -> dict[str, Any]:
        """Scanned-product shape stored on the order record."""
        doc: dict[str, Any] = {
            "sku": self.sku,
            "name": self.name,
            "price": str(self.unit_price),
            "quantity": self.quantity,
            "rulesApplied": [rule.to_dict() for rule in self.rules_applied],
        }
        if self.total_price is not None:
            doc["totalPrice"] = str(self.total_price)
        if self.modified_unit_price is not None:
            doc["modifiedPrice"] = str(self.modified_unit_price)
        return doc


@dataclass
class SkuGroup:
    """At most one ruled and one unruled line for a SKU."""

    ruled: ScannedLine | None = None
    unruled: ScannedLine | None = None
    rules_seen: list[PricingRule] = field(default_factory=list)

    @property
    def quantity(self) -> int:
        return sum(line.quantity for line in self.lines())

    @property
    def ruled_quantity(self) -> int:
        return self.ruled.quantity if self.ruled else 0

    def lines(self) -> list[ScannedLine]:
        return [line for line in (self.ruled, self.unruled) if line is not None]

    def check(self, sku: str) -> None:
        if self.ruled is None and self.unruled is None:
            raise EngineInvariantError(f"empty line group for {sku!r}")
        if self.ruled is not None and len(self.ruled.rules_applied) != 1:
            raise EngineInvariantError(f"ruled line for {sku!r} carries {len(self.ruled.rules_applied)} rules")
        if self.unruled is not None and self.unruled.rules_applied:
            raise EngineInvariantError(f"unruled line for {sku!r} carries a rule")
        for line in self.lines():
            if line.sku != sku:
                raise EngineInvariantError(f"line for {line.sku!r} filed under {sku!r}")
            if line.quantity < 1:
                raise EngineInvariantError(f"line for {sku!r} has quantity {line.quantity}")

    def collapse(self, line: ScannedLine) -> None:
        """Replace every line of the group with ``line``.

        A rule carried by ``line`` is remembered in ``rules_seen`` even after
        a later collapse replaces it.
        """
        if line.has_rule():
            if line.rule not in self.rules_seen:
                self.rules_seen.append(line.rule)
            self.ruled, self.unruled = line, None
        else:
            self.ruled, self.unruled = None, line


class LineArena:
    """Line groups indexed by SKU, in first-scan order."""

    def __init__(self) -> None:
        self._groups: dict[str, SkuGroup] = {}

    def __contains__(self, sku: str) -> bool:
        return sku in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def group(self, sku: str) -> SkuGroup | None:
        return self._groups.get(sku)

    def open(self, sku: str) -> SkuGroup:
        group = self._groups.get(sku)
        if group is None:
            group = self._groups[sku] = SkuGroup()
        return group

    def groups(self) -> list[SkuGroup]:
        return list(self._groups.values())

    def __iter__(self) -> Iterator[ScannedLine]:
        for group in self._groups.values():
            yield from group.lines()

    def check(self) -> None:
        for sku, group in self._groups.items():
            group.check(sku)
