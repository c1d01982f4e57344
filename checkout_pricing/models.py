"""Reference data consumed by the engine: products and pricing rules.

Both are immutable snapshots supplied by the catalog and rule stores before a
checkout begins. ``from_dict`` accepts the stored document shape (camelCase
keys, ISO-8601 dates) as well as snake_case keys.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

from .errors import RuleDefinitionError, errmsg


def to_decimal(value: Any) -> Decimal:
    """Convert a stored number to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _pick(data: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _optional(value: Any, convert):
    return None if value is None else convert(value)


class DiscountType(str, Enum):
    BUY_X_GET_Y = "BUY_X_GET_Y"
    BULK_DISCOUNT = "BULK_DISCOUNT"
    PERCENTAGE_OFF = "PERCENTAGE_OFF"
    FIXED_PRICE = "FIXED_PRICE"

    @classmethod
    def parse(cls, value: Any) -> "DiscountType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise RuleDefinitionError(f"{errmsg.UNKNOWN_DISCOUNT_TYPE}: {value}") from None


@dataclass(frozen=True)
class Product:
    sku: str
    name: str
    price: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Product":
        return cls(sku=str(data["sku"]), name=str(data.get("name", "")), price=to_decimal(data["price"]))


@dataclass(frozen=True)
class RuleConditions:
    """Quantity trigger and discount parameters of a rule."""

    min_quantity: int
    pay_quantity: int | None = None
    discounted_price: Decimal | None = None
    percentage_off: Decimal | None = None
    max_quantity: int | None = None
    max_discount_amount: Decimal | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuleConditions":
        return cls(
            min_quantity=int(_pick(data, "min_quantity", "minQuantity")),
            pay_quantity=_optional(_pick(data, "pay_quantity", "payQuantity"), int),
            discounted_price=_optional(_pick(data, "discounted_price", "discountedPrice"), to_decimal),
            percentage_off=_optional(_pick(data, "percentage_off", "percentageOff"), to_decimal),
            max_quantity=_optional(_pick(data, "max_quantity", "maxQuantity"), int),
            max_discount_amount=_optional(_pick(data, "max_discount_amount", "maxDiscountAmount"), to_decimal),
        )

    def to_dict(self) -> dict:
        doc: dict[str, Any] = {"minQuantity": self.min_quantity}
        if self.pay_quantity is not None:
            doc["payQuantity"] = self.pay_quantity
        if self.discounted_price is not None:
            doc["discountedPrice"] = str(self.discounted_price)
        if self.percentage_off is not None:
            doc["percentageOff"] = str(self.percentage_off)
        if self.max_quantity is not None:
            doc["maxQuantity"] = self.max_quantity
        if self.max_discount_amount is not None:
            doc["maxDiscountAmount"] = str(self.max_discount_amount)
        return doc


@dataclass(frozen=True)
class PricingRule:
    """A time-bounded, prioritized discount keyed off a per-SKU quantity.

    ``skus`` of None means the rule applies to every SKU. ``stackable`` is
    carried through but never changes how many rules attach to a line.
    Naive dates are taken as UTC.
    """

    name: str
    discount_type: DiscountType
    conditions: RuleConditions
    skus: frozenset[str] | None = None
    description: str = ""
    priority: int = 0
    stackable: bool = False
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None
    rule_id: str = field(default="", compare=False)

    def __post_init__(self):
        for name in ("start_date", "end_date", "created_at"):
            object.__setattr__(self, name, parse_datetime(getattr(self, name)))

    def applies_to(self, sku: str) -> bool:
        return self.skus is None or sku in self.skus

    def in_effect(self, at: datetime) -> bool:
        """Active and ``at`` falls within [start_date, end_date]."""
        at = parse_datetime(at)
        if not self.is_active:
            return False
        if self.start_date is not None and at < self.start_date:
            return False
        if self.end_date is not None and at > self.end_date:
            return False
        return True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PricingRule":
        skus = data.get("skus")
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            discount_type=DiscountType.parse(_pick(data, "discount_type", "discountType")),
            conditions=RuleConditions.from_dict(data.get("conditions") or {}),
            skus=None if skus is None else frozenset(str(s) for s in skus),
            priority=int(data.get("priority", 0)),
            stackable=bool(data.get("stackable", False)),
            is_active=bool(_pick(data, "is_active", "isActive", True)),
            start_date=parse_datetime(_pick(data, "start_date", "startDate")),
            end_date=parse_datetime(_pick(data, "end_date", "endDate")),
            created_at=parse_datetime(_pick(data, "created_at", "createdAt")),
            rule_id=str(_pick(data, "rule_id", "_id", "")),
        )

    def to_dict(self) -> dict:
        return {
            "_id": self.rule_id,
            "name": self.name,
            "description": self.description,
            "skus": None if self.skus is None else sorted(self.skus),
            "discountType": self.discount_type.value,
            "conditions": self.conditions.to_dict(),
            "priority": self.priority,
            "stackable": self.stackable,
            "isActive": self.is_active,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
        }
