"""Order assembly around a checkout.

Validates the incoming request, narrows the rule set to what is in effect,
scans every item, and returns the record an order store would persist.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog

from .catalog import effective_rules, index_products
from .config import Settings, get_settings
from .engine import ScanEngine
from .errors import OrderRejectedError, errmsg
from .models import PricingRule, Product
from .state import ScannedLine
from .validation import validate_order_request

logger = structlog.get_logger()

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED)


@dataclass
class OrderRecord:
    customer_name: str
    scanned_items: list[str]
    lines: list[ScannedLine] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    total_discount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    applied_rules: list[PricingRule] = field(default_factory=list)
    order_date: datetime | None = None
    status: str = STATUS_PENDING

    def transition(self, status: str) -> None:
        """Move to ``status``. A cancelled order stays cancelled."""
        if status not in STATUSES:
            raise OrderRejectedError(f"{errmsg.INVALID_STATUS}: {status}")
        if self.status == STATUS_CANCELLED and status != STATUS_CANCELLED:
            raise OrderRejectedError(errmsg.ORDER_CANCELLED)
        logger.info("order_status_changed", old_status=self.status, new_status=status)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        return {
            "customerName": self.customer_name,
            "items": list(self.scanned_items),
            "scannedItems": [line.to_dict() for line in self.lines],
            "appliedRules": [
                {"ruleId": rule.rule_id, "ruleName": rule.name, "discountType": rule.discount_type.value}
                for rule in self.applied_rules
            ],
            "subtotal": str(self.subtotal),
            "totalDiscount": str(self.total_discount),
            "total": str(self.total),
            "orderDate": self.order_date.isoformat() if self.order_date else None,
            "status": self.status,
        }


def create_order(
    items: Sequence[str],
    customer_name: str,
    products: Iterable[Product],
    rules: Iterable[PricingRule],
    at: datetime | None = None,
    settings: Settings | None = None,
) -> OrderRecord:
    """Price ``items`` and build the order record.

    Raises OrderRejectedError for an empty item list, a blank customer name,
    or, when the settings ask for it, SKUs missing from ``products``.
    """
    settings = settings or get_settings()
    at = at or datetime.now(timezone.utc)
    catalog = index_products(products)

    validate_order_request(items, customer_name, catalog if settings.reject_unknown_skus else None)

    in_effect = effective_rules(rules, at, skus=set(items))
    engine = ScanEngine(catalog, in_effect)
    engine.scan_all(items)

    order = OrderRecord(
        customer_name=customer_name.strip(),
        scanned_items=list(items),
        lines=engine.lines,
        subtotal=engine.subtotal(),
        total_discount=engine.total_discount(),
        total=engine.total(),
        applied_rules=engine.applied_rules(),
        order_date=at,
    )
    logger.info(
        "order_created",
        customer_name=order.customer_name,
        items=len(order.scanned_items),
        rules_in_effect=len(in_effect),
        total=str(order.total),
    )
    return order
