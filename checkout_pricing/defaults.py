"""Store-opening catalog and deals."""

import calendar
from datetime import datetime, timezone
from decimal import Decimal

from .models import DiscountType, PricingRule, Product, RuleConditions


def add_months(moment: datetime, months: int) -> datetime:
    """Same day ``months`` later, clamped to the end of shorter months."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def opening_catalog() -> list[Product]:
    return [
        Product(sku="ipd", name="Super iPad", price=Decimal("549.99")),
        Product(sku="mbp", name="MacBook Pro", price=Decimal("1399.99")),
        Product(sku="atv", name="Apple TV", price=Decimal("109.50")),
        Product(sku="vga", name="VGA adapter", price=Decimal("30.00")),
    ]


def opening_rules(now: datetime | None = None) -> list[PricingRule]:
    """Opening deals, valid from ``now`` for three months."""
    start = now or datetime.now(timezone.utc)
    end = add_months(start, 3)
    return [
        PricingRule(
            name="Apple TV 3 for 2 Deal",
            description="Buy 3 Apple TVs, pay for 2 only",
            skus=frozenset({"atv"}),
            discount_type=DiscountType.BUY_X_GET_Y,
            # At most three sets of the deal per order.
            conditions=RuleConditions(min_quantity=3, pay_quantity=2, max_quantity=9),
            priority=10,
            start_date=start,
            end_date=end,
        ),
        PricingRule(
            name="Super iPad Bulk Discount",
            description="Buy more than 4 iPads, get each for $499.99",
            skus=frozenset({"ipd"}),
            discount_type=DiscountType.FIXED_PRICE,
            conditions=RuleConditions(min_quantity=5, discounted_price=Decimal("499.99")),
            priority=20,
            start_date=start,
            end_date=end,
        ),
        PricingRule(
            name="Holiday Season Bundle Discount",
            description="10% off when buying any Apple TV and iPad together",
            skus=frozenset({"atv", "ipd"}),
            discount_type=DiscountType.PERCENTAGE_OFF,
            conditions=RuleConditions(
                min_quantity=1,
                percentage_off=Decimal(10),
                max_discount_amount=Decimal(200),
            ),
            priority=5,
            stackable=True,
            start_date=start,
            end_date=end,
        ),
        PricingRule(
            name="Store-wide Opening Special",
            description="5% off all products",
            skus=None,
            discount_type=DiscountType.PERCENTAGE_OFF,
            conditions=RuleConditions(min_quantity=1, percentage_off=Decimal(5)),
            priority=1,
            stackable=True,
            start_date=start,
            end_date=end,
        ),
    ]
