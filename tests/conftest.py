"""Shared pytest fixtures for checkout pricing tests."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
import structlog

from checkout_pricing import DiscountType, PricingRule, Product, RuleConditions

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_rule(
    name: str = "rule",
    discount_type: DiscountType = DiscountType.BUY_X_GET_Y,
    skus=None,
    priority: int = 0,
    start_date: datetime | None = datetime(2025, 1, 1, tzinfo=timezone.utc),
    end_date: datetime | None = datetime(2025, 12, 31, tzinfo=timezone.utc),
    is_active: bool = True,
    created_at: datetime | None = None,
    **conditions,
) -> PricingRule:
    """Build a rule. Condition fields are passed as keyword arguments."""
    conditions.setdefault("min_quantity", 1)
    for key in ("discounted_price", "percentage_off", "max_discount_amount"):
        if key in conditions and conditions[key] is not None:
            conditions[key] = Decimal(str(conditions[key]))
    return PricingRule(
        name=name,
        discount_type=discount_type,
        conditions=RuleConditions(**conditions),
        skus=None if skus is None else frozenset(skus),
        priority=priority,
        is_active=is_active,
        start_date=start_date,
        end_date=end_date,
        created_at=created_at,
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def products():
    """The four-product store catalog."""
    return [
        Product(sku="ipd", name="Super iPad", price=Decimal("549.99")),
        Product(sku="mbp", name="MacBook Pro", price=Decimal("1399.99")),
        Product(sku="atv", name="Apple TV", price=Decimal("109.50")),
        Product(sku="vga", name="VGA adapter", price=Decimal("30.00")),
    ]


@pytest.fixture
def three_for_two():
    return make_rule(
        name="3 for 2 on atv",
        discount_type=DiscountType.BUY_X_GET_Y,
        skus=["atv"],
        priority=10,
        min_quantity=3,
        pay_quantity=2,
    )


@pytest.fixture
def ipd_bulk():
    return make_rule(
        name="ipd bulk",
        discount_type=DiscountType.BULK_DISCOUNT,
        skus=["ipd"],
        priority=20,
        min_quantity=5,
        discounted_price="499.99",
    )
