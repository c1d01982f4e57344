"""BDD scenarios for the checkout engine using pytest-bdd."""

from decimal import Decimal

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from checkout_pricing import DiscountType, ScanEngine, opening_catalog
from conftest import make_rule

scenarios("features/checkout.feature")


class CheckoutTestContext:
    """Test context for checkout scenarios."""

    def __init__(self):
        self.products = []
        self.rules = []
        self.engine = None


@pytest.fixture
def ctx():
    """Fixture providing fresh test context for each scenario."""
    return CheckoutTestContext()


# --- Given steps ---

@given("the store catalog")
def store_catalog(ctx):
    ctx.products = opening_catalog()


@given("no pricing rules")
def no_rules(ctx):
    ctx.rules = []


@given(parsers.parse('a 3 for 2 rule on "{sku}" with priority {priority:d}'))
def three_for_two_rule(ctx, sku, priority):
    ctx.rules.append(
        make_rule(name=f"3 for 2 on {sku}", skus=[sku], priority=priority, min_quantity=3, pay_quantity=2)
    )


@given(parsers.parse('a bulk rule on "{sku}" from {minimum:d} units at {price}'))
def bulk_rule(ctx, sku, minimum, price):
    ctx.rules.append(
        make_rule(
            name=f"bulk {sku}",
            discount_type=DiscountType.BULK_DISCOUNT,
            skus=[sku],
            min_quantity=minimum,
            discounted_price=price,
        )
    )


# --- When steps ---

@when(parsers.parse('I scan "{items}"'))
def scan_items(ctx, items):
    ctx.engine = ScanEngine(ctx.products, ctx.rules)
    ctx.engine.scan_all(sku.strip() for sku in items.split(","))


# --- Then steps ---

@then(parsers.parse("the total is {amount}"))
def total_is(ctx, amount):
    assert ctx.engine.total() == Decimal(amount)


@then(parsers.parse('the "{sku}" line has quantity {quantity:d} and a rule applied'))
def line_with_rule(ctx, sku, quantity):
    (line,) = [line for line in ctx.engine.lines if line.sku == sku]
    assert line.quantity == quantity
    assert line.has_rule()


@then(parsers.parse('the "{sku}" line has quantity {quantity:d} and no rule applied'))
def line_without_rule(ctx, sku, quantity):
    (line,) = [line for line in ctx.engine.lines if line.sku == sku]
    assert line.quantity == quantity
    assert not line.has_rule()
