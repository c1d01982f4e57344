"""Validation helpers for the collaborators around the engine.

Rule definitions are checked when a rule is created, order requests before a
checkout is constructed. The engine itself trusts both.
"""

from collections.abc import Collection, Mapping, Sequence
from decimal import Decimal
from typing import Any

from .errors import OrderRejectedError, PricingError, RuleDefinitionError, errmsg
from .models import DiscountType, PricingRule, Product


def require_not_empty(items: Sequence[Any], error_msg: str, error: type[PricingError] = OrderRejectedError) -> None:
    """Require that a sequence has at least one element."""
    if not items:
        raise error(error_msg)


def require_text(value: str, error_msg: str, error: type[PricingError] = OrderRejectedError) -> None:
    """Require a string with at least one non-blank character."""
    if not value or not value.strip():
        raise error(error_msg)


def require_at_least(value: int, minimum: int, error_msg: str, error: type[PricingError] = RuleDefinitionError) -> None:
    if value < minimum:
        raise error(error_msg)


def require_non_negative(value: Decimal, error_msg: str, error: type[PricingError] = RuleDefinitionError) -> None:
    """Require that a value is zero or greater."""
    if value < 0:
        raise error(error_msg)


def require_range(value: Any, low: Any, high: Any, error_msg: str, error: type[PricingError] = RuleDefinitionError) -> None:
    """Require ``low <= value <= high``."""
    if value < low or value > high:
        raise error(error_msg)


def require_conditions(rule: PricingRule) -> None:
    """Require the condition field the rule's discount type prices with."""
    conditions = rule.conditions
    if rule.discount_type is DiscountType.BUY_X_GET_Y:
        if conditions.pay_quantity is None:
            raise RuleDefinitionError(errmsg.PAY_QUANTITY_REQUIRED, rule.name)
    elif rule.discount_type in (DiscountType.BULK_DISCOUNT, DiscountType.FIXED_PRICE):
        if conditions.discounted_price is None:
            raise RuleDefinitionError(errmsg.DISCOUNTED_PRICE_REQUIRED, rule.name)
    elif rule.discount_type is DiscountType.PERCENTAGE_OFF:
        if conditions.percentage_off is None:
            raise RuleDefinitionError(errmsg.PERCENTAGE_REQUIRED, rule.name)
    else:
        raise RuleDefinitionError(errmsg.UNKNOWN_DISCOUNT_TYPE, rule.name)


def validate_rule(rule: PricingRule) -> PricingRule:
    """Check a rule definition at creation time. Returns the rule unchanged."""
    conditions = rule.conditions
    require_text(rule.name, errmsg.NAME_REQUIRED, RuleDefinitionError)
    require_at_least(conditions.min_quantity, 1, errmsg.MIN_QUANTITY_POSITIVE)
    require_range(rule.priority, 0, 100, errmsg.PRIORITY_RANGE)
    if rule.skus is not None:
        require_not_empty(list(rule.skus), errmsg.SKUS_EMPTY, RuleDefinitionError)
    if conditions.pay_quantity is not None:
        require_at_least(conditions.pay_quantity, 1, errmsg.PAY_QUANTITY_POSITIVE)
    if conditions.max_quantity is not None:
        require_at_least(conditions.max_quantity, 1, errmsg.MAX_QUANTITY_POSITIVE)
    if conditions.discounted_price is not None:
        require_non_negative(conditions.discounted_price, errmsg.DISCOUNTED_PRICE_NEGATIVE)
    if conditions.percentage_off is not None:
        require_range(conditions.percentage_off, 0, 100, errmsg.PERCENTAGE_RANGE)
    if conditions.max_discount_amount is not None:
        require_non_negative(conditions.max_discount_amount, errmsg.MAX_DISCOUNT_NEGATIVE)
    if rule.start_date is not None and rule.end_date is not None and rule.end_date <= rule.start_date:
        raise RuleDefinitionError(errmsg.END_BEFORE_START, rule.name)
    require_conditions(rule)
    return rule


def validate_product(product: Product) -> Product:
    require_text(product.sku, errmsg.SKU_REQUIRED, RuleDefinitionError)
    require_non_negative(product.price, errmsg.PRICE_NEGATIVE)
    return product


def validate_order_request(
    items: Sequence[str],
    customer_name: str,
    products: Mapping[str, Product] | None = None,
) -> None:
    """Reject an order request the way the HTTP layer answers 400.

    When ``products`` is given, every scanned SKU must exist in it.
    """
    require_text(customer_name, errmsg.CUSTOMER_NAME_REQUIRED)
    require_not_empty(items, errmsg.ITEMS_REQUIRED)
    for sku in items:
        require_text(sku, errmsg.SKU_REQUIRED)
    if products is not None:
        unknown = sorted(_unknown_skus(items, products))
        if unknown:
            raise OrderRejectedError(f"{errmsg.UNKNOWN_SKU}: {', '.join(unknown)}")


def _unknown_skus(items: Sequence[str], products: Collection[str]) -> set[str]:
    return {sku for sku in items if sku not in products}
