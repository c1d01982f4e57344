"""Discount formulas per rule type.

Every formula starts from the catalog unit price, never from a line's
previously modified price.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .errors import RuleDefinitionError, errmsg
from .models import DiscountType, PricingRule
from .validation import require_conditions

CENTS = Decimal("0.01")
HUNDRED = Decimal(100)


def to_cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class RulePrice:
    """Outcome of applying a rule to a group: exactly one field is set."""

    total_price: Decimal | None = None
    modified_unit_price: Decimal | None = None

    def line_total(self, quantity: int) -> Decimal:
        if self.total_price is not None:
            return self.total_price
        return self.modified_unit_price * quantity


def _buy_x_get_y(rule: PricingRule, unit_price: Decimal, quantity: int) -> RulePrice:
    return RulePrice(total_price=to_cents(rule.conditions.pay_quantity * unit_price))


def _unit_override(rule: PricingRule, unit_price: Decimal, quantity: int) -> RulePrice:
    return RulePrice(modified_unit_price=rule.conditions.discounted_price)


def _percentage_off(rule: PricingRule, unit_price: Decimal, quantity: int) -> RulePrice:
    # Charged against min_quantity, not the group quantity. Kept for
    # compatibility with stored orders; see DESIGN.md.
    conditions = rule.conditions
    factor = 1 - conditions.percentage_off / HUNDRED
    return RulePrice(total_price=to_cents(conditions.min_quantity * unit_price * factor))


_FORMULAS = {
    DiscountType.BUY_X_GET_Y: _buy_x_get_y,
    DiscountType.BULK_DISCOUNT: _unit_override,
    DiscountType.PERCENTAGE_OFF: _percentage_off,
    DiscountType.FIXED_PRICE: _unit_override,
}


def price_with_rule(rule: PricingRule, unit_price: Decimal, quantity: int) -> RulePrice:
    """Price ``quantity`` units at ``unit_price`` under ``rule``.

    Raises RuleDefinitionError when the rule lacks the field its type needs.
    An optional ``max_discount_amount`` caps the saving against full price.
    """
    require_conditions(rule)
    formula = _FORMULAS.get(rule.discount_type)
    if formula is None:
        raise RuleDefinitionError(errmsg.UNKNOWN_DISCOUNT_TYPE, rule.name)
    price = formula(rule, unit_price, quantity)

    cap = rule.conditions.max_discount_amount
    if cap is not None:
        full = unit_price * quantity
        if full - price.line_total(quantity) > cap:
            price = RulePrice(total_price=to_cents(full - cap))
    return price
