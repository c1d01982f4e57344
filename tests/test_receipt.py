"""Tests for receipt rendering."""

from checkout_pricing import Settings, create_order, format_receipt
from conftest import NOW


def test_receipt_lists_lines_and_totals(products, three_for_two):
    order = create_order(
        ["atv", "atv", "atv", "vga"], "John Doe", products, [three_for_two], at=NOW, settings=Settings()
    )
    receipt = format_receipt(order)

    assert "Customer: John Doe" in receipt
    assert "3 x Apple TV @ $109.50 = $219.00" in receipt
    assert "    (3 for 2 on atv)" in receipt
    assert "1 x VGA adapter @ $30.00 = $30.00" in receipt
    assert "Subtotal:              $358.50" in receipt
    assert "Discount:             -$109.50" in receipt
    assert "TOTAL:                 $249.00" in receipt


def test_receipt_without_discount(products):
    order = create_order(["ipd", "ipd"], "Jane", products, [], at=NOW, settings=Settings())
    receipt = format_receipt(order, currency_symbol="€")

    assert "Discount" not in receipt
    assert "TOTAL:                 €1099.98" in receipt
