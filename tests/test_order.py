"""Tests for order assembly around the checkout."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from checkout_pricing import OrderRejectedError, Settings, create_order, errmsg, opening_catalog, opening_rules
from checkout_pricing.order import STATUS_CANCELLED, STATUS_CONFIRMED, STATUS_PENDING
from conftest import NOW, make_rule

STRICT = Settings(reject_unknown_skus=True)
LENIENT = Settings(reject_unknown_skus=False)


class TestCreateOrder:
    def test_prices_the_scanned_items(self, products, three_for_two):
        order = create_order(["atv", "atv", "atv", "vga"], "John Doe", products, [three_for_two], at=NOW, settings=STRICT)
        assert order.total == Decimal("249.00")
        assert order.subtotal == Decimal("358.50")
        assert order.total_discount == Decimal("109.50")
        assert order.applied_rules == [three_for_two]
        assert order.scanned_items == ["atv", "atv", "atv", "vga"]
        assert [line.sku for line in order.lines] == ["atv", "vga"]
        assert order.status == STATUS_PENDING
        assert order.order_date == NOW

    def test_customer_name_is_trimmed(self, products):
        order = create_order(["ipd"], "  John Doe ", products, [], at=NOW, settings=STRICT)
        assert order.customer_name == "John Doe"

    def test_rules_out_of_date_are_not_applied(self, products):
        expired = make_rule(
            skus=["atv"],
            min_quantity=3,
            pay_quantity=2,
            start_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            end_date=datetime(2024, 2, 1, tzinfo=timezone.utc),
        )
        order = create_order(["atv"] * 3, "John Doe", products, [expired], at=NOW, settings=STRICT)
        assert order.total == Decimal("328.50")
        assert order.applied_rules == []

    def test_rules_with_naive_dates_are_filtered(self, products):
        rule = make_rule(
            skus=["atv"],
            min_quantity=3,
            pay_quantity=2,
            start_date=datetime(2025, 1, 1),
            end_date=datetime(2099, 1, 1),
        )
        order = create_order(["atv"] * 3, "John Doe", products, [rule], settings=STRICT)
        assert order.total == Decimal("219.00")
        assert order.applied_rules == [rule]

    def test_opening_deals_report_every_rule_that_priced_a_line(self):
        order = create_order(["ipd"] * 6, "John Doe", opening_catalog(), opening_rules(NOW), at=NOW, settings=STRICT)
        (line,) = order.lines
        assert line.quantity == 6
        assert [rule.name for rule in line.rules_applied] == ["Holiday Season Bundle Discount"]
        assert order.total == Decimal("3099.94")
        assert [doc["ruleName"] for doc in order.to_dict()["appliedRules"]] == [
            "Holiday Season Bundle Discount",
            "Super iPad Bulk Discount",
        ]

    def test_unknown_sku_rejects_order(self, products):
        with pytest.raises(OrderRejectedError, match=errmsg.UNKNOWN_SKU):
            create_order(["ipd", "invalid-sku"], "John Doe", products, [], at=NOW, settings=STRICT)

    def test_unknown_sku_skipped_when_lenient(self, products):
        order = create_order(["ipd", "invalid-sku"], "John Doe", products, [], at=NOW, settings=LENIENT)
        assert order.total == Decimal("549.99")
        assert order.scanned_items == ["ipd", "invalid-sku"]

    def test_empty_items_rejected(self, products):
        with pytest.raises(OrderRejectedError, match=errmsg.ITEMS_REQUIRED):
            create_order([], "John Doe", products, [], at=NOW, settings=STRICT)

    def test_settings_from_environment(self, products, monkeypatch):
        monkeypatch.setenv("CHECKOUT_REJECT_UNKNOWN_SKUS", "false")
        order = create_order(["invalid-sku", "vga"], "John Doe", products, [], at=NOW)
        assert order.total == Decimal("30.00")

    def test_record_document(self, products, three_for_two):
        order = create_order(["atv"] * 3, "John Doe", products, [three_for_two], at=NOW, settings=STRICT)
        doc = order.to_dict()
        assert doc["customerName"] == "John Doe"
        assert doc["items"] == ["atv", "atv", "atv"]
        assert doc["total"] == "219.00"
        assert doc["appliedRules"][0]["ruleName"] == "3 for 2 on atv"
        assert doc["scannedItems"][0]["quantity"] == 3
        assert doc["status"] == "pending"


class TestOrderStatus:
    @pytest.fixture
    def order(self, products):
        return create_order(["ipd"], "John Doe", products, [], at=NOW, settings=STRICT)

    def test_confirm(self, order):
        order.transition(STATUS_CONFIRMED)
        assert order.status == STATUS_CONFIRMED

    def test_cancelled_is_final(self, order):
        order.transition(STATUS_CANCELLED)
        with pytest.raises(OrderRejectedError, match=errmsg.ORDER_CANCELLED):
            order.transition(STATUS_PENDING)

    def test_unknown_status(self, order):
        with pytest.raises(OrderRejectedError, match=errmsg.INVALID_STATUS):
            order.transition("shipped")
