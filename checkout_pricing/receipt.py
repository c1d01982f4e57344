"""Receipt formatting utilities."""

from decimal import Decimal

from .order import OrderRecord

WIDTH = 40


def _money(symbol: str, amount: Decimal) -> str:
    return f"{symbol}{amount:.2f}"


def format_receipt(order: OrderRecord, currency_symbol: str = "$") -> str:
    """Format a human-readable receipt."""
    lines = []

    lines.append("=" * WIDTH)
    lines.append("           RECEIPT")
    lines.append("=" * WIDTH)
    lines.append(f"Customer: {order.customer_name}" if order.customer_name else "Customer: N/A")
    if order.order_date is not None:
        lines.append(f"Date: {order.order_date:%Y-%m-%d %H:%M}")
    lines.append("-" * WIDTH)

    for line in order.lines:
        lines.append(
            f"{line.quantity} x {line.name} @ {_money(currency_symbol, line.unit_price)}"
            f" = {_money(currency_symbol, line.line_total())}"
        )
        if line.rule is not None:
            lines.append(f"    ({line.rule.name})")

    lines.append("-" * WIDTH)
    lines.append(f"Subtotal:              {_money(currency_symbol, order.subtotal)}")

    if order.total_discount > 0:
        lines.append(f"Discount:             -{_money(currency_symbol, order.total_discount)}")

    lines.append("-" * WIDTH)
    lines.append(f"TOTAL:                 {_money(currency_symbol, order.total)}")
    lines.append("=" * WIDTH)

    return "\n".join(lines)
