"""Price a list of scanned SKUs from the command line.

Uses the store-opening catalog and deals unless JSON files are given:

    checkout-price atv atv atv vga
    checkout-price --catalog products.json --rules rules.json --json ipd ipd
"""

import argparse
import json
import sys
from decimal import InvalidOperation
from pathlib import Path

import structlog

from .config import configure_logging, get_settings
from .defaults import opening_catalog, opening_rules
from .errors import PricingError
from .models import PricingRule, Product, parse_datetime
from .order import create_order
from .receipt import format_receipt
from .validation import validate_product, validate_rule

logger = structlog.get_logger()


def load_products(path: Path) -> list[Product]:
    with open(path, "r", encoding="utf-8") as f:
        return [validate_product(Product.from_dict(doc)) for doc in json.load(f)]


def load_rules(path: Path) -> list[PricingRule]:
    with open(path, "r", encoding="utf-8") as f:
        return [validate_rule(PricingRule.from_dict(doc)) for doc in json.load(f)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="checkout-price", description="Price scanned SKUs.")
    parser.add_argument("items", nargs="+", help="SKUs in scan order")
    parser.add_argument("--catalog", type=Path, help="JSON list of products (sku, name, price)")
    parser.add_argument("--rules", type=Path, help="JSON list of pricing rules")
    parser.add_argument("--customer", default="Walk-in", help="Customer name on the order")
    parser.add_argument("--at", help="Evaluation time, ISO-8601 (default: now)")
    parser.add_argument("--json", action="store_true", help="Print the order record as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    try:
        at = parse_datetime(args.at)
        products = load_products(args.catalog) if args.catalog else opening_catalog()
        rules = load_rules(args.rules) if args.rules else opening_rules(at)
        order = create_order(args.items, args.customer, products, rules, at=at, settings=settings)
    except PricingError as e:
        logger.error("order_rejected", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (OSError, ValueError, KeyError, TypeError, InvalidOperation) as e:
        logger.error("input_unreadable", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(order.to_dict(), indent=2))
    else:
        print(format_receipt(order, settings.currency_symbol))
    return 0


if __name__ == "__main__":
    sys.exit(main())
