"""Checkout pricing engine: per-scan rule application and totals."""

from .catalog import RuleCatalog, effective_rules, highest_priority, index_products
from .config import Settings, configure_logging, get_settings
from .defaults import opening_catalog, opening_rules
from .engine import ScanEngine
from .errors import (
    EngineInvariantError,
    OrderRejectedError,
    PricingError,
    RuleDefinitionError,
    errmsg,
)
from .models import DiscountType, PricingRule, Product, RuleConditions
from .order import OrderRecord, create_order
from .pricing import RulePrice, price_with_rule
from .receipt import format_receipt
from .state import ScannedLine
from .validation import validate_order_request, validate_product, validate_rule

__all__ = [
    "DiscountType",
    "EngineInvariantError",
    "OrderRecord",
    "OrderRejectedError",
    "PricingError",
    "PricingRule",
    "Product",
    "RuleCatalog",
    "RuleConditions",
    "RuleDefinitionError",
    "RulePrice",
    "ScanEngine",
    "ScannedLine",
    "Settings",
    "configure_logging",
    "create_order",
    "effective_rules",
    "errmsg",
    "format_receipt",
    "get_settings",
    "highest_priority",
    "index_products",
    "opening_catalog",
    "opening_rules",
    "price_with_rule",
    "validate_order_request",
    "validate_product",
    "validate_rule",
]
