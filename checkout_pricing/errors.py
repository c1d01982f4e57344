"""Error types for the checkout pricing engine."""

from typing import Optional


class errmsg:
    """Error message constants shared by validators and the engine."""

    ITEMS_REQUIRED = "Order must have at least one item"
    SKU_REQUIRED = "SKU is required"
    CUSTOMER_NAME_REQUIRED = "Customer name is required"
    UNKNOWN_SKU = "Unknown SKU"
    NAME_REQUIRED = "Rule name is required"
    MIN_QUANTITY_POSITIVE = "Minimum quantity must be at least 1"
    PAY_QUANTITY_POSITIVE = "Pay quantity must be at least 1"
    MAX_QUANTITY_POSITIVE = "Maximum quantity must be at least 1"
    PRICE_NEGATIVE = "Price cannot be negative"
    DISCOUNTED_PRICE_NEGATIVE = "Discounted price cannot be negative"
    MAX_DISCOUNT_NEGATIVE = "Maximum discount amount cannot be negative"
    PERCENTAGE_RANGE = "Percentage must be 0-100"
    PRIORITY_RANGE = "Priority must be 0-100"
    SKUS_EMPTY = "SKUs must be null (for all products) or a non-empty list"
    END_BEFORE_START = "End date must be after start date"
    PAY_QUANTITY_REQUIRED = "BUY_X_GET_Y rules require a pay quantity"
    DISCOUNTED_PRICE_REQUIRED = "Rule requires a discounted price"
    PERCENTAGE_REQUIRED = "PERCENTAGE_OFF rules require a percentage"
    UNKNOWN_DISCOUNT_TYPE = "Unknown discount type"
    ORDER_CANCELLED = "Cancelled orders cannot change status"
    INVALID_STATUS = "Invalid order status"


class PricingError(Exception):
    """Base class for pricing engine errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class RuleDefinitionError(PricingError):
    """Pricing rule is missing a field its discount type requires, or is out of range."""

    def __init__(self, message: str, rule_name: str = ""):
        if rule_name:
            message = f"{message} (rule {rule_name!r})"
        super().__init__(message)
        self.rule_name = rule_name


class EngineInvariantError(PricingError):
    """Scanned line state is corrupted. Not recoverable."""

    def __init__(self, message: str):
        super().__init__(f"invariant violated: {message}")


class OrderRejectedError(PricingError):
    """Order request was rejected before reaching the engine."""
