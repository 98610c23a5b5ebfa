"""Exception hierarchy for the shop.

Every business condition a caller can run into while reserving or settling
a cart is raised as a subclass of :class:`ShopError`.  Catch ``ShopError``
to handle any rejected operation, or one of the specific subclasses when
the reaction differs (e.g. offer a smaller quantity on
:class:`InsufficientStock`).
"""

from __future__ import annotations


class ShopError(Exception):
    """Base class for all rejected shop operations."""

    #: Stable identifier for programmatic handling and metrics labels.
    code: str = "shop_error"

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = "The shop rejected the operation."
        super().__init__(message)


class ProductNotFound(ShopError):
    """The named product is not (or no longer) in the shop's inventory."""

    code = "product_not_found"

    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__(f"No product named {product_name!r}")


class InsufficientStock(ShopError):
    """More units were requested than the shop currently holds."""

    code = "insufficient_stock"

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot take {requested} x {product_name}; only {available} available"
        )


class InsufficientBalance(ShopError):
    """The cart total exceeds the client's balance."""

    code = "insufficient_balance"

    def __init__(self, required: int, balance: int) -> None:
        self.required = required
        self.balance = balance
        super().__init__(f"Insufficient balance: need {required}, have {balance}")
