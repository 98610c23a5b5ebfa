"""Client side of a purchase: a balance and a cart of reserved line items.

The client knows nothing about shops.  Validation of what goes into the
cart is the shop's job; the client only stores line items in the order
they were added and holds the money that pays for them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

from errors import InsufficientBalance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartLine:
    """A reserved line item: product, quantity and the unit price at reservation time."""
    product_name: str
    quantity: int
    unit_price: int

    @property
    def line_total(self) -> int:
        return self.quantity * self.unit_price


class Client:
    """A shopper with a balance and an ordered shopping cart.

    ``balance`` is read-only for callers.  The only code expected to lower
    it is :meth:`shop.Shop.checkout`, which goes through :meth:`charge`.
    """

    def __init__(self, balance: int) -> None:
        if isinstance(balance, bool) or not isinstance(balance, int):
            raise TypeError(f"Balance must be an integer, got {type(balance).__name__}")
        if balance < 0:
            raise ValueError(f"Balance cannot be negative: {balance}")
        self._balance = balance
        self._cart: List[CartLine] = []

    def __repr__(self) -> str:
        return f"Client(balance={self._balance}, cart={self._cart!r})"

    @property
    def balance(self) -> int:
        return self._balance

    def add_product(self, item: Union[CartLine, Tuple[str, int, int]]) -> None:
        """Append a line item to the cart.

        Accepts a :class:`CartLine` or a ``(name, quantity, unit_price)``
        tuple.  No checks are made against any shop.
        """
        if not isinstance(item, CartLine):
            item = CartLine(*item)
        self._cart.append(item)

    def shopping_cart(self) -> Tuple[CartLine, ...]:
        """Return the cart contents in insertion order."""
        return tuple(self._cart)

    def clear_cart(self) -> None:
        self._cart.clear()

    def charge(self, amount: int) -> None:
        """Deduct ``amount`` from the balance.

        Reserved for the shop's checkout.  The balance never goes negative:
        an amount above the balance raises :class:`InsufficientBalance` and
        leaves the balance unchanged.
        """
        if amount < 0:
            raise ValueError(f"Charge amount cannot be negative: {amount}")
        if amount > self._balance:
            raise InsufficientBalance(amount, self._balance)
        self._balance -= amount
        logger.debug("Client charged", extra={"extra": {"amount": amount, "balance": self._balance}})
