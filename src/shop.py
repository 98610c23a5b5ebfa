"""
Shop: inventory, reservations and checkout
-----------------------------------------

The shop keeps an in-memory mapping from product name to
``(available quantity, unit price)``.  Clients reserve products with
:meth:`Shop.buy`, which only records a line item in the client's cart,
and settle the whole cart with :meth:`Shop.checkout`.

Design Notes
^^^^^^^^^^^^

* **Reservations do not hold stock.**  ``buy`` checks the requested
  quantity against the stock recorded right now and copies the current
  price into the cart.  Inventory is only touched at checkout, so the
  stock seen at reservation time may be gone by then.
* **Checkout is all-or-nothing.**  The balance and every line item are
  validated before anything is mutated; the balance is then charged,
  stock decremented and the cart cleared.  A failed checkout leaves
  balance, cart and inventory exactly as they were.
* **Single caller.**  Nothing here is locked.  Several clients settling
  against one shop from different threads would need one lock held
  around the whole of ``checkout``.
"""

from __future__ import annotations

import logging
from collections import Counter as Tally
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from client import CartLine, Client
from errors import InsufficientBalance, InsufficientStock, ProductNotFound, ShopError
from metrics import SHOP_BUY_TOTAL, SHOP_CHECKOUT_AMOUNT, SHOP_CHECKOUT_TOTAL, SHOP_STOCK_LEVEL

logger = logging.getLogger(__name__)

MAX_QUANTITY = 2**8 - 1
MAX_PRICE = 2**32 - 1


@dataclass(frozen=True)
class Product:
    """Snapshot of one inventory entry."""
    name: str
    quantity: int
    price: int


@dataclass(frozen=True)
class Receipt:
    """Outcome of a successful checkout."""
    lines: Tuple[CartLine, ...]
    total: int
    balance_after: int

    def format(self) -> str:
        receipt_lines = [
            f" - {line.product_name} x {line.quantity} @ {line.unit_price} = {line.line_total}"
            for line in self.lines
        ]
        receipt_lines.append(f"Total: {self.total}")
        receipt_lines.append(f"Balance: {self.balance_after}")
        return "\n".join(receipt_lines)


def _check_int(value, field: str, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= upper:
        raise ValueError(f"{field} must be between 0 and {upper}, got {value}")
    return value


class Shop:
    """In-memory shop selling a fixed set of products."""

    def __init__(self, products: Iterable[Tuple[str, int, int]], name: str = "shop") -> None:
        """Open the shop with an initial product list.

        :param products: ``(name, quantity, price)`` tuples.  A name listed
            twice keeps its last entry.
        :param name: label for this shop's entries in the stock-level metric.
        :raises TypeError, ValueError: if a name is not a string or a
            quantity/price is not an integer in range.
        """
        self.name = name
        self._storage: Dict[str, Tuple[int, int]] = {}
        for product_name, quantity, price in products:
            if not isinstance(product_name, str):
                raise TypeError(f"Product name must be a string, got {type(product_name).__name__}")
            self._storage[product_name] = (
                _check_int(quantity, "quantity", MAX_QUANTITY),
                _check_int(price, "price", MAX_PRICE),
            )
        for product_name, (quantity, _) in self._storage.items():
            SHOP_STOCK_LEVEL.set(quantity, shop=self.name, product=product_name)
        logger.info("Shop opened", extra={"extra": {"shop": self.name, "products": len(self._storage)}})

    def __repr__(self) -> str:
        return f"Shop(name={self.name!r}, storage={self._storage!r})"

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------
    def get_product(self, name: str) -> Optional[Product]:
        """Return the entry for ``name``, or None if the shop does not carry it."""
        entry = self._storage.get(name)
        if entry is None:
            return None
        return Product(name, *entry)

    def list_products(self) -> List[Product]:
        return [Product(name, qty, price) for name, (qty, price) in self._storage.items()]

    # -------------------------------------------------------------------------
    # Reservation
    # -------------------------------------------------------------------------
    def buy(self, client: Client, product_name: str, requested_quantity: int) -> CartLine:
        """Reserve ``requested_quantity`` units of a product in the client's cart.

        Inventory is not decremented.  The returned line item is the one
        appended to the cart.

        :raises ProductNotFound: the shop does not carry ``product_name``.
        :raises InsufficientStock: more units requested than currently in stock.
        :raises TypeError, ValueError: ``requested_quantity`` is not a
            non-negative integer.  Zero is accepted and reserves an
            empty line.
        """
        if isinstance(requested_quantity, bool) or not isinstance(requested_quantity, int):
            raise TypeError("Quantity must be an integer")
        if requested_quantity < 0:
            raise ValueError(f"Quantity cannot be negative, got {requested_quantity}")
        try:
            entry = self._storage.get(product_name)
            if entry is None:
                raise ProductNotFound(product_name)
            available, price = entry
            if requested_quantity > available:
                raise InsufficientStock(product_name, requested_quantity, available)
        except ShopError as exc:
            SHOP_BUY_TOTAL.inc(outcome=exc.code)
            logger.warning(
                "Reservation rejected",
                extra={"extra": {"product": product_name, "quantity": requested_quantity, "reason": exc.code}},
            )
            raise
        line = CartLine(product_name, requested_quantity, price)
        client.add_product(line)
        SHOP_BUY_TOTAL.inc(outcome="ok")
        logger.info(
            "Product reserved",
            extra={"extra": {"product": product_name, "quantity": requested_quantity, "unit_price": price}},
        )
        return line

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------
    @staticmethod
    def cart_total(client: Client) -> int:
        """Sum of quantity x unit price over the client's cart."""
        return sum(line.line_total for line in client.shopping_cart())

    def _validate_stock(self, cart: Tuple[CartLine, ...]) -> Dict[str, int]:
        """Return the new stock level for every product in the cart.

        Quantities of repeated products are added up before comparing with
        stock, so the whole cart is checked as one order.
        """
        required = Tally()
        for line in cart:
            if line.quantity < 0:
                raise ValueError(
                    f"Cart line for {line.product_name!r} has negative quantity {line.quantity}"
                )
            required[line.product_name] += line.quantity
        new_levels: Dict[str, int] = {}
        for name, quantity in required.items():
            entry = self._storage.get(name)
            if entry is None:
                raise ProductNotFound(name)
            available = entry[0]
            if quantity > available:
                raise InsufficientStock(name, quantity, available)
            new_levels[name] = available - quantity
        return new_levels

    def checkout(self, client: Client) -> Receipt:
        """Settle the client's cart against their balance and the inventory.

        Steps:
        1. Compute the cart total.
        2. Reject with ``InsufficientBalance`` if the balance does not cover it.
        3. Check every product is still carried and in stock for the
           whole cart (``ProductNotFound`` / ``InsufficientStock``).
        4. Charge the client, decrement stock and clear the cart.

        Nothing is mutated unless all checks pass.  An empty cart settles
        with a zero total and changes nothing.
        """
        cart = client.shopping_cart()
        total = self.cart_total(client)
        try:
            if total > client.balance:
                raise InsufficientBalance(total, client.balance)
            new_levels = self._validate_stock(cart)
        except ShopError as exc:
            SHOP_CHECKOUT_TOTAL.inc(outcome=exc.code)
            logger.warning(
                "Checkout rejected",
                extra={"extra": {"total": total, "balance": client.balance, "reason": exc.code}},
            )
            raise

        client.charge(total)
        for name, quantity in new_levels.items():
            price = self._storage[name][1]
            self._storage[name] = (quantity, price)
            SHOP_STOCK_LEVEL.set(quantity, shop=self.name, product=name)
        client.clear_cart()

        receipt = Receipt(lines=cart, total=total, balance_after=client.balance)
        SHOP_CHECKOUT_TOTAL.inc(outcome="ok")
        SHOP_CHECKOUT_AMOUNT.observe(total)
        logger.info(
            "Checkout completed",
            extra={"extra": {"lines": len(cart), "total": total, "balance": client.balance}},
        )
        return receipt
