"""
Command-line entry point for the shop.

By default runs a short scripted demonstration: open a shop with milk
and cereal, let a client with 10000 on their balance reserve 5 milk and
1 cereal, then check out.  ``--interactive`` starts a menu loop over the
same shop instead.  The business logic lives in :mod:`shop` and
:mod:`client`; this module only wires it to the terminal.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

import logging_config
from client import Client
from errors import ShopError
from metrics import generate_metrics_text
from shop import Shop

logger = logging.getLogger(__name__)

DEMO_PRODUCTS = [
    ("milk", 10, 1500),
    ("cereal", 10, 2500),
]
DEMO_BALANCE = 10000


def run_demo() -> Tuple[Shop, Client]:
    """Run the scripted purchase.  Any rejected operation propagates."""
    shop = Shop(DEMO_PRODUCTS)
    print(f"Our shop opened!: {shop!r}")
    client = Client(DEMO_BALANCE)
    shop.buy(client, "milk", 5)
    shop.buy(client, "cereal", 1)
    print(f"Client's cart after putting products there: {list(client.shopping_cart())!r}")
    receipt = shop.checkout(client)
    print(f"Client's cart after the checkout: {list(client.shopping_cart())!r}")
    print(receipt.format())

    assert client.balance == 0
    assert len(client.shopping_cart()) == 0

    print(f"The shop closes!: {shop!r}")
    return shop, client


def interactive_cli(shop: Optional[Shop] = None, client: Optional[Client] = None) -> None:
    """Menu loop for reserving products and checking out by hand."""
    shop = shop if shop is not None else Shop(DEMO_PRODUCTS)
    client = client if client is not None else Client(DEMO_BALANCE)

    def print_menu() -> None:
        print("\n-- Shop --")
        print("1. List Products")
        print("2. Add Product to Cart")
        print("3. View Cart")
        print("4. Clear Cart")
        print("5. Checkout")
        print("6. Show Balance")
        print("0. Exit")

    while True:
        print_menu()
        choice = input("Select an option: ").strip()
        if choice == "1":
            for p in shop.list_products():
                print(f"{p.name} - {p.price} (Stock: {p.quantity})")
        elif choice == "2":
            name = input("Product name: ").strip()
            try:
                qty = int(input("Enter quantity: "))
            except ValueError:
                print("Please enter a valid number.")
                continue
            try:
                line = shop.buy(client, name, qty)
            except (ShopError, ValueError) as e:
                print(f"Could not add to cart: {e}")
                continue
            print(f"Added {line.quantity} x {line.product_name} to cart")
        elif choice == "3":
            cart = client.shopping_cart()
            if not cart:
                print("Cart is empty.")
            else:
                print("\nCart Contents:")
                for line in cart:
                    print(f"{line.product_name} x {line.quantity} = {line.line_total}")
                print(f"Total: {shop.cart_total(client)}")
        elif choice == "4":
            client.clear_cart()
            print("Cart cleared.")
        elif choice == "5":
            try:
                receipt = shop.checkout(client)
            except ShopError as e:
                print(f"Checkout failed: {e}")
                continue
            print("\nPurchase successful! Receipt:")
            print(receipt.format())
        elif choice == "6":
            print(f"Balance: {client.balance}")
        elif choice == "0":
            print("Exiting.")
            break
        else:
            print("Invalid option. Please try again.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="shop-demo", description="Minimal shop demonstration")
    parser.add_argument("-i", "--interactive", action="store_true", help="start the menu loop")
    parser.add_argument("--metrics", action="store_true", help="print metrics after the run")
    parser.add_argument("--log-dir", default=None, help="directory for the rotating log file")
    args = parser.parse_args(argv)

    logging_config.configure_logging(log_dir=args.log_dir)
    try:
        if args.interactive:
            interactive_cli()
        else:
            run_demo()
    except KeyboardInterrupt:
        print("\nInterrupted by user. Exiting.")
        return 0
    logger.info("Shop session finished", extra={"extra": {"interactive": args.interactive}})
    if args.metrics:
        print(generate_metrics_text().decode("utf-8"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
