# --- path/bootstrap (keep this at the very top) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
# --- end path/bootstrap ---

import unittest

from client import CartLine, Client
from errors import InsufficientBalance


class TestClient(unittest.TestCase):

    def test_new_client_has_balance_and_empty_cart(self):
        client = Client(10000)
        self.assertEqual(client.balance, 10000)
        self.assertEqual(client.shopping_cart(), ())

    def test_invalid_balance(self):
        with self.assertRaises(ValueError):
            Client(-1)
        with self.assertRaises(TypeError):
            Client(10.5)
        with self.assertRaises(TypeError):
            Client(True)

    def test_add_product_keeps_order_and_accepts_tuples(self):
        client = Client(0)
        client.add_product(("milk", 5, 1500))
        client.add_product(CartLine("cereal", 1, 2500))
        self.assertEqual(
            client.shopping_cart(),
            (CartLine("milk", 5, 1500), CartLine("cereal", 1, 2500)),
        )
        self.assertEqual(client.shopping_cart()[0].line_total, 7500)

    def test_add_product_does_no_validation(self):
        client = Client(0)
        client.add_product(("anything", 999, 1))
        self.assertEqual(len(client.shopping_cart()), 1)

    def test_cart_view_is_read_only(self):
        client = Client(0)
        client.add_product(("milk", 1, 1))
        view = client.shopping_cart()
        self.assertIsInstance(view, tuple)
        client.add_product(("milk", 2, 1))
        self.assertEqual(len(view), 1)

    def test_clear_cart(self):
        client = Client(0)
        client.add_product(("milk", 1, 1))
        client.clear_cart()
        self.assertEqual(client.shopping_cart(), ())
        client.clear_cart()
        self.assertEqual(client.shopping_cart(), ())

    def test_balance_is_not_assignable(self):
        client = Client(100)
        with self.assertRaises(AttributeError):
            client.balance = 5

    def test_charge(self):
        client = Client(100)
        client.charge(40)
        self.assertEqual(client.balance, 60)
        client.charge(60)
        self.assertEqual(client.balance, 0)

    def test_charge_over_balance_is_rejected(self):
        client = Client(100)
        with self.assertRaises(InsufficientBalance):
            client.charge(101)
        with self.assertRaises(ValueError):
            client.charge(-1)
        self.assertEqual(client.balance, 100)


if __name__ == "__main__":
    unittest.main(verbosity=2)
