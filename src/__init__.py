"""Minimal shop: inventory reservation and balance-settled checkout.

The shop and its inventory live in :mod:`shop`, the shopper's balance and
cart in :mod:`client`, and the exceptions for rejected operations in
:mod:`errors`.
"""
