"""Storefront: catalogue, cart, address book, shipping methods, orders and payments."""
