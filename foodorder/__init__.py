"""Food ordering service: menus, carts and orders."""

__version__ = "0.1.0"
