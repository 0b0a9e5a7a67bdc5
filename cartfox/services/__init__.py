"""Business services orchestrating cart operations."""

from .cart_service import CartService

__all__ = ["CartService"]
