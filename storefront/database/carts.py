"""Cart storage for the storefront"""

import hashlib
import json
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..models.cart import Cart, CartLine
from ..models.customization import Customization
from ..models.product import Product
from ..pricing.customization import get_custom_fee


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_line_key(
    product_id: str,
    size: str,
    color: str,
    customization: Optional[Customization] = None,
) -> str:
    """Identity of a cart line; the same variant with the same design merges"""
    key = f"{product_id}::{size}::{color}"
    if customization is not None and customization.parts:
        canonical = json.dumps(customization.model_dump(mode="json"), sort_keys=True)
        digest = hashlib.sha1(canonical.encode()).hexdigest()[:12]
        key = f"{key}::{digest}"
    return key


class CartStore:
    """
    In-memory cart storage.

    One instance is created per application and reached through
    ``app.state.carts``; carts are never shared between sessions.
    """

    def __init__(self):
        self.carts: dict[str, Cart] = {}

    def create_cart(self) -> Cart:
        """Create a new cart"""
        now = _now()
        cart = Cart(
            cart_id=str(uuid.uuid4()),
            lines=[],
            created_at=now,
            updated_at=now,
        )
        self.carts[cart.cart_id] = cart
        return cart

    def get_cart(self, cart_id: str) -> Optional[Cart]:
        """Get a cart by ID"""
        return self.carts.get(cart_id)

    def add_line(
        self,
        cart_id: str,
        product: Product,
        size: str,
        color: str,
        quantity: int = 1,
        customization: Optional[Customization] = None,
    ) -> Optional[Cart]:
        """Add a product variant to the cart"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        key = build_line_key(product.id, size, color, customization)
        existing_line = next((line for line in cart.lines if line.key == key), None)

        if existing_line:
            existing_line.quantity += quantity
        else:
            cart.lines.append(
                CartLine(
                    key=key,
                    product_id=product.id,
                    product_name=product.name,
                    slug=product.slug,
                    unit_price=product.price_cents,
                    size=size,
                    color=color,
                    quantity=quantity,
                    customization=customization,
                    custom_fee_per_unit=get_custom_fee(customization),
                )
            )

        cart.updated_at = _now()
        return cart

    def update_line_quantity(self, cart_id: str, key: str, quantity: int) -> Optional[Cart]:
        """Set a line quantity; zero or less removes the line"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        line = next((line for line in cart.lines if line.key == key), None)
        if not line:
            return None

        if quantity <= 0:
            cart.lines = [line for line in cart.lines if line.key != key]
        else:
            line.quantity = quantity

        cart.updated_at = _now()
        return cart

    def remove_line(self, cart_id: str, key: str) -> Optional[Cart]:
        """Remove a line from the cart"""
        return self.update_line_quantity(cart_id, key, 0)

    def remove_lines(self, cart_id: str, keys: Iterable[str]) -> Optional[Cart]:
        """Remove every line in ``keys``, e.g. after they were ordered"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        drop = set(keys)
        cart.lines = [line for line in cart.lines if line.key not in drop]
        cart.updated_at = _now()
        return cart

    def clear_cart(self, cart_id: str) -> Optional[Cart]:
        """Clear all lines from cart"""
        cart = self.get_cart(cart_id)
        if not cart:
            return None

        cart.lines = []
        cart.updated_at = _now()
        return cart

    def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart"""
        if cart_id in self.carts:
            del self.carts[cart_id]
            return True
        return False
