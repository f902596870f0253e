"""
Checkout / order service

Turns a cart into an order. Prices always come from the catalog as it
is at checkout time; whatever the client sends as a price is ignored.
Orders are append-only.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from catalog import CatalogService
from database import ORDERS, RecordStore
from errors import ValidationError
from schemas import Order, OrderItem, Payment

logger = logging.getLogger(__name__)

CHECKOUT_MESSAGE = "Order created; payment is pending."


def coerce_quantity(value: Any) -> int:
    """Positive integer quantity; anything unusable becomes 1, anything huge is rejected."""
    if isinstance(value, bool):
        return 1
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 1
    if not isinstance(value, (int, float)) or value != value:
        return 1
    try:
        quantity = int(value)
    except OverflowError:
        return 1
    try:
        float(quantity)
    except OverflowError:
        raise ValidationError("Quantity is too large.")
    return quantity if quantity >= 1 else 1


def _parse_cart(cart_items: Any) -> List[Dict[str, Any]]:
    if not isinstance(cart_items, list) or not cart_items:
        raise ValidationError("Please provide at least one order item.")
    cart = []
    for item in cart_items:
        if not isinstance(item, dict):
            raise ValidationError("Each order item must be an object.")
        product_id = item.get("productId")
        if not isinstance(product_id, str) or not product_id:
            raise ValidationError("Each order item needs a productId.")
        cart.append({"productId": product_id, "quantity": coerce_quantity(item.get("quantity"))})
    return cart


def _parse_customer(customer: Any) -> Dict[str, Any]:
    if customer is None:
        return {}
    if not isinstance(customer, dict):
        raise ValidationError("Customer details must be an object.")
    return customer


def _parse_payment(payment: Any) -> Payment:
    if payment is None:
        payment = {}
    if not isinstance(payment, dict):
        raise ValidationError("Payment details must be an object.")
    return Payment(
        method=str(payment.get("method") or "offline"),
        status="pending",
        reference=str(payment.get("reference") or ""),
    )


class CheckoutService:
    def __init__(self, store: RecordStore, catalog: CatalogService):
        self.store = store
        self.catalog = catalog

    async def checkout(
        self,
        cart_items: Any,
        customer_info: Any = None,
        payment_info: Optional[Any] = None,
    ) -> Dict[str, Any]:
        cart = _parse_cart(cart_items)
        customer = _parse_customer(customer_info)
        payment = _parse_payment(payment_info)

        products = {item.get("id"): item for item in await self.catalog.list()}
        items = []
        for line in cart:
            product = products.get(line["productId"])
            if product is None:
                raise ValidationError(f"Product not found: {line['productId']}")
            items.append(
                OrderItem(
                    product_id=product["id"],
                    name=product.get("name", ""),
                    unit_price=product["price"],
                    quantity=line["quantity"],
                )
            )

        total = sum(item.unit_price * item.quantity for item in items)
        if not math.isfinite(total):
            raise ValidationError("Order total is too large.")

        order = Order(
            created_at=datetime.now(timezone.utc),
            items=items,
            customer=customer,
            payment=payment,
            total=total,
        )
        record = order.model_dump(mode="json", by_alias=True)

        async with self.store.lock(ORDERS):
            orders = await self.store.load(ORDERS)
            orders.append(record)
            await self.store.save(ORDERS, orders)
        logger.info("Created order %s (%d items, total %s)", order.id, len(items), order.total)
        return record

    async def list_orders(self) -> List[Dict[str, Any]]:
        return await self.store.load(ORDERS)
