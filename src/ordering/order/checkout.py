"""Checkout: turn the customer's server cart into a pending order."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Dict, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.cart.items import cart_for
from ordering.domain import ordering
from ordering.order.order import Order, PaymentMethod
from ordering.product.product import Product
from shared.logging import get_logger

logger = get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    shipping_address = Dict(required=True)
    tax = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    notes = Text(sanitize=False)


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = cart_for(command.customer_id)
        if cart is None or not cart.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        product_repo = current_domain.repository_for(Product)
        items_data = []
        for item in cart.items:
            product = product_repo.get(item.product_id)
            product.ensure_purchasable(item.quantity)
            items_data.append(
                {
                    "product_id": str(product.id),
                    "name": product.name,
                    "quantity": item.quantity,
                    "unit_price": product.price,
                }
            )

        order = Order.place(
            customer_id=command.customer_id,
            items_data=items_data,
            tax=command.tax,
            shipping=command.shipping,
            payment_method=command.payment_method,
            shipping_address=command.shipping_address,
            notes=command.notes,
            order_number_prefix=getattr(current_domain, "ORDER_NUMBER_PREFIX", "ORD"),
        )
        current_domain.repository_for(Order).add(order)

        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            total=order.pricing.total,
        )
        return str(order.id)
