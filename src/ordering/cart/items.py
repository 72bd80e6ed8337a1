"""Cart item management: commands and handler.

Carts are addressed by their owner. The first add for a customer creates
the cart.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain
from protean.utils.query import Q

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering
from ordering.product.product import Product


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


def cart_for(customer_id):
    """The customer's cart, or ``None`` if they never added anything."""
    return current_domain.repository_for(ShoppingCart).find(Q(customer_id=customer_id)).first


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = cart_for(command.customer_id) or ShoppingCart.create(customer_id=command.customer_id)

        product = current_domain.repository_for(Product).get(command.product_id)
        product.ensure_purchasable(cart.quantity_of(command.product_id) + command.quantity)

        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(command.customer_id)

        product = current_domain.repository_for(Product).get(command.product_id)
        product.ensure_purchasable(command.new_quantity)

        cart.update_item_quantity(product_id=command.product_id, new_quantity=command.new_quantity)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(command.customer_id)
        cart.remove_item(product_id=command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = cart_for(command.customer_id)
        if cart is None:
            return
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)


def _existing_cart(customer_id):
    cart = cart_for(customer_id)
    if cart is None:
        raise ObjectNotFoundError(f"No cart for customer {customer_id}")
    return cart
