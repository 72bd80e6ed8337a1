"""Catalogue management: commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.product.product import Product


@ordering.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=200, sanitize=False)
    description = Text(sanitize=False)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)


@ordering.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@ordering.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.create(
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
            description=command.description,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
