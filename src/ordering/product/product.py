"""Product aggregate: the sellable items carts and orders refer to."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from ordering.domain import ordering


@ordering.aggregate
class Product:
    name = String(required=True, max_length=200, sanitize=False)
    description = Text(sanitize=False)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()

    @classmethod
    def create(cls, name, price, stock=0, description=None):
        from ordering.product.events import ProductAdded

        product = cls(
            name=name,
            description=description,
            price=price,
            stock=stock,
            is_active=True,
            created_at=datetime.now(UTC),
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                price=price,
                stock=stock,
            )
        )
        return product

    def ensure_purchasable(self, quantity):
        """Reject quantities the catalogue cannot satisfy."""
        if not self.is_active:
            raise ValidationError({"product_id": [f"Product {self.id} is not available"]})
        if quantity > (self.stock or 0):
            raise ValidationError({"quantity": [f"Insufficient stock for {self.name}"]})

    def deactivate(self):
        self.is_active = False
