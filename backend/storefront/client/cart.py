"""Shopping cart kept on the client between catalog visits."""

from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.core.config import settings
from storefront.schemas.order import CheckoutItem
from storefront.schemas.product import ProductResponse, ProductSummary


class CartItem(BaseModel):
    product_id: int
    slug: str
    name: str
    price: Decimal
    image: str = settings.PLACEHOLDER_IMAGE
    quantity: int = Field(1, ge=1)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Cart(BaseModel):
    items: list[CartItem] = []

    def _find(self, product_id: int) -> CartItem | None:
        return next((item for item in self.items if item.product_id == product_id), None)

    def add(self, item: CartItem) -> None:
        """Add one unit; a product already in the cart just gets its quantity bumped."""
        existing = self._find(item.product_id)
        if existing:
            existing.quantity += 1
        else:
            self.items.append(item.model_copy(update={"quantity": 1}))

    def add_product(self, product: ProductResponse | ProductSummary) -> None:
        self.add(
            CartItem(
                product_id=product.id,
                slug=product.slug,
                name=product.name,
                price=Decimal(str(product.price)),
                image=product.main_image or settings.PLACEHOLDER_IMAGE,
            )
        )

    def remove(self, product_id: int) -> None:
        self.items = [item for item in self.items if item.product_id != product_id]

    def update_quantity(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        item = self._find(product_id)
        if item:
            item.quantity = quantity

    def clear(self) -> None:
        self.items = []

    @property
    def total_price(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_checkout_items(self) -> list[CheckoutItem]:
        return [
            CheckoutItem(product_id=item.product_id, quantity=item.quantity)
            for item in self.items
        ]
