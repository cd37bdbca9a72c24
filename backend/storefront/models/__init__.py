"""SQLAlchemy models for the storefront."""

from storefront.models.category import Category
from storefront.models.product import Product, ProductImage, Specification, ProductSpecification
from storefront.models.order import Order, OrderItem, OrderStatus

__all__ = [
    "Category",
    "Product",
    "ProductImage",
    "Specification",
    "ProductSpecification",
    "Order",
    "OrderItem",
    "OrderStatus",
]
