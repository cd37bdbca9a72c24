"""Product, ProductImage and specification models."""

from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.db.base import Base
from storefront.models.mixins import CreatedAtMixin, IntegerPrimaryKeyMixin, TimestampMixin

BODY_TYPE_SLUG = "body-type"
RESOLUTION_SLUG = "resolution"


class Product(IntegerPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    sku: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, index=True)
    is_hit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    in_stock: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    stock_quantity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    main_image: Mapped[str] = mapped_column(String(500), nullable=False)

    # Foreign keys
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=False, index=True
    )

    # Relationships
    category = relationship("Category", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.sort_order",
    )
    specifications = relationship(
        "ProductSpecification", back_populates="product", cascade="all, delete-orphan"
    )
    order_items = relationship("OrderItem", back_populates="product", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<Product {self.sku}: {self.name}>"


class ProductImage(IntegerPrimaryKeyMixin, CreatedAtMixin, Base):
    __tablename__ = "product_images"

    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    is_main: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )

    product = relationship("Product", back_populates="images")

    def __repr__(self) -> str:
        return f"<ProductImage product={self.product_id} order={self.sort_order}>"


class Specification(IntegerPrimaryKeyMixin, Base):
    """Named attribute type, e.g. body type or resolution."""

    __tablename__ = "specifications"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)

    values = relationship("ProductSpecification", back_populates="specification")

    def __repr__(self) -> str:
        return f"<Specification {self.slug}>"


class ProductSpecification(IntegerPrimaryKeyMixin, Base):
    __tablename__ = "product_specifications"
    __table_args__ = (
        UniqueConstraint("product_id", "specification_id", name="uq_product_specification"),
    )

    value: Mapped[str] = mapped_column(String(255), nullable=False)

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    specification_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("specifications.id", ondelete="CASCADE"), nullable=False, index=True
    )

    product = relationship("Product", back_populates="specifications")
    specification = relationship("Specification", back_populates="values")

    def __repr__(self) -> str:
        return f"<ProductSpecification product={self.product_id} spec={self.specification_id}>"
