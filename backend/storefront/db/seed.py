"""Seed the demo camera catalog.

Run with ``python -m storefront.db.seed``. Existing catalog rows are removed
first, so the command can be repeated.
"""

import asyncio
import logging
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.logging import configure_logging
from storefront.db.base import AsyncSessionLocal, init_db
from storefront.models.category import Category
from storefront.models.order import Order, OrderItem
from storefront.models.product import (
    BODY_TYPE_SLUG,
    RESOLUTION_SLUG,
    Product,
    ProductImage,
    ProductSpecification,
    Specification,
)

logger = logging.getLogger(__name__)

# (slug, name, description, parent slug)
CATEGORIES = [
    ("cameras", "Камеры видеонаблюдения", "Все типы камер для систем видеонаблюдения", None),
    ("ip-cameras", "IP-камеры", "Современные IP-камеры для видеонаблюдения", "cameras"),
    ("analog-cameras", "Аналоговые камеры", "Традиционные аналоговые камеры видеонаблюдения", "cameras"),
    ("video-doorbell", "Видеодомофоны", "Системы видеодомофонов", None),
]

SPECIFICATIONS = {
    RESOLUTION_SLUG: "Разрешение",
    BODY_TYPE_SLUG: "Тип корпуса",
    "sensor": "Сенсор",
    "night-vision": "Ночное видение",
}

PRODUCTS = [
    {
        "name": "IP-камера Hikvision DS-2CD2143G2-I",
        "slug": "hikvision-ds-2cd2143g2-i",
        "sku": "HIK-DS-2CD2143G2-I",
        "description": (
            "Купольная IP-камера Hikvision DS-2CD2143G2-I 4 Мп с ИК-подсветкой до 30 м, "
            "для внутренней и наружной установки."
        ),
        "price": Decimal("7500"),
        "category": "ip-cameras",
        "is_hit": True,
        "stock_quantity": 25,
        "images": ["hikvision-ds-2cd2143g2-i.jpg", "hikvision-ds-2cd2143g2-i-2.jpg"],
        "specs": {
            RESOLUTION_SLUG: "4 Мп (2688 × 1520)",
            BODY_TYPE_SLUG: "Купольная",
            "sensor": '1/2.7" Progressive Scan CMOS',
            "night-vision": "До 30 метров",
        },
    },
    {
        "name": "IP-камера Dahua IPC-HDW3441TMP-AS",
        "slug": "dahua-ipc-hdw3441tmp-as",
        "sku": "DAHUA-IPC-HDW3441TMP-AS",
        "description": (
            "Купольная IP-камера Dahua с разрешением 4 Мп, встроенным микрофоном "
            "и ИК-подсветкой до 50 м."
        ),
        "price": Decimal("8200"),
        "category": "ip-cameras",
        "is_hit": False,
        "stock_quantity": 15,
        "images": ["dahua-ipc-hdw3441tmp-as.jpg", "dahua-ipc-hdw3441tmp-as-2.jpg"],
        "specs": {
            RESOLUTION_SLUG: "4 Мп (2688 × 1520)",
            BODY_TYPE_SLUG: "Купольная",
            "sensor": '1/3" CMOS',
            "night-vision": "До 50 метров, Starlight",
        },
    },
    {
        "name": "Аналоговая камера HiWatch DS-T209P",
        "slug": "hiwatch-ds-t209p",
        "sku": "HWT-DS-T209P",
        "description": (
            "Цилиндрическая уличная камера с поддержкой HD-TVI, AHD, CVI и CVBS. "
            "Разрешение 2 Мп, ИК-подсветка до 40 метров, защита IP67."
        ),
        "price": Decimal("3500"),
        "category": "analog-cameras",
        "is_hit": True,
        "stock_quantity": 30,
        "images": ["hiwatch-ds-t209p.jpg"],
        "specs": {
            RESOLUTION_SLUG: "2 Мп (1920 × 1080)",
            BODY_TYPE_SLUG: "Цилиндрическая",
            "night-vision": "До 40 метров",
        },
    },
    {
        "name": "Видеодомофон Hikvision DS-KH6320-WTE1",
        "slug": "hikvision-ds-kh6320-wte1",
        "sku": "HIK-DS-KH6320-WTE1",
        "description": (
            "Внутренний монитор видеодомофона с 7-дюймовым сенсорным экраном, Wi-Fi "
            "и поддержкой мобильного приложения."
        ),
        "price": Decimal("14500"),
        "category": "video-doorbell",
        "is_hit": False,
        "stock_quantity": 10,
        "images": ["hikvision-ds-kh6320-wte1.jpg", "hikvision-ds-kh6320-wte1-2.jpg"],
        "specs": {RESOLUTION_SLUG: "1024 × 600"},
    },
]

IMAGE_ROOT = "/images/products/"


async def clear_catalog(session: AsyncSession) -> None:
    for model in (OrderItem, Order, ProductSpecification, ProductImage, Product, Specification):
        await session.execute(delete(model))
    # children first so parent references never dangle
    await session.execute(delete(Category).where(Category.parent_id.is_not(None)))
    await session.execute(delete(Category))


async def seed_catalog(session: AsyncSession) -> None:
    categories: dict[str, Category] = {}
    for slug, name, description, parent_slug in CATEGORIES:
        category = Category(
            slug=slug,
            name=name,
            description=description,
            parent=categories.get(parent_slug) if parent_slug else None,
        )
        session.add(category)
        categories[slug] = category

    specifications = {
        slug: Specification(slug=slug, name=name) for slug, name in SPECIFICATIONS.items()
    }
    session.add_all(specifications.values())

    for data in PRODUCTS:
        images = [IMAGE_ROOT + filename for filename in data["images"]]
        product = Product(
            name=data["name"],
            slug=data["slug"],
            sku=data["sku"],
            description=data["description"],
            price=data["price"],
            category=categories[data["category"]],
            is_hit=data["is_hit"],
            in_stock=True,
            stock_quantity=data["stock_quantity"],
            main_image=images[0],
        )
        product.images = [
            ProductImage(image_url=url, is_main=index == 0, sort_order=index + 1)
            for index, url in enumerate(images)
        ]
        product.specifications = [
            ProductSpecification(specification=specifications[slug], value=value)
            for slug, value in data["specs"].items()
        ]
        session.add(product)

    await session.commit()
    logger.info("Seeded %d categories and %d products", len(categories), len(PRODUCTS))


async def amain() -> None:
    configure_logging()
    await init_db()
    async with AsyncSessionLocal() as session:
        await clear_catalog(session)
        await seed_catalog(session)


if __name__ == "__main__":
    asyncio.run(amain())
