"""Tests for the admin product API."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from storefront.schemas.product import ProductCreate


def product_data(**overrides) -> dict:
    data = {
        "name": "Bullet Camera X1",
        "slug": "bullet-camera-x1",
        "sku": "BUL-X1",
        "description": "Outdoor bullet camera with IR",
        "price": "4990.00",
        "category_id": 1,
        "stock_quantity": 3,
    }
    data.update(overrides)
    return data


# ── Handler unit tests ──────────────────────

@pytest.mark.asyncio
async def test_create_product_duplicate_sku():
    """Creating a product with an existing SKU should fail."""
    from storefront.api.products import create_product

    mock_db = AsyncMock()
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = 11
    mock_db.execute.return_value = mock_result

    with pytest.raises(HTTPException) as exc_info:
        await create_product(ProductCreate(**product_data()), mock_db)

    assert exc_info.value.status_code == 409
    assert "sku" in str(exc_info.value.detail).lower()


@pytest.mark.asyncio
async def test_create_product_duplicate_slug():
    from storefront.api.products import create_product

    free = MagicMock()
    free.scalar_one_or_none.return_value = None
    taken = MagicMock()
    taken.scalar_one_or_none.return_value = 12
    mock_db = AsyncMock()
    mock_db.execute.side_effect = [free, taken]

    with pytest.raises(HTTPException) as exc_info:
        await create_product(ProductCreate(**product_data()), mock_db)

    assert exc_info.value.status_code == 409
    assert "slug" in str(exc_info.value.detail).lower()


@pytest.mark.asyncio
async def test_get_product_not_found():
    """Getting a non-existent product should return 404."""
    from storefront.api.products import get_product_by_id

    mock_db = AsyncMock()
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = None
    mock_db.execute.return_value = mock_result

    with pytest.raises(HTTPException) as exc_info:
        await get_product_by_id(product_id=999, db=mock_db)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_product_sku_conflict():
    """Changing SKU to one used by another product should fail."""
    from storefront.api.products import update_product
    from storefront.schemas.product import ProductUpdate

    product = MagicMock()
    product.sku = "OLD-SKU"
    found = MagicMock()
    found.scalar_one_or_none.return_value = product
    conflict = MagicMock()
    conflict.scalar_one_or_none.return_value = 99
    mock_db = AsyncMock()
    mock_db.execute.side_effect = [found, conflict]

    with pytest.raises(HTTPException) as exc_info:
        await update_product(1, ProductUpdate(sku="TAKEN"), mock_db)

    assert exc_info.value.status_code == 409
    mock_db.commit.assert_not_called()


def test_product_validation_rules():
    with pytest.raises(ValidationError):
        ProductCreate(**product_data(description="short"))
    with pytest.raises(ValidationError):
        ProductCreate(**product_data(price="-1"))
    with pytest.raises(ValidationError):
        ProductCreate(**product_data(price="10.005"))
    with pytest.raises(ValidationError):
        ProductCreate(**product_data(stock_quantity=-2))

    product = ProductCreate(**product_data())
    assert product.price == Decimal("4990.00")
    assert product.main_image is None


# ── Through the HTTP layer ──────────────────────

@pytest.mark.asyncio
async def test_product_crud(client, seeded):
    category_id = seeded["categories"]["analog-cameras"]

    created = await client.post("/api/admin/products", json=product_data(category_id=category_id))
    assert created.status_code == 201
    body = created.json()
    assert body["main_image"] == "/placeholder-product.jpg"
    assert body["category"]["slug"] == "analog-cameras"
    product_id = body["id"]

    conflict = await client.post(
        "/api/admin/products",
        json=product_data(category_id=category_id, slug="another-slug"),
    )
    assert conflict.status_code == 409

    updated = await client.put(
        f"/api/admin/products/{product_id}", json={"price": "5200.00", "is_hit": True}
    )
    assert updated.status_code == 200
    assert updated.json()["price"] == 5200
    assert updated.json()["is_hit"] is True

    # Keeping its own SKU is not a conflict
    same_sku = await client.put(f"/api/admin/products/{product_id}", json={"sku": "BUL-X1"})
    assert same_sku.status_code == 200

    listing = (await client.get("/api/admin/products", params={"category_id": category_id})).json()
    assert listing["total"] == 2

    assert (await client.delete(f"/api/admin/products/{product_id}")).status_code == 204
    assert (await client.get(f"/api/admin/products/{product_id}")).status_code == 404


@pytest.mark.asyncio
async def test_create_product_unknown_category(client):
    response = await client.post("/api/admin/products", json=product_data(category_id=999))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_product_images(client, seeded):
    product_id = seeded["products"]["hiwatch-ds-t209p"]

    added = await client.post(
        f"/api/admin/products/{product_id}/images", json={"image_url": "/img/side.jpg"}
    )
    assert added.status_code == 201
    images = added.json()["images"]
    assert [img["sort_order"] for img in images] == [1, 2]

    main = await client.post(
        f"/api/admin/products/{product_id}/images",
        json={"image_url": "/img/front.jpg", "is_main": True},
    )
    assert main.json()["main_image"] == "/img/front.jpg"
    assert main.json()["images"][-1]["sort_order"] == 3

    image_id = main.json()["images"][-1]["id"]
    removed = await client.delete(f"/api/admin/products/{product_id}/images/{image_id}")
    assert removed.status_code == 204
    missing = await client.delete(f"/api/admin/products/{product_id}/images/{image_id}")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_product_specification_upsert(client, seeded):
    product_id = seeded["products"]["hikvision-ds-kh6320-wte1"]
    specs = (await client.get("/api/admin/products/specifications")).json()
    body_type = next(s for s in specs if s["slug"] == "body-type")

    first = await client.put(
        f"/api/admin/products/{product_id}/specifications",
        json={"specification_id": body_type["id"], "value": "Настенная"},
    )
    second = await client.put(
        f"/api/admin/products/{product_id}/specifications",
        json={"specification_id": body_type["id"], "value": "Панельная"},
    )
    assert first.status_code == 200
    values = [
        s["value"] for s in second.json()["specifications"]
        if s["specification"]["slug"] == "body-type"
    ]
    assert values == ["Панельная"]

    removed = await client.delete(
        f"/api/admin/products/{product_id}/specifications/{body_type['id']}"
    )
    assert removed.status_code == 204

    unknown = await client.put(
        f"/api/admin/products/{product_id}/specifications",
        json={"specification_id": 999, "value": "x"},
    )
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_delete_ordered_product_is_refused(client, seeded):
    product_id = seeded["products"]["hiwatch-ds-t209p"]
    order = await client.post(
        "/api/orders",
        json={
            "customer_name": "Anna",
            "email": "anna@example.com",
            "phone": "+79990000000",
            "items": [{"product_id": product_id, "quantity": 1}],
        },
    )
    assert order.status_code == 201

    response = await client.delete(f"/api/admin/products/{product_id}")
    assert response.status_code == 409


def test_update_rejects_null_for_required_columns():
    from storefront.schemas.product import ProductUpdate

    for field in ("name", "slug", "sku", "description", "price", "category_id", "stock_quantity"):
        with pytest.raises(ValidationError):
            ProductUpdate(**{field: None})

    # Clearing the image falls back to the placeholder instead
    assert ProductUpdate(main_image=None).model_dump(exclude_unset=True) == {"main_image": None}


@pytest.mark.asyncio
async def test_update_product_with_null_name_is_rejected(client, seeded):
    product_id = seeded["products"]["hiwatch-ds-t209p"]

    response = await client.put(f"/api/admin/products/{product_id}", json={"name": None})
    assert response.status_code == 422

    unchanged = (await client.get(f"/api/admin/products/{product_id}")).json()
    assert unchanged["name"]
