"""Checkout and admin order endpoints."""

import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from storefront.db.base import get_db
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.schemas.order import (
    CheckoutRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])
admin_router = APIRouter(prefix="/api/admin/orders", tags=["admin-orders"])


async def _load_order(db: AsyncSession, order_id: int) -> Order | None:
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(body: CheckoutRequest, db: AsyncSession = Depends(get_db)):
    """Place an order from cart lines.

    Names, prices and images are copied from the current products so the
    order keeps what the customer saw even if the catalog changes later.
    """
    product_ids = {item.product_id for item in body.items}
    result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    products = {p.id: p for p in result.scalars().all()}

    missing = sorted(product_ids - products.keys())
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Products not found: {', '.join(str(i) for i in missing)}",
        )

    total = Decimal("0")
    order_items = []
    for line in body.items:
        product = products[line.product_id]
        total += product.price * line.quantity
        order_items.append(
            OrderItem(
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=line.quantity,
                image_url=product.main_image,
            )
        )

    order = Order(
        status=OrderStatus.CREATED,
        customer_name=body.customer_name,
        email=str(body.email),
        phone=body.phone,
        address=body.address or "",
        comment=body.comment or "",
        total_amount=total,
        items=order_items,
    )
    db.add(order)
    await db.commit()

    logger.info("Created order %s: %d items, total %s", order.id, len(order_items), total)
    return OrderResponse.model_validate(await _load_order(db, order.id))


@admin_router.get("", response_model=OrderListResponse)
async def list_orders(
    status_filter: OrderStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Newest orders first with per-order item counts."""
    count_query = select(func.count(Order.id))
    items_count = func.count(OrderItem.id).label("items_count")
    total_items = func.coalesce(func.sum(OrderItem.quantity), 0).label("total_items")
    query = (
        select(Order, items_count, total_items)
        .outerjoin(OrderItem, OrderItem.order_id == Order.id)
        .group_by(Order.id)
    )
    if status_filter:
        count_query = count_query.where(Order.status == status_filter)
        query = query.where(Order.status == status_filter)

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(
        query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).offset(offset)
    )

    items = [
        OrderSummary(
            id=order.id,
            status=order.status,
            customer_name=order.customer_name,
            email=order.email,
            phone=order.phone,
            total_amount=order.total_amount,
            created_at=order.created_at,
            items_count=count,
            total_items=quantity,
        )
        for order, count, quantity in result.all()
    ]
    return OrderListResponse(items=items, total=total, limit=limit, offset=offset)


@admin_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    order = await _load_order(db, order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    return OrderResponse.model_validate(order)


@admin_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    order = await _load_order(db, order_id)
    if not order:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )

    previous = order.status
    order.status = body.status
    await db.commit()

    logger.info("Order %s status %s -> %s", order_id, previous.value, body.status.value)
    return OrderResponse.model_validate(await _load_order(db, order_id))
