"""Admin dashboard statistics."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.base import get_db
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.schemas.dashboard import DashboardStats, PopularProduct

router = APIRouter(prefix="/api/admin/dashboard", tags=["admin-dashboard"])

POPULAR_PRODUCTS_LIMIT = 5


def _money(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(Decimal("0.01"))


@router.get("", response_model=DashboardStats)
async def get_dashboard_stats(db: AsyncSession = Depends(get_db)):
    products_count = (await db.execute(select(func.count(Product.id)))).scalar_one()
    orders_count = (await db.execute(select(func.count(Order.id)))).scalar_one()
    total_sales = (await db.execute(select(func.sum(Order.total_amount)))).scalar()
    completed_sales = (
        await db.execute(
            select(func.sum(Order.total_amount)).where(Order.status == OrderStatus.COMPLETED)
        )
    ).scalar()

    by_status_result = await db.execute(
        select(Order.status, func.count(Order.id)).group_by(Order.status)
    )
    orders_by_status = {s.value: 0 for s in OrderStatus}
    for order_status, count in by_status_result.all():
        orders_by_status[order_status.value] = count

    quantity_sold = func.sum(OrderItem.quantity).label("quantity_sold")
    popular_result = await db.execute(
        select(Product.id, Product.name, func.count(OrderItem.id), quantity_sold)
        .join(OrderItem, OrderItem.product_id == Product.id)
        .group_by(Product.id, Product.name)
        .order_by(quantity_sold.desc(), Product.id)
        .limit(POPULAR_PRODUCTS_LIMIT)
    )
    popular = [
        PopularProduct(id=pid, name=name, count=count, total=int(total or 0))
        for pid, name, count, total in popular_result.all()
    ]

    return DashboardStats(
        products_count=products_count,
        orders_count=orders_count,
        total_sales=_money(total_sales),
        completed_sales=_money(completed_sales),
        new_orders_count=orders_by_status[OrderStatus.CREATED.value],
        orders_by_status=orders_by_status,
        popular_products=popular,
    )
