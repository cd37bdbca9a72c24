from decimal import Decimal

from pydantic import BaseModel, Field


class PopularProduct(BaseModel):
    id: int
    name: str
    count: int
    total: int


class DashboardStats(BaseModel):
    products_count: int
    orders_count: int
    total_sales: Decimal = Field(..., decimal_places=2)
    completed_sales: Decimal = Field(..., decimal_places=2)
    new_orders_count: int
    orders_by_status: dict[str, int]
    popular_products: list[PopularProduct]
