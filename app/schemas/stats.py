# app/schemas/stats.py
from datetime import date, datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.order import OrderStatus


class DashboardStats(SQLModel):
    """
    Headline numbers for the admin dashboard.
    """
    model_config = ConfigDict(extra="forbid")

    total_customers: int
    total_products: int
    total_orders: int
    total_revenue: float
    pending_orders: int
    low_stock_products: int


class RecentOrder(SQLModel):
    """
    Lightweight info for last N orders.
    """
    model_config = ConfigDict(extra="forbid")

    id: int
    order_number: str
    customer_name: str
    total: float
    status: OrderStatus
    created_at: datetime


class LowStockProduct(SQLModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    stock: int
    category_name: str | None = None


class DailySales(SQLModel):
    """
    Revenue per day.
    """
    model_config = ConfigDict(extra="forbid")

    date: date
    total_revenue: float
    order_count: int


class SalesReport(SQLModel):
    model_config = ConfigDict(extra="forbid")

    start_date: date
    end_date: date
    total_revenue: float
    total_orders: int
    average_order_value: float
    daily_sales: list[DailySales]
