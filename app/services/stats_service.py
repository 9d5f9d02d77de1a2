# app/services/stats_service.py
from datetime import date, datetime, time, timedelta, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.pagination import page_count
from app.models.user import utcnow
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.schemas.stats import (
    DailySales,
    DashboardStats,
    LowStockProduct,
    RecentOrder,
    SalesReport,
)
from app.schemas.user import CustomerPage, CustomerRead

LOW_STOCK_THRESHOLD = 10

# Sales report window when no dates are given
DEFAULT_REPORT_DAYS = 30


def _as_date(value) -> date:
    # DATE() comes back as a string on SQLite
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class StatsService:
    """
    Orchestrates aggregated admin console statistics.
    """

    def __init__(
        self,
        repo: StatsRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ):
        self.repo = repo
        self.product_repo = product_repo
        self.category_repo = category_repo

    def get_dashboard_stats(self, session: Session) -> DashboardStats:
        return DashboardStats(
            total_customers=self.repo.count_customers(session),
            total_products=self.product_repo.count(session),
            total_orders=self.repo.count_orders(session),
            total_revenue=self.repo.total_revenue(session),
            pending_orders=self.repo.count_orders(session, status="pending"),
            low_stock_products=self.product_repo.count_low_stock(session, LOW_STOCK_THRESHOLD),
        )

    def get_recent_orders(self, session: Session, limit: int = 5) -> list[RecentOrder]:
        return [
            RecentOrder(
                id=o.id,
                order_number=o.order_number,
                customer_name=customer_name,
                total=o.total,
                status=o.status,
                created_at=o.created_at,
            )
            for o, customer_name in self.repo.recent_orders(session, limit=limit)
        ]

    def get_low_stock(self, session: Session, threshold: int = LOW_STOCK_THRESHOLD) -> list[LowStockProduct]:
        products = self.product_repo.list_low_stock(session, threshold=threshold)
        names = self.category_repo.names_for(
            session, {p.category_id for p in products if p.category_id is not None}
        )
        return [
            LowStockProduct(
                id=p.id,
                name=p.name,
                stock=p.stock,
                category_name=names.get(p.category_id),
            )
            for p in products
        ]

    def list_customers(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
    ) -> CustomerPage:
        rows, total = self.repo.customers(
            session, search=search, skip=(page - 1) * limit, limit=limit
        )
        customers = [
            CustomerRead(
                id=user.id,
                name=user.name,
                email=user.email,
                phone=user.phone,
                role=user.role,
                created_at=user.created_at,
                order_count=int(order_count or 0),
                total_spent=round(float(spent or 0.0), 2),
            )
            for user, order_count, spent in rows
        ]
        return CustomerPage(
            customers=customers,
            page=page,
            pages=page_count(total, limit),
            total=total,
        )

    def get_sales_report(
        self,
        session: Session,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> SalesReport:
        """
        Daily revenue and order counts between two dates (both inclusive).

        Defaults to the last 30 days. Cancelled orders are excluded.
        """
        if end_date is None:
            end_date = utcnow().date()
        if start_date is None:
            start_date = end_date - timedelta(days=DEFAULT_REPORT_DAYS - 1)

        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="start_date must be on or before end_date",
            )

        rows = self.repo.daily_sales(
            session,
            start=datetime.combine(start_date, time.min, tzinfo=timezone.utc),
            end=datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc),
        )

        daily_sales = [
            DailySales(
                date=_as_date(day),
                total_revenue=round(float(revenue or 0.0), 2),
                order_count=int(order_count or 0),
            )
            for day, revenue, order_count in rows
        ]

        total_revenue = round(sum(d.total_revenue for d in daily_sales), 2)
        total_orders = sum(d.order_count for d in daily_sales)

        return SalesReport(
            start_date=start_date,
            end_date=end_date,
            total_revenue=total_revenue,
            total_orders=total_orders,
            average_order_value=round(total_revenue / total_orders, 2) if total_orders else 0.0,
            daily_sales=daily_sales,
        )
