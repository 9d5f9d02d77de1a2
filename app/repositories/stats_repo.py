# app/repositories/stats_repo.py
from datetime import datetime

from sqlalchemy import case, func, or_
from sqlmodel import Session, select

from app.models.order import Order
from app.models.user import User


class StatsRepository:
    """
    Read-only aggregated queries for admin dashboard and reports.
    """

    def count_customers(self, session: Session) -> int:
        stmt = select(func.count()).select_from(User).where(User.role == "customer")
        value = session.exec(stmt).one()
        return int(value or 0)

    def count_orders(self, session: Session, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(Order)
        if status:
            stmt = stmt.where(Order.status == status)
        value = session.exec(stmt).one()
        return int(value or 0)

    def total_revenue(self, session: Session) -> float:
        """
        Sum of totals for all non-cancelled orders.
        """
        stmt = select(func.coalesce(func.sum(Order.total), 0.0)).where(
            Order.status != "cancelled"
        )
        value = session.exec(stmt).one()
        return float(value or 0.0)

    def daily_sales(
        self,
        session: Session,
        start: datetime,
        end: datetime,
    ) -> list[tuple]:
        """
        Revenue and order count per day in [start, end), cancelled orders excluded.

        DATE() works on Postgres, MySQL and SQLite; SQLite returns it as text.
        """
        day_expr = func.date(Order.created_at)
        stmt = (
            select(
                day_expr.label("day"),
                func.coalesce(func.sum(Order.total), 0.0).label("revenue"),
                func.count(Order.id).label("order_count"),
            )
            .where(
                Order.status != "cancelled",
                Order.created_at >= start,
                Order.created_at < end,
            )
            .group_by(day_expr)
            .order_by(day_expr)
        )
        return list(session.exec(stmt).all())

    def recent_orders(self, session: Session, limit: int = 5) -> list[tuple[Order, str]]:
        """
        Latest N orders by created_at with the customer's account name.
        """
        stmt = (
            select(Order, User.name)
            .join(User, User.id == Order.user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def customers(
        self,
        session: Session,
        search: str | None = None,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[tuple[User, int, float]], int]:
        """
        Customers with their order count and lifetime spend (non-cancelled).
        """
        filters = [User.role == "customer"]
        if search:
            term = search.strip()
            filters.append(
                or_(
                    User.name.icontains(term, autoescape=True),
                    User.email.icontains(term, autoescape=True),
                )
            )

        total = int(
            session.exec(select(func.count()).select_from(User).where(*filters)).one() or 0
        )

        spent = func.coalesce(
            func.sum(case((Order.status != "cancelled", Order.total), else_=0)), 0.0
        )
        stmt = (
            select(User, func.count(Order.id), spent)
            .outerjoin(Order, Order.user_id == User.id)
            .where(*filters)
            .group_by(User.id)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all()), total
