# app/repositories/order_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.order import Order, OrderItem


class OrderRepository:
    """
    Data access layer for orders and their line items.

    Nothing here commits: checkout and status changes touch products and
    cart rows too, so OrderService owns the transaction.
    """

    def list_for_user(self, session: Session, user_id: int) -> list[Order]:
        stmt = (
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(session.exec(stmt).all())

    def page(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 10,
        status: str | None = None,
    ) -> tuple[list[Order], int]:
        """
        Newest-first slice of all orders, optionally for one status.

        Returns:
            (orders on this page, total matching orders)
        """
        filters = [Order.status == status] if status else []

        total = int(
            session.exec(select(func.count()).select_from(Order).where(*filters)).one() or 0
        )
        stmt = (
            select(Order)
            .where(*filters)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all()), total

    def get(self, session: Session, order_id: int) -> Order | None:
        return session.get(Order, order_id)

    def number_exists(self, session: Session, order_number: str) -> bool:
        stmt = select(Order.id).where(Order.order_number == order_number)
        return session.exec(stmt).first() is not None

    def add_with_items(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> tuple[Order, list[OrderItem]]:
        """
        Stage an order and its lines. The order is flushed first so the
        lines can point at its id.
        """
        session.add(order)
        session.flush()
        for item in items:
            item.order_id = order.id
        session.add_all(items)
        session.flush()
        return order, items

    def save(self, session: Session, order: Order) -> Order:
        session.add(order)
        session.flush()
        return order

    def items_for(self, session: Session, order_id: int) -> list[OrderItem]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        return list(session.exec(stmt).all())
