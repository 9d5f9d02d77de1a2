# app/services/order_service.py
import logging
import secrets

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.pagination import page_count
from app.models.order import Order, OrderItem
from app.models.product import Product
from app.models.user import User, utcnow
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderPage,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)

logger = logging.getLogger("uvicorn")

# Flat shipping fee charged when 0 < subtotal <= FREE_SHIPPING_THRESHOLD
SHIPPING_FEE = 350.0
FREE_SHIPPING_THRESHOLD = 5000.0

# VAT (16%)
TAX_RATE = 0.16

# Admin status machine; delivered and cancelled are terminal
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"processing", "cancelled"},
    "processing": {"shipped", "cancelled"},
    "shipped": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


def shipping_fee_for(subtotal: float) -> float:
    return SHIPPING_FEE if 0 < subtotal <= FREE_SHIPPING_THRESHOLD else 0.0


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from the server cart
      - Validate cart lines against products (existence, stock)
      - Compute subtotal, shipping fee, tax and total
      - Deduct stock and clear the cart in the same transaction
      - Enforce status transitions (admin); cancelling restores stock
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: int,
        payload: OrderCreate,
    ) -> OrderWithItemsRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart items; error if empty.
          2. Lock each product row and check quantity <= stock.
          3. Compute totals.
          4. Create Order + OrderItem rows (name and price copied).
          5. Deduct stock, clear cart, commit once.
        """
        cart_items = self.cart_repo.list_for_user(session, user_id)
        if not cart_items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        try:
            errors: list[dict[str, str]] = []
            product_map: dict[int, Product] = {}

            for ci in cart_items:
                product = self.product_repo.get_for_update(session, ci.product_id)
                if not product:
                    errors.append({"product_id": str(ci.product_id), "reason": "Product not found"})
                    continue
                product_map[ci.product_id] = product
                if ci.quantity > product.stock:
                    errors.append(
                        {
                            "product_id": str(ci.product_id),
                            "reason": f"Insufficient stock (have {product.stock}, requested {ci.quantity})",
                        }
                    )

            if errors:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail={"message": "Cart validation failed", "items": errors},
                )

            subtotal = round(
                sum(ci.quantity * product_map[ci.product_id].price for ci in cart_items), 2
            )
            shipping_fee = shipping_fee_for(subtotal)
            tax = round(subtotal * TAX_RATE, 2)
            total = round(subtotal + shipping_fee + tax, 2)

            order = Order(
                order_number=self._new_order_number(session),
                user_id=user_id,
                status="pending",
                payment_status="pending",
                subtotal=subtotal,
                shipping_fee=shipping_fee,
                tax=tax,
                total=total,
                **payload.model_dump(),
            )
            order, order_items = self.order_repo.add_with_items(
                session,
                order,
                [
                    OrderItem(
                        product_id=ci.product_id,
                        product_name=product_map[ci.product_id].name,
                        quantity=ci.quantity,
                        unit_price=product_map[ci.product_id].price,
                    )
                    for ci in cart_items
                ],
            )

            for ci in cart_items:
                product_map[ci.product_id].stock -= ci.quantity
                session.add(product_map[ci.product_id])

            self.cart_repo.clear_user_cart(session, user_id)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info(f"Order {order.order_number} placed by user {user_id} (total {order.total})")
        return self._build_order_with_items_dto(order, order_items)

    def list_user_orders(self, session: Session, user_id: int) -> list[OrderRead]:
        """
        List orders for the given user, newest first (without items).
        """
        orders = self.order_repo.list_for_user(session, user_id)
        return [OrderRead.model_validate(o, from_attributes=True) for o in orders]

    def get_order_for(self, session: Session, user: User, order_id: int) -> OrderWithItemsRead:
        """
        A single order with items. Customers only see their own orders;
        admins see any. Anything else is a 404.
        """
        order = self.order_repo.get(session, order_id)
        if not order or (order.user_id != user.id and user.role != "admin"):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        items = self.order_repo.items_for(session, order.id)
        return self._build_order_with_items_dto(order, items)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        status_filter: str | None = None,
    ) -> OrderPage:
        orders, total = self.order_repo.page(
            session, skip=(page - 1) * limit, limit=limit, status=status_filter
        )
        return OrderPage(
            orders=[OrderRead.model_validate(o, from_attributes=True) for o in orders],
            page=page,
            pages=page_count(total, limit),
            total=total,
        )

    def get_order_admin(self, session: Session, order_id: int) -> OrderWithItemsRead:
        order = self.order_repo.get(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        items = self.order_repo.items_for(session, order.id)
        return self._build_order_with_items_dto(order, items)

    def update_status(
        self,
        session: Session,
        order_id: int,
        payload: OrderStatusUpdate,
    ) -> OrderWithItemsRead:
        """
        Admin-only status update:

          pending    -> processing, cancelled
          processing -> shipped, cancelled
          shipped    -> delivered
          delivered  -> (terminal)
          cancelled  -> (terminal)

        Cancelling puts the ordered quantities back into stock.
        """
        order = self.order_repo.get(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        current = order.status
        new = payload.status
        items = self.order_repo.items_for(session, order.id)

        if current == new:
            return self._build_order_with_items_dto(order, items)

        if new not in ALLOWED_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        try:
            if new == "cancelled":
                for it in items:
                    if it.product_id is None:
                        continue
                    product = self.product_repo.get_for_update(session, it.product_id)
                    if product:
                        product.stock += it.quantity
                        session.add(product)

            order.status = new
            self.order_repo.save(session, order)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info(f"Order {order.order_number} status {current} -> {new}")
        return self._build_order_with_items_dto(order, items)

    # -------- Helpers --------

    def _new_order_number(self, session: Session) -> str:
        while True:
            number = f"VK{utcnow():%Y%m%d}{secrets.token_hex(3).upper()}"
            if not self.order_repo.number_exists(session, number):
                return number

    def _build_order_with_items_dto(
        self,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        item_dtos = [
            OrderItemRead(
                id=it.id,
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                unit_price=it.unit_price,
                line_total=round(it.quantity * it.unit_price, 2),
            )
            for it in items
        ]
        return OrderWithItemsRead(
            **OrderRead.model_validate(order, from_attributes=True).model_dump(),
            items=item_dtos,
        )
