# app/routers/orders.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import OrderCreate, OrderRead, OrderWithItemsRead
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, cart_repo, product_repo)


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Place an order for everything in the caller's cart, then empty the cart."""
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get("/user", response_model=list[OrderRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Order history for the signed-in account (no line items)."""
    return service.list_user_orders(session, current_user.id)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Order detail. Another customer's order reads as 404; admins see all."""
    return service.get_order_for(session, current_user, order_id)
