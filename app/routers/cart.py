# app/routers/cart.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartItemCreate, CartItemRead, CartItemUpdate, CartSync
from app.schemas.common import Message
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
category_repo = CategoryRepository()
service = CartService(cart_repo, product_repo, category_repo)


@router.get("", response_model=list[CartItemRead])
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get the current user's cart, joined with product data and images.
    """
    return service.get_cart(session, current_user.id)


@router.post("", response_model=list[CartItemRead], status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a product to the cart, or increase its quantity if already there.

    Returns the updated cart.
    """
    return service.add_to_cart(session, current_user.id, payload)


@router.post("/sync", response_model=list[CartItemRead])
def sync_cart(
    payload: CartSync,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Merge the guest cart kept by the client into the stored cart.
    """
    return service.sync_cart(session, current_user.id, payload)


@router.put("/{item_id}", response_model=list[CartItemRead])
def update_cart_item(
    item_id: int,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set the quantity of a cart row.

    Returns the updated cart.
    """
    return service.update_quantity(
        session=session,
        user_id=current_user.id,
        item_id=item_id,
        payload=payload,
    )


@router.delete("/{item_id}", response_model=list[CartItemRead])
def remove_cart_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove a row from the cart.

    Returns the updated cart.
    """
    return service.remove_item(session, current_user.id, item_id)


@router.delete("", response_model=Message)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.clear_cart(session, current_user.id)
    return Message(message="Cart cleared")
