# app/routers/favorites.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import FavoriteRepository
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.favorite import FavoriteCheck, FavoriteCreate, FavoriteList, FavoriteSync
from app.services.favorite_service import FavoriteService
from app.services.product_service import ProductService

router = APIRouter(prefix="/favorites", tags=["Favorites"])

product_repo = ProductRepository()
service = FavoriteService(
    FavoriteRepository(),
    product_repo,
    ProductService(product_repo, CategoryRepository()),
)


@router.get("", response_model=FavoriteList)
def list_favorites(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.list_favorites(session, current_user.id)


@router.post("", response_model=FavoriteList)
def add_favorite(
    payload: FavoriteCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a product to favorites. Adding it again changes nothing.
    """
    return service.add_favorite(session, current_user.id, payload.product_id)


@router.post("/sync", response_model=FavoriteList)
def sync_favorites(
    payload: FavoriteSync,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Merge favorites collected while signed out.
    """
    return service.sync(session, current_user.id, payload.product_ids)


@router.get("/check/{product_id}", response_model=FavoriteCheck)
def check_favorite(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.check(session, current_user.id, product_id)


@router.delete("/{product_id}", response_model=FavoriteList)
def remove_favorite(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.remove_favorite(session, current_user.id, product_id)
