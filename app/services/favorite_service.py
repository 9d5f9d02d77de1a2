# app/services/favorite_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.cart import Favorite
from app.repositories.cart_repo import FavoriteRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.favorite import FavoriteCheck, FavoriteList
from app.services.product_service import ProductService


class FavoriteService:
    """
    Per-user wishlist. Adding twice is a no-op; every write returns the
    full enriched list.
    """

    def __init__(
        self,
        repo: FavoriteRepository,
        product_repo: ProductRepository,
        product_service: ProductService,
    ):
        self.repo = repo
        self.product_repo = product_repo
        self.product_service = product_service

    def list_favorites(self, session: Session, user_id: int) -> FavoriteList:
        products = self.repo.list_with_products(session, user_id)
        return FavoriteList(items=self.product_service.to_reads(session, products))

    def add_favorite(self, session: Session, user_id: int, product_id: int | None) -> FavoriteList:
        if product_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product ID is required",
            )
        if not self.product_repo.get_by_id(session, product_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        if not self.repo.get(session, user_id, product_id):
            self.repo.add(session, Favorite(user_id=user_id, product_id=product_id))
            session.commit()

        return self.list_favorites(session, user_id)

    def remove_favorite(self, session: Session, user_id: int, product_id: int) -> FavoriteList:
        favorite = self.repo.get(session, user_id, product_id)
        if not favorite:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not in favorites",
            )
        self.repo.delete(session, favorite)
        session.commit()
        return self.list_favorites(session, user_id)

    def check(self, session: Session, user_id: int, product_id: int) -> FavoriteCheck:
        return FavoriteCheck(is_favorite=self.repo.get(session, user_id, product_id) is not None)

    def sync(self, session: Session, user_id: int, product_ids: list[int]) -> FavoriteList:
        """
        Merge guest favorites after login. Unknown products are skipped;
        all inserts commit together.
        """
        try:
            for product_id in dict.fromkeys(product_ids):
                if not self.product_repo.get_by_id(session, product_id):
                    continue
                if not self.repo.get(session, user_id, product_id):
                    self.repo.add(session, Favorite(user_id=user_id, product_id=product_id))
            session.commit()
        except Exception:
            session.rollback()
            raise

        return self.list_favorites(session, user_id)
