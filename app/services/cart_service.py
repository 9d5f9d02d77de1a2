# app/services/cart_service.py
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemRead,
    CartItemUpdate,
    CartSync,
)

logger = logging.getLogger("uvicorn")


class CartService:
    """
    Business logic for the persistent per-user cart.

    Responsibilities:
      - one row per (user, product); adding an existing product sums quantities
      - quantity never exceeds current product stock
      - stock check and write share one transaction with the product row locked
      - responses are the enriched cart (product fields, images, category name)
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.category_repo = category_repo

    # ---- internal helpers ----

    def _locked_product(self, session: Session, product_id: int) -> Product:
        product = self.product_repo.get_for_update(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _commit(self, session: Session) -> None:
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: int) -> list[CartItemRead]:
        """
        Return the caller's cart rows joined with product data.

        `image` is the primary image url, `images` every image url.
        """
        rows = self.cart_repo.list_with_products(session, user_id)
        products = [p for _, p in rows]
        images = self.product_repo.images_for(session, [p.id for p in products])
        names = self.category_repo.names_for(
            session, {p.category_id for p in products if p.category_id is not None}
        )

        items: list[CartItemRead] = []
        for item, product in rows:
            urls = [img.image_url for img in images.get(product.id, [])]
            items.append(
                CartItemRead(
                    id=item.id,
                    product_id=product.id,
                    quantity=item.quantity,
                    name=product.name,
                    description=product.description,
                    price=product.price,
                    original_price=product.original_price,
                    stock=product.stock,
                    image=urls[0] if urls else None,
                    images=urls,
                    category_name=names.get(product.category_id),
                )
            )
        return items

    def add_to_cart(
        self,
        session: Session,
        user_id: int,
        payload: CartItemCreate,
    ) -> list[CartItemRead]:
        """
        Add a product to the user's cart.

        Rules:
          - product_id is required and quantity must be >= 1
          - stock < quantity => "Product is out of stock"
          - an existing row is merged; the merged quantity may not exceed
            stock, otherwise the row stays as it was
        """
        if payload.product_id is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Product ID is required",
            )
        if payload.quantity < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Quantity must be at least 1",
            )

        try:
            product = self._locked_product(session, payload.product_id)

            if product.stock < payload.quantity:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Product is out of stock",
                )

            existing = self.cart_repo.get_item(session, user_id, product.id)
            if existing:
                new_qty = existing.quantity + payload.quantity
                if new_qty > product.stock:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="Cannot add more than available stock",
                    )
                existing.quantity = new_qty
                self.cart_repo.save(session, existing)
            else:
                self.cart_repo.save(
                    session,
                    CartItem(user_id=user_id, product_id=product.id, quantity=payload.quantity),
                )
        except HTTPException:
            session.rollback()
            raise

        self._commit(session)
        return self.get_cart(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: int,
        item_id: int,
        payload: CartItemUpdate,
    ) -> list[CartItemRead]:
        """
        Replace the quantity of one of the caller's cart rows.
        """
        if payload.quantity is None or payload.quantity < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid quantity",
            )

        item = self.cart_repo.get_owned(session, user_id, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart item not found",
            )

        try:
            product = self._locked_product(session, item.product_id)
            if payload.quantity > product.stock:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Not enough stock available",
                )
            item.quantity = payload.quantity
            self.cart_repo.save(session, item)
        except HTTPException:
            session.rollback()
            raise

        self._commit(session)
        return self.get_cart(session, user_id)

    def remove_item(self, session: Session, user_id: int, item_id: int) -> list[CartItemRead]:
        item = self.cart_repo.get_owned(session, user_id, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart item not found",
            )

        self.cart_repo.delete(session, item)
        self._commit(session)
        return self.get_cart(session, user_id)

    def clear_cart(self, session: Session, user_id: int) -> None:
        self.cart_repo.clear_user_cart(session, user_id)
        self._commit(session)

    def sync_cart(self, session: Session, user_id: int, payload: CartSync) -> list[CartItemRead]:
        """
        Merge a guest cart into the stored one after login.

        Quantities are summed per product and capped at stock. Unknown or
        out-of-stock products are skipped. Everything commits together.
        """
        requested: dict[int, int] = {}
        for line in payload.items:
            requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity

        skipped = 0
        for product_id, quantity in requested.items():
            product = self.product_repo.get_for_update(session, product_id)
            if not product or product.stock < 1:
                skipped += 1
                continue

            existing = self.cart_repo.get_item(session, user_id, product_id)
            current = existing.quantity if existing else 0
            new_qty = min(current + quantity, product.stock)

            if existing:
                existing.quantity = new_qty
                self.cart_repo.save(session, existing)
            else:
                self.cart_repo.save(
                    session,
                    CartItem(user_id=user_id, product_id=product_id, quantity=new_qty),
                )

        self._commit(session)
        if skipped:
            logger.info(f"Cart sync for user {user_id} skipped {skipped} unavailable products")
        return self.get_cart(session, user_id)
