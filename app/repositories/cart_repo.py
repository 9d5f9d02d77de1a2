# app/repositories/cart_repo.py
from sqlmodel import Session, select

from app.models.cart import CartItem, Favorite
from app.models.product import Product


class CartRepository:

    # Get items for a user
    def list_for_user(self, session: Session, user_id: int) -> list[CartItem]:
        stmt = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
        return list(session.exec(stmt).all())

    def list_with_products(self, session: Session, user_id: int) -> list[tuple[CartItem, Product]]:
        stmt = (
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.id)
        )
        return list(session.exec(stmt).all())

    def get_item(self, session: Session, user_id: int, product_id: int) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_owned(self, session: Session, user_id: int, item_id: int) -> CartItem | None:
        """Cart row by id, only if it belongs to `user_id`."""
        stmt = select(CartItem).where(CartItem.id == item_id, CartItem.user_id == user_id)
        return session.exec(stmt).first()

    # Writes flush only; CartService commits once per request
    def save(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.flush()
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.flush()

    def clear_user_cart(self, session: Session, user_id: int) -> None:
        for row in self.list_for_user(session, user_id):
            session.delete(row)
        session.flush()


class FavoriteRepository:

    def list_with_products(self, session: Session, user_id: int) -> list[Product]:
        stmt = (
            select(Product)
            .join(Favorite, Favorite.product_id == Product.id)
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        return list(session.exec(stmt).all())

    def get(self, session: Session, user_id: int, product_id: int) -> Favorite | None:
        stmt = select(Favorite).where(
            Favorite.user_id == user_id, Favorite.product_id == product_id
        )
        return session.exec(stmt).first()

    def add(self, session: Session, favorite: Favorite) -> Favorite:
        session.add(favorite)
        session.flush()
        return favorite

    def delete(self, session: Session, favorite: Favorite) -> None:
        session.delete(favorite)
        session.flush()
