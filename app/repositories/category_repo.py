# app/repositories/category_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Category, Product


class CategoryRepository:
    """
    Data access layer for Category.
    """

    def get_by_id(self, session: Session, category_id: int) -> Category | None:
        return session.get(Category, category_id)

    def get_by_slug(self, session: Session, slug: str) -> Category | None:
        stmt = select(Category).where(Category.slug == slug)
        return session.exec(stmt).first()

    def list_all(self, session: Session, skip: int = 0, limit: int | None = None) -> list[Category]:
        stmt = select(Category).order_by(Category.name, Category.id).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.exec(stmt).all())

    def count(self, session: Session) -> int:
        return int(session.exec(select(func.count()).select_from(Category)).one() or 0)

    def names_for(self, session: Session, category_ids: set[int]) -> dict[int, str]:
        if not category_ids:
            return {}
        stmt = select(Category.id, Category.name).where(Category.id.in_(category_ids))
        return {cid: name for cid, name in session.exec(stmt).all()}

    def product_counts(self, session: Session, category_ids: list[int]) -> dict[int, int]:
        if not category_ids:
            return {}
        stmt = (
            select(Product.category_id, func.count(Product.id))
            .where(Product.category_id.in_(category_ids))
            .group_by(Product.category_id)
        )
        return {cid: int(n) for cid, n in session.exec(stmt).all()}

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def update(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete(self, session: Session, category: Category) -> None:
        session.delete(category)
        session.commit()
