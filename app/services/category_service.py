# app/services/category_service.py
import re

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.pagination import page_count
from app.models.product import Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import (
    CategoryCreate,
    CategoryPage,
    CategoryRead,
    CategoryUpdate,
)

# categories.slug column width
SLUG_MAX_LENGTH = 100


class CategoryService:
    """
    Business logic for product categories.

    - slugs are generated from the name when not given, and kept unique
      by appending -2, -3, ...
    - deleting a category leaves its products uncategorized
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    # ---- helpers ----

    @staticmethod
    def _slugify(raw: str) -> str:
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "category"

    def _ensure_unique_slug(self, session: Session, base_slug: str, exclude_id: int | None = None) -> str:
        base_slug = base_slug[:SLUG_MAX_LENGTH]
        slug = base_slug
        counter = 2
        while True:
            existing = self.repo.get_by_slug(session, slug)
            if existing is None or existing.id == exclude_id:
                return slug
            suffix = f"-{counter}"
            slug = base_slug[: SLUG_MAX_LENGTH - len(suffix)].rstrip("-") + suffix
            counter += 1

    def _to_reads(self, session: Session, categories: list[Category]) -> list[CategoryRead]:
        counts = self.repo.product_counts(session, [c.id for c in categories])
        return [
            CategoryRead(**c.model_dump(), product_count=counts.get(c.id, 0))
            for c in categories
        ]

    def get_category(self, session: Session, category_id: int) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    # ---- reads ----

    def list_categories(self, session: Session) -> list[CategoryRead]:
        return self._to_reads(session, self.repo.list_all(session))

    def list_page(self, session: Session, page: int = 1, limit: int = 10) -> CategoryPage:
        total = self.repo.count(session)
        categories = self.repo.list_all(session, skip=(page - 1) * limit, limit=limit)
        return CategoryPage(
            categories=self._to_reads(session, categories),
            page=page,
            pages=page_count(total, limit),
            total=total,
        )

    def read_category(self, session: Session, category_id: int) -> CategoryRead:
        return self._to_reads(session, [self.get_category(session, category_id)])[0]

    def read_by_slug(self, session: Session, slug: str) -> CategoryRead:
        category = self.repo.get_by_slug(session, slug.strip().lower())
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return self._to_reads(session, [category])[0]

    # ---- admin writes ----

    def create_category(self, session: Session, payload: CategoryCreate) -> CategoryRead:
        base_slug = self._slugify(payload.slug or payload.name)
        category = Category(
            name=payload.name,
            slug=self._ensure_unique_slug(session, base_slug),
            description=payload.description,
            image_url=payload.image_url,
        )
        category = self.repo.create(session, category)
        return self._to_reads(session, [category])[0]

    def update_category(self, session: Session, category_id: int, payload: CategoryUpdate) -> CategoryRead:
        category = self.get_category(session, category_id)
        changes = payload.model_dump(exclude_unset=True)

        if "slug" in changes and changes["slug"] is not None:
            changes["slug"] = self._ensure_unique_slug(
                session, self._slugify(changes["slug"]), exclude_id=category.id
            )

        for field, value in changes.items():
            if field in ("name", "slug") and value is None:
                continue
            setattr(category, field, value)

        category = self.repo.update(session, category)
        return self._to_reads(session, [category])[0]

    def delete_category(self, session: Session, category_id: int) -> None:
        category = self.get_category(session, category_id)
        self.repo.delete(session, category)
