# app/repositories/product_repo.py
from collections import defaultdict

from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.models.product import (
    Category,
    Product,
    ProductCareInstruction,
    ProductColor,
    ProductImage,
    ProductSize,
)

# Public sort keys -> columns. camelCase keys are what the SPA sends.
SORT_COLUMNS = {
    "created_at": Product.created_at,
    "createdAt": Product.created_at,
    "price": Product.price,
    "name": Product.name,
    "rating": Product.rating,
    "stock": Product.stock,
}


class ProductRepository:
    """
    Data access layer for Product & its child tables.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - Writes only flush; the service owns the transaction and commits.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: int) -> Product | None:
        return session.get(Product, product_id)

    def get_for_update(self, session: Session, product_id: int) -> Product | None:
        """
        Load a product and lock its row until the transaction ends
        (FOR UPDATE is a no-op on SQLite).
        """
        stmt = select(Product).where(Product.id == product_id).with_for_update()
        return session.exec(stmt).first()

    def search(
        self,
        session: Session,
        *,
        search: str | None = None,
        category: str | None = None,
        category_id: int | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort_field: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: int = 10,
    ) -> tuple[list[Product], int]:
        """
        Filtered, sorted and paginated product listing.

        `category` matches a category id, name (case-insensitive) or slug.

        Returns:
            (page of products, total matching rows)
        """
        stmt = select(Product)

        if search:
            term = search.strip()
            # % and _ in the term are matched literally
            stmt = stmt.where(
                or_(
                    Product.name.icontains(term, autoescape=True),
                    Product.description.icontains(term, autoescape=True),
                )
            )

        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        elif category:
            value = category.strip()
            if value.isdigit():
                stmt = stmt.where(Product.category_id == int(value))
            else:
                stmt = stmt.join(Category, Category.id == Product.category_id).where(
                    or_(
                        func.lower(Category.name) == value.lower(),
                        Category.slug == value.lower(),
                    )
                )

        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = int(session.exec(count_stmt).one() or 0)

        column = SORT_COLUMNS.get(sort_field, Product.created_at)
        order = column.desc() if descending else column.asc()
        stmt = stmt.order_by(order, Product.id.desc() if descending else Product.id.asc())
        stmt = stmt.offset(skip).limit(limit)

        return list(session.exec(stmt).all()), total

    def list_by_flag(self, session: Session, flag: str, limit: int = 8) -> list[Product]:
        column = getattr(Product, flag)
        stmt = (
            select(Product)
            .where(column == True)  # noqa: E712
            .order_by(Product.created_at.desc(), Product.id.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_related(self, session: Session, product: Product, limit: int = 4) -> list[Product]:
        if product.category_id is None:
            return []
        stmt = (
            select(Product)
            .where(Product.category_id == product.category_id, Product.id != product.id)
            .order_by(Product.rating.desc(), Product.id)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def list_low_stock(self, session: Session, threshold: int = 10, limit: int = 50) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.stock <= threshold)
            .order_by(Product.stock.asc(), Product.id)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count_low_stock(self, session: Session, threshold: int = 10) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.stock <= threshold)
        return int(session.exec(stmt).one() or 0)

    def count(self, session: Session) -> int:
        return int(session.exec(select(func.count()).select_from(Product)).one() or 0)

    def add(self, session: Session, product: Product) -> Product:
        """Insert or update a product row without committing (id is populated)."""
        session.add(product)
        session.flush()
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.flush()

    # ----- Images -----

    def images_for(self, session: Session, product_ids: list[int]) -> dict[int, list[ProductImage]]:
        """
        Images grouped by product id, primary image first.
        """
        grouped: dict[int, list[ProductImage]] = defaultdict(list)
        if not product_ids:
            return grouped
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id.in_(product_ids))
            .order_by(ProductImage.product_id, ProductImage.is_primary.desc(), ProductImage.id)
        )
        for image in session.exec(stmt).all():
            grouped[image.product_id].append(image)
        return grouped

    def replace_images(self, session: Session, product_id: int, urls: list[str]) -> list[ProductImage]:
        """
        Replace a product's gallery. The first URL becomes the only primary image.
        """
        self._delete_all(session, ProductImage, product_id)
        images = [
            ProductImage(product_id=product_id, image_url=url, is_primary=(i == 0))
            for i, url in enumerate(urls)
        ]
        session.add_all(images)
        session.flush()
        return images

    # ----- Sizes / colors / care instructions -----

    def _delete_all(self, session: Session, model, product_id: int) -> None:
        for row in session.exec(select(model).where(model.product_id == product_id)).all():
            session.delete(row)
        session.flush()

    def sizes_for(self, session: Session, product_id: int) -> list[ProductSize]:
        stmt = select(ProductSize).where(ProductSize.product_id == product_id).order_by(ProductSize.id)
        return list(session.exec(stmt).all())

    def colors_for(self, session: Session, product_id: int) -> list[ProductColor]:
        stmt = select(ProductColor).where(ProductColor.product_id == product_id).order_by(ProductColor.id)
        return list(session.exec(stmt).all())

    def care_instructions_for(self, session: Session, product_id: int) -> list[ProductCareInstruction]:
        stmt = (
            select(ProductCareInstruction)
            .where(ProductCareInstruction.product_id == product_id)
            .order_by(ProductCareInstruction.id)
        )
        return list(session.exec(stmt).all())

    def replace_sizes(self, session: Session, product_id: int, sizes: list[str]) -> None:
        self._delete_all(session, ProductSize, product_id)
        session.add_all([ProductSize(product_id=product_id, size=s) for s in sizes])
        session.flush()

    def replace_colors(self, session: Session, product_id: int, colors: list[tuple[str, str | None]]) -> None:
        self._delete_all(session, ProductColor, product_id)
        session.add_all(
            [ProductColor(product_id=product_id, name=name, code=code) for name, code in colors]
        )
        session.flush()

    def replace_care_instructions(self, session: Session, product_id: int, instructions: list[str]) -> None:
        self._delete_all(session, ProductCareInstruction, product_id)
        session.add_all(
            [ProductCareInstruction(product_id=product_id, instruction=i) for i in instructions]
        )
        session.flush()
