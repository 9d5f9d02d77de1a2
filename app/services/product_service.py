# app/services/product_service.py
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.pagination import page_count
from app.models.product import Product
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ColorRead,
    ProductCreate,
    ProductDeleted,
    ProductDetail,
    ProductImageRead,
    ProductPage,
    ProductRead,
    ProductUpdate,
)

logger = logging.getLogger("uvicorn")

# Storefront shelves -> boolean column on Product
SHELF_FLAGS = {
    "featured": "featured",
    "new": "is_new",
    "budget": "is_budget",
    "luxury": "is_luxury",
}

# Scalar fields copied from create/update payloads onto the Product row
_SCALAR_FIELDS = (
    "name",
    "description",
    "price",
    "original_price",
    "category_id",
    "stock",
    "featured",
    "is_new",
    "is_budget",
    "is_luxury",
    "material",
    "age_range",
    "safety_info",
    "origin",
    "warranty",
)


def parse_sort(sort: str | None) -> tuple[str, bool]:
    """
    "price,asc" -> ("price", False). Defaults to newest first.
    """
    if not sort:
        return "created_at", True
    field, _, direction = sort.partition(",")
    return field.strip() or "created_at", direction.strip().lower() != "asc"


class ProductService:
    """
    Business logic for products.

    Responsibilities:
      - one DB-backed store for public listings and admin CRUD
      - enrich rows with category name and images for the storefront
      - keep product + child rows (images, sizes, colors, care instructions)
        in a single transaction on create/update
    """

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        self.repo = repo
        self.category_repo = category_repo

    # ----- Read model builders -----

    def to_reads(self, session: Session, products: list[Product]) -> list[ProductRead]:
        """
        Enrich products with `category_name`, `image` (primary) and `images`.
        Images and category names are fetched in one query each.
        """
        ids = [p.id for p in products]
        images = self.repo.images_for(session, ids)
        names = self.category_repo.names_for(
            session, {p.category_id for p in products if p.category_id is not None}
        )

        reads: list[ProductRead] = []
        for p in products:
            urls = [img.image_url for img in images.get(p.id, [])]
            reads.append(
                ProductRead(
                    **p.model_dump(exclude={"material", "age_range", "safety_info", "origin", "warranty"}),
                    category_name=names.get(p.category_id),
                    image=urls[0] if urls else None,
                    images=urls,
                )
            )
        return reads

    def to_detail(self, session: Session, product: Product) -> ProductDetail:
        base = self.to_reads(session, [product])[0]
        gallery = self.repo.images_for(session, [product.id]).get(product.id, [])
        return ProductDetail(
            **base.model_dump(),
            material=product.material,
            age_range=product.age_range,
            safety_info=product.safety_info,
            origin=product.origin,
            warranty=product.warranty,
            sizes=[s.size for s in self.repo.sizes_for(session, product.id)],
            colors=[
                ColorRead(name=c.name, code=c.code)
                for c in self.repo.colors_for(session, product.id)
            ],
            care_instructions=[
                c.instruction for c in self.repo.care_instructions_for(session, product.id)
            ],
            gallery=[
                ProductImageRead(id=img.id, image_url=img.image_url, is_primary=img.is_primary)
                for img in gallery
            ],
        )

    # ----- Public -----

    def get_product(self, session: Session, product_id: int) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def get_product_detail(self, session: Session, product_id: int) -> ProductDetail:
        return self.to_detail(session, self.get_product(session, product_id))

    def list_products(
        self,
        session: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category: str | None = None,
        category_id: int | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort: str | None = None,
    ) -> ProductPage:
        sort_field, descending = parse_sort(sort)
        products, total = self.repo.search(
            session,
            search=search,
            category=category,
            category_id=category_id,
            min_price=min_price,
            max_price=max_price,
            sort_field=sort_field,
            descending=descending,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return ProductPage(
            products=self.to_reads(session, products),
            page=page,
            pages=page_count(total, limit),
            total=total,
        )

    def list_shelf(self, session: Session, shelf: str, limit: int = 8) -> list[ProductRead]:
        """
        Products for one storefront shelf: featured | new | budget | luxury.
        """
        products = self.repo.list_by_flag(session, SHELF_FLAGS[shelf], limit=limit)
        return self.to_reads(session, products)

    def list_related(self, session: Session, product_id: int, limit: int = 4) -> list[ProductRead]:
        product = self.get_product(session, product_id)
        return self.to_reads(session, self.repo.list_related(session, product, limit=limit))

    # ----- Admin -----

    def _ensure_category(self, session: Session, category_id: int | None) -> None:
        if category_id is not None and self.category_repo.get_by_id(session, category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category not found",
            )

    def _write_children(self, session: Session, product_id: int, payload: ProductCreate | ProductUpdate) -> None:
        if payload.images is not None:
            self.repo.replace_images(session, product_id, payload.images)
        if payload.sizes is not None:
            self.repo.replace_sizes(session, product_id, payload.sizes)
        if payload.colors is not None:
            self.repo.replace_colors(session, product_id, [(c.name, c.code) for c in payload.colors])
        if payload.care_instructions is not None:
            self.repo.replace_care_instructions(session, product_id, payload.care_instructions)

    def create_product(self, session: Session, payload: ProductCreate) -> ProductDetail:
        """
        Create a product with its images, sizes, colors and care instructions.

        All rows are written in one transaction; any failure rolls back the
        whole product.
        """
        self._ensure_category(session, payload.category_id)

        data = payload.model_dump(include=set(_SCALAR_FIELDS))
        if data.get("original_price") is None:
            data["original_price"] = payload.price

        try:
            product = self.repo.add(session, Product(**data))
            self._write_children(session, product.id, payload)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(product)
        logger.info(f"Product {product.id} created with {len(payload.images)} images")
        return self.to_detail(session, product)

    def update_product(self, session: Session, product_id: int, payload: ProductUpdate) -> ProductDetail:
        """
        Partial update. Only fields present in the payload are touched.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(include=set(_SCALAR_FIELDS), exclude_unset=True)

        if "category_id" in changes:
            self._ensure_category(session, changes["category_id"])

        for field in ("name", "price", "stock", *SHELF_FLAGS.values()):
            if field in changes and changes[field] is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{field} cannot be null",
                )

        try:
            for field, value in changes.items():
                setattr(product, field, value)
            self.repo.add(session, product)
            self._write_children(session, product.id, payload)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(product)
        return self.to_detail(session, product)

    def delete_product(self, session: Session, product_id: int) -> ProductDeleted:
        """
        Delete a product. Images, sizes, colors, care instructions, cart rows
        and favorites go with it (ON DELETE CASCADE); order lines keep their
        copied name and price.
        """
        product = self.get_product(session, product_id)
        snapshot = self.to_detail(session, product)

        self.repo.delete(session, product)
        session.commit()

        return ProductDeleted(message="Product removed", product=snapshot)
