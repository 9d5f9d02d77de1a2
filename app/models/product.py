# app/models/product.py
from datetime import datetime

from sqlalchemy import Column, Numeric
from sqlmodel import SQLModel, Field

from app.models.user import utcnow


class Category(SQLModel, table=True):
    """
    Product category (Clothing, Furniture, Feeding, ...).
    """

    __tablename__ = "categories"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=100, unique=True, index=True)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class Product(SQLModel, table=True):
    """
    Catalog entry.

    category_id is nulled (not cascaded) when its category is deleted.
    Flags drive the storefront shelves: featured / new / budget / luxury.
    """

    __tablename__ = "products"

    id: int | None = Field(default=None, primary_key=True)

    name: str = Field(max_length=255, index=True)
    description: str | None = None

    price: float = Field(sa_column=Column(Numeric(10, 2, asdecimal=False), nullable=False))
    original_price: float | None = Field(
        default=None,
        sa_column=Column(Numeric(10, 2, asdecimal=False), nullable=True),
    )

    category_id: int | None = Field(
        default=None,
        foreign_key="categories.id",
        ondelete="SET NULL",
        index=True,
    )

    stock: int = Field(default=0)
    rating: float = Field(default=0.0)
    reviews: int = Field(default=0)

    featured: bool = Field(default=False, index=True)
    is_new: bool = Field(default=False, index=True)
    is_budget: bool = Field(default=False, index=True)
    is_luxury: bool = Field(default=False, index=True)

    material: str | None = Field(default=None, max_length=255)
    age_range: str | None = Field(default=None, max_length=100)
    safety_info: str | None = None
    origin: str | None = Field(default=None, max_length=255)
    warranty: str | None = Field(default=None, max_length=255)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class ProductImage(SQLModel, table=True):
    """
    Product gallery image. The first image of a product is primary.
    """

    __tablename__ = "product_images"

    id: int | None = Field(default=None, primary_key=True)
    product_id: int = Field(
        foreign_key="products.id",
        ondelete="CASCADE",
        index=True,
    )
    image_url: str = Field(max_length=255)
    is_primary: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class ProductSize(SQLModel, table=True):
    __tablename__ = "product_sizes"

    id: int | None = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", index=True)
    size: str = Field(max_length=50)


class ProductColor(SQLModel, table=True):
    __tablename__ = "product_colors"

    id: int | None = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", index=True)
    name: str = Field(max_length=50)
    code: str | None = Field(default=None, max_length=20)


class ProductCareInstruction(SQLModel, table=True):
    __tablename__ = "product_care_instructions"

    id: int | None = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", index=True)
    instruction: str = Field(max_length=255)
