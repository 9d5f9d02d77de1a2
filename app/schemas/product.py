# app/schemas/product.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ColorIn(SQLModel):
    """
    Color option. Plain strings are accepted as `{"name": <str>}`.
    """

    name: str = Field(min_length=1, max_length=50)
    code: str | None = Field(default=None, max_length=20)


class ColorRead(SQLModel):
    name: str
    code: str | None = None


class ProductImageRead(SQLModel):
    id: int
    image_url: str
    is_primary: bool


def _coerce_colors(v):
    if v is None:
        return v
    return [{"name": c} if isinstance(c, str) else c for c in v]


def _clean_strings(v: list[str] | None) -> list[str] | None:
    if v is None:
        return v
    return [s.strip() for s in v if s and s.strip()]


class ProductCreate(SQLModel):
    """
    Admin payload for creating a product.

    - images: URLs uploaded by the client; the first becomes primary.
    - colors: list of {name, code} or plain color names.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    description: str | None = None
    price: float = Field(gt=0)
    original_price: float | None = Field(default=None, gt=0)
    category_id: int | None = None
    stock: int = Field(default=0, ge=0)
    featured: bool = False
    is_new: bool = False
    is_budget: bool = False
    is_luxury: bool = False

    material: str | None = None
    age_range: str | None = None
    safety_info: str | None = None
    origin: str | None = None
    warranty: str | None = None

    images: list[str] = []
    sizes: list[str] = []
    colors: list[ColorIn] = []
    care_instructions: list[str] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("colors", mode="before")
    @classmethod
    def coerce_colors(cls, v):
        return _coerce_colors(v)

    @field_validator("images", "sizes", "care_instructions")
    @classmethod
    def clean_lists(cls, v: list[str]) -> list[str]:
        return _clean_strings(v)


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.

    Child lists (images, sizes, colors, care_instructions) replace the
    stored set when provided; omitted lists are left alone.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    original_price: float | None = Field(default=None, gt=0)
    category_id: int | None = None
    stock: int | None = Field(default=None, ge=0)
    featured: bool | None = None
    is_new: bool | None = None
    is_budget: bool | None = None
    is_luxury: bool | None = None

    material: str | None = None
    age_range: str | None = None
    safety_info: str | None = None
    origin: str | None = None
    warranty: str | None = None

    images: list[str] | None = None
    sizes: list[str] | None = None
    colors: list[ColorIn] | None = None
    care_instructions: list[str] | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("colors", mode="before")
    @classmethod
    def coerce_colors(cls, v):
        return _coerce_colors(v)

    @field_validator("images", "sizes", "care_instructions")
    @classmethod
    def clean_lists(cls, v: list[str] | None) -> list[str] | None:
        return _clean_strings(v)


class ProductRead(SQLModel):
    """
    Product card as shown in listings, cart-adjacent views and favorites.
    """

    id: int
    name: str
    description: str | None = None
    price: float
    original_price: float | None = None
    category_id: int | None = None
    category_name: str | None = None
    stock: int
    rating: float
    reviews: int
    featured: bool
    is_new: bool
    is_budget: bool
    is_luxury: bool
    image: str | None = None
    images: list[str] = []
    created_at: datetime
    updated_at: datetime


class ProductDetail(ProductRead):
    """
    Full product page payload.
    """

    material: str | None = None
    age_range: str | None = None
    safety_info: str | None = None
    origin: str | None = None
    warranty: str | None = None
    sizes: list[str] = []
    colors: list[ColorRead] = []
    care_instructions: list[str] = []
    gallery: list[ProductImageRead] = []


class ProductPage(SQLModel):
    products: list[ProductRead]
    page: int
    pages: int
    total: int


class ProductDeleted(SQLModel):
    message: str
    product: ProductDetail
