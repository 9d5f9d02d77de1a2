# app/schemas/favorite.py
from pydantic import BaseModel, ConfigDict, Field
from sqlmodel import SQLModel

from app.schemas.product import ProductRead


class FavoriteCreate(SQLModel):
    product_id: int | None = None


class FavoriteSync(SQLModel):
    product_ids: list[int] = []


class FavoriteList(SQLModel):
    items: list[ProductRead]


class FavoriteCheck(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_favorite: bool = Field(alias="isFavorite")
