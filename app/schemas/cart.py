# app/schemas/cart.py
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    product_id is optional at the schema level so a missing id gets the
    cart's own 400 message instead of a generic validation error.
    """

    product_id: int | None = None
    quantity: int = 1


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    quantity: int | None = None


class CartItemRead(SQLModel):
    """
    Cart row joined with its product, category and images.
    """

    id: int
    product_id: int
    quantity: int
    name: str
    description: str | None = None
    price: float
    original_price: float | None = None
    stock: int
    image: str | None = None
    images: list[str] = []
    category_name: str | None = None


class CartSyncItem(SQLModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)


class CartSync(SQLModel):
    """
    Guest cart collected by the client before login.
    """

    items: list[CartSyncItem] = []
