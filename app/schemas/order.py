# app/schemas/order.py
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal["pending", "processing", "shipped", "delivered", "cancelled"]
PaymentMethod = Literal["mpesa", "card", "cash_on_delivery"]


class OrderCreate(SQLModel):
    """
    Checkout payload: shipping details + payment method.

    Backend derives:
      - user_id from token
      - status = 'pending', payment_status = 'pending'
      - items and totals from the server cart
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: EmailStr
    phone: str = Field(max_length=20)
    address: str = Field(max_length=255)
    city: str = Field(max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    country: str = Field(default="Kenya", max_length=100)
    payment_method: PaymentMethod = "mpesa"
    notes: str | None = None

    @field_validator("first_name", "last_name", "phone", "address", "city", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("postal_code", "notes")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderItemRead(SQLModel):
    id: int
    product_id: int | None
    product_name: str
    quantity: int
    unit_price: float
    line_total: float


class OrderRead(SQLModel):
    id: int
    order_number: str
    user_id: int
    status: OrderStatus
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    postal_code: str | None
    country: str
    payment_method: str
    payment_status: str
    subtotal: float
    shipping_fee: float
    tax: float
    total: float
    notes: str | None
    created_at: datetime
    updated_at: datetime


class OrderWithItemsRead(OrderRead):
    items: list[OrderItemRead]


class OrderPage(SQLModel):
    orders: list[OrderRead]
    page: int
    pages: int
    total: int


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
