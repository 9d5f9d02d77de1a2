# app/models/order.py
from datetime import datetime

from sqlalchemy import Column, Numeric
from sqlmodel import SQLModel, Field

from app.models.user import utcnow


def _money(nullable: bool = False) -> Column:
    return Column(Numeric(10, 2, asdecimal=False), nullable=nullable)


class Order(SQLModel, table=True):
    """
    Customer order placed from the cart.

    Totals:
      - subtotal      sum of quantity * unit_price
      - shipping_fee  flat fee below the free-shipping threshold
      - tax           VAT on subtotal
      - total         subtotal + shipping_fee + tax
    """

    __tablename__ = "orders"

    id: int | None = Field(default=None, primary_key=True)

    order_number: str = Field(max_length=20, unique=True, index=True)

    user_id: int = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
    )

    # pending | processing | shipped | delivered | cancelled
    status: str = Field(default="pending", max_length=20, index=True)

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    email: str = Field(max_length=100)
    phone: str = Field(max_length=20)
    address: str = Field(max_length=255)
    city: str = Field(max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    country: str = Field(default="Kenya", max_length=100)

    # mpesa | card | cash_on_delivery; payment itself is not processed here
    payment_method: str = Field(max_length=30)
    payment_status: str = Field(default="pending", max_length=20)

    subtotal: float = Field(sa_column=_money())
    shipping_fee: float = Field(sa_column=_money())
    tax: float = Field(sa_column=_money())
    total: float = Field(sa_column=_money())

    notes: str | None = None

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order. Name and price are copied at checkout so the
    line survives product edits and deletion.
    """

    __tablename__ = "order_items"

    id: int | None = Field(default=None, primary_key=True)

    order_id: int = Field(
        foreign_key="orders.id",
        ondelete="CASCADE",
        index=True,
    )

    product_id: int | None = Field(
        default=None,
        foreign_key="products.id",
        ondelete="SET NULL",
        index=True,
    )

    product_name: str = Field(max_length=255)
    quantity: int
    unit_price: float = Field(sa_column=_money())
