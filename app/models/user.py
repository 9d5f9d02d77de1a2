# app/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Shop account.

    Role:
      - "customer" | "admin"
      - admins get access to the /api/admin console.
    """

    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)

    name: str = Field(max_length=100)

    email: str = Field(
        max_length=100,
        unique=True,
        index=True,
    )

    # bcrypt hash, never returned by the API
    password: str = Field(max_length=100)

    phone: str | None = Field(default=None, max_length=20)

    role: str = Field(
        default="customer",
        max_length=20,
        index=True,
        description="Application role: customer | admin",
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column_kwargs={"onupdate": utcnow},
    )
