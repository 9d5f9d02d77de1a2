# app/models/newsletter.py
import secrets
from datetime import datetime

from sqlmodel import SQLModel, Field

from app.models.user import utcnow


class NewsletterSubscriber(SQLModel, table=True):
    __tablename__ = "newsletter_subscribers"

    id: int | None = Field(default=None, primary_key=True)
    email: str = Field(max_length=100, unique=True, index=True)
    # Used in the unsubscribe link
    token: str = Field(
        default_factory=lambda: secrets.token_urlsafe(24),
        max_length=64,
        unique=True,
        index=True,
    )
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow)
