# app/schemas/newsletter.py
from datetime import datetime

from pydantic import EmailStr
from sqlmodel import SQLModel


class SubscribeRequest(SQLModel):
    email: EmailStr


class SubscriberRead(SQLModel):
    id: int
    email: str
    is_active: bool
    created_at: datetime


class SubscriberPage(SQLModel):
    subscribers: list[SubscriberRead]
    page: int
    pages: int
    total: int
