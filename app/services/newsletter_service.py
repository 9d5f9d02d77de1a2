# app/services/newsletter_service.py
import logging
import smtplib

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.email_client import send_newsletter_welcome_email
from app.core.pagination import page_count
from app.models.newsletter import NewsletterSubscriber
from app.repositories.newsletter_repo import NewsletterRepository
from app.schemas.common import Message
from app.schemas.newsletter import SubscriberPage, SubscriberRead

logger = logging.getLogger("uvicorn")


class NewsletterService:

    def __init__(self, repo: NewsletterRepository):
        self.repo = repo

    def subscribe(self, session: Session, email: str, unsubscribe_base_url: str) -> Message:
        """
        Idempotent; a previously unsubscribed address is reactivated.

        New and reactivated subscribers get a welcome email carrying their
        unsubscribe link (`{unsubscribe_base_url}/{token}`).
        """
        email = email.strip().lower()
        subscriber = self.repo.get_by_email(session, email)

        if subscriber is None:
            subscriber = self.repo.save(session, NewsletterSubscriber(email=email))
            logger.info(f"Newsletter subscription: {email}")
        elif not subscriber.is_active:
            subscriber.is_active = True
            subscriber = self.repo.save(session, subscriber)
        else:
            return Message(message="Subscribed to newsletter")

        unsubscribe_url = f"{unsubscribe_base_url.rstrip('/')}/{subscriber.token}"
        try:
            send_newsletter_welcome_email(subscriber.email, unsubscribe_url)
        except (RuntimeError, smtplib.SMTPException, OSError) as exc:
            logger.error(f"Newsletter welcome email to {subscriber.email} failed: {exc}")

        return Message(message="Subscribed to newsletter")

    def unsubscribe(self, session: Session, token: str) -> Message:
        subscriber = self.repo.get_by_token(session, token)
        if subscriber is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Subscription not found",
            )
        if subscriber.is_active:
            subscriber.is_active = False
            self.repo.save(session, subscriber)
        return Message(message="Unsubscribed from newsletter")

    def list_subscribers(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        active_only: bool = False,
    ) -> SubscriberPage:
        subscribers, total = self.repo.list_all(
            session, active_only=active_only, skip=(page - 1) * limit, limit=limit
        )
        return SubscriberPage(
            subscribers=[SubscriberRead.model_validate(s, from_attributes=True) for s in subscribers],
            page=page,
            pages=page_count(total, limit),
            total=total,
        )
