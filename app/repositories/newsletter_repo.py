# app/repositories/newsletter_repo.py
from sqlalchemy import func
from sqlmodel import Session, select

from app.models.newsletter import NewsletterSubscriber


class NewsletterRepository:

    def get_by_email(self, session: Session, email: str) -> NewsletterSubscriber | None:
        stmt = select(NewsletterSubscriber).where(NewsletterSubscriber.email == email)
        return session.exec(stmt).first()

    def get_by_token(self, session: Session, token: str) -> NewsletterSubscriber | None:
        stmt = select(NewsletterSubscriber).where(NewsletterSubscriber.token == token)
        return session.exec(stmt).first()

    def list_all(
        self,
        session: Session,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[NewsletterSubscriber], int]:
        stmt = select(NewsletterSubscriber)
        count_stmt = select(func.count()).select_from(NewsletterSubscriber)
        if active_only:
            stmt = stmt.where(NewsletterSubscriber.is_active == True)  # noqa: E712
            count_stmt = count_stmt.where(NewsletterSubscriber.is_active == True)  # noqa: E712
        total = int(session.exec(count_stmt).one() or 0)
        stmt = stmt.order_by(NewsletterSubscriber.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all()), total

    def save(self, session: Session, subscriber: NewsletterSubscriber) -> NewsletterSubscriber:
        session.add(subscriber)
        session.commit()
        session.refresh(subscriber)
        return subscriber
