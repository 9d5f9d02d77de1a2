# app/repositories/user_repo.py
from sqlmodel import Session, select

from app.models.user import User


def normalize_email(email: str) -> str:
    """Emails are stored trimmed and lowercased."""
    return email.strip().lower()


class UserRepository:
    """
    Data access for shop accounts.

    Emails are compared in their normalized form; `save` commits, since
    every account write is a single-row change.
    """

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        stmt = select(User).where(User.email == normalize_email(email))
        return session.exec(stmt).first()

    def email_taken(self, session: Session, email: str, exclude_id: int | None = None) -> bool:
        """True if another account already uses `email`."""
        stmt = select(User.id).where(User.email == normalize_email(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return session.exec(stmt).first() is not None

    def save(self, session: Session, user: User) -> User:
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        # cart rows, favorites and orders go with the account (ON DELETE CASCADE)
        session.delete(user)
        session.commit()
