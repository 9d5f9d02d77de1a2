# app/services/user_service.py
from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.security import hash_password, verify_password
from app.models.user import User
from app.repositories.user_repo import UserRepository, normalize_email
from app.schemas.user import ProfileUpdate, UserRoleUpdate


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - profile edits (email stays unique, password change needs the old one)
      - admin role changes and deletion
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Self profile -----

    def update_profile(
        self,
        session: Session,
        current_user: User,
        payload: ProfileUpdate,
    ) -> User:
        """
        Partial profile update.

        Rules:
          - a new email must not belong to another account
          - newPassword requires currentPassword to match
        """
        if payload.email is not None:
            if self.repo.email_taken(session, payload.email, exclude_id=current_user.id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already in use",
                )
            current_user.email = normalize_email(payload.email)

        if payload.new_password is not None:
            if not payload.current_password:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Current password is required",
                )
            if not verify_password(payload.current_password, current_user.password):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Current password is incorrect",
                )
            current_user.password = hash_password(payload.new_password)

        if payload.name is not None:
            current_user.name = payload.name
        if payload.phone is not None:
            current_user.phone = payload.phone

        return self.repo.save(session, current_user)

    # ----- Admin operations -----

    def get_user(self, session: Session, user_id: int) -> User:
        """
        Get a user by id (admin only).

        Raises:
            HTTPException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def update_role(
        self,
        session: Session,
        admin: User,
        user_id: int,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role. Admins cannot demote themselves, so the console
        always keeps at least the acting admin.
        """
        user = self.get_user(session, user_id)
        if user.id == admin.id and payload.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot remove your own admin role",
            )
        user.role = payload.role
        return self.repo.save(session, user)

    def delete_user(self, session: Session, admin: User, user_id: int) -> None:
        """Delete a user; their cart, favorites and orders go with them."""
        user = self.get_user(session, user_id)
        if user.id == admin.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own account",
            )
        self.repo.delete(session, user)
