# app/services/auth_service.py
import logging
import smtplib

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import get_settings
from app.core.email_client import send_password_reset_email
from app.core.security import (
    REFRESH,
    RESET,
    TokenError,
    create_access_token,
    create_refresh_token,
    create_reset_token,
    decode_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.repositories.user_repo import UserRepository, normalize_email
from app.schemas.common import Message
from app.schemas.user import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenPair,
    UserRead,
)

logger = logging.getLogger("uvicorn")
settings = get_settings()

# Vite dev server, used when FRONTEND_URL is not set
DEFAULT_FRONTEND_URL = "http://localhost:5173"


class AuthService:
    """
    Account registration, login and token lifecycle.

    Access tokens carry the user's role; refresh tokens are signed with a
    separate secret; reset tokens are bound to the current password hash.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def _issue(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserRead.model_validate(user, from_attributes=True),
            token=create_access_token(user.id, user.role),
            refresh_token=create_refresh_token(user.id),
        )

    def register(self, session: Session, payload: RegisterRequest) -> AuthResponse:
        if self.repo.email_taken(session, payload.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists",
            )

        user = User(
            name=payload.name,
            email=normalize_email(payload.email),
            password=hash_password(payload.password),
            phone=payload.phone,
        )
        user = self.repo.save(session, user)
        logger.info(f"New customer registered: {user.email}")
        return self._issue(user)

    def login(self, session: Session, payload: LoginRequest, admin_only: bool = False) -> AuthResponse:
        """
        Check credentials and issue a token pair.

        admin_only is used by the admin console login: a valid customer
        account gets 403 there instead of tokens.
        """
        user = self.repo.get_by_email(session, payload.email)
        if not user or not verify_password(payload.password, user.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        if admin_only and user.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not authorized as an admin",
            )

        return self._issue(user)

    def refresh(self, session: Session, payload: RefreshRequest) -> TokenPair:
        try:
            claims = decode_token(payload.refresh_token, REFRESH)
            user_id = int(claims["sub"])
        except (TokenError, KeyError, ValueError):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token",
            )

        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token",
            )

        return TokenPair(
            token=create_access_token(user.id, user.role),
            refresh_token=create_refresh_token(user.id),
        )

    def forgot_password(self, session: Session, payload: ForgotPasswordRequest) -> Message:
        """
        Email a reset link when the account exists.

        The response is the same either way so the endpoint cannot be used
        to probe for registered emails.
        """
        user = self.repo.get_by_email(session, payload.email)
        if user:
            token = create_reset_token(user.id, user.password)
            base_url = (settings.FRONTEND_URL or DEFAULT_FRONTEND_URL).rstrip("/")
            reset_url = f"{base_url}/reset-password?token={token}"
            try:
                send_password_reset_email(user.email, user.name, reset_url)
            except (RuntimeError, smtplib.SMTPException, OSError) as exc:
                logger.error(f"Password reset email to {user.email} failed: {exc}")

        return Message(message="If that email is registered, a reset link has been sent")

    def reset_password(self, session: Session, payload: ResetPasswordRequest) -> Message:
        invalid = HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token",
        )
        try:
            claims = decode_token(payload.token, RESET)
            user_id = int(claims["sub"])
        except (TokenError, KeyError, ValueError):
            raise invalid

        user = self.repo.get_by_id(session, user_id)
        # A token is single-use: the fingerprint changes with the password
        if not user or claims.get("pwd") != user.password[-10:]:
            raise invalid

        user.password = hash_password(payload.new_password)
        self.repo.save(session, user)
        return Message(message="Password has been reset")
