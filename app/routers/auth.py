# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.common import Message
from app.schemas.user import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdate,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenPair,
    UserRead,
)
from app.services.auth_service import AuthService
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = AuthService(repo)
user_service = UserService(repo)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, session: Session = Depends(get_session)):
    """
    Create a customer account and sign it in.
    """
    return service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, session: Session = Depends(get_session)):
    return service.login(session, payload)


@router.post("/admin/login", response_model=AuthResponse)
def admin_login(payload: LoginRequest, session: Session = Depends(get_session)):
    """
    Admin console login. Valid customer credentials get 403.
    """
    return service.login(session, payload, admin_only=True)


@router.post("/refresh-token", response_model=TokenPair)
def refresh_token(payload: RefreshRequest, session: Session = Depends(get_session)):
    """
    Exchange a refresh token for a new access/refresh pair.
    """
    return service.refresh(session, payload)


@router.get("/profile", response_model=UserRead)
def read_profile(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.
    """
    return current_user


@router.put("/profile", response_model=UserRead)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update name, phone or email; change password with
    `currentPassword` + `newPassword`.
    """
    return user_service.update_profile(session, current_user, payload)


@router.post("/forgot-password", response_model=Message)
def forgot_password(payload: ForgotPasswordRequest, session: Session = Depends(get_session)):
    return service.forgot_password(session, payload)


@router.post("/reset-password", response_model=Message)
def reset_password(payload: ResetPasswordRequest, session: Session = Depends(get_session)):
    return service.reset_password(session, payload)
