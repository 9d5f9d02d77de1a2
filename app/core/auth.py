# app/core/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from app.core.security import ACCESS, TokenError, decode_token
from app.database import get_session
from app.models.user import User

# Missing Authorization headers are not an error here; public routes
# (product catalogue, newsletter) still resolve the caller as a guest.
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _user_from_token(session: Session, token: str) -> User:
    """
    Map an access token to its account.

    Refresh and reset tokens are rejected by type, and a token outlives
    neither its expiry nor the account it was issued for.
    """
    try:
        user_id = int(decode_token(token, ACCESS)["sub"])
    except (TokenError, KeyError, ValueError):
        raise _unauthorized("Not authorized, token failed")

    user = session.get(User, user_id)
    if user is None:
        raise _unauthorized("Not authorized, user not found")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """Caller's account, or None for a guest request with no bearer token."""
    if credentials is None:
        return None
    return _user_from_token(session, credentials.credentials)


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise _unauthorized("Not authorized, no token")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """Admin console guard: signed-in customers get 403, guests 401."""
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized as an admin",
        )
    return user
