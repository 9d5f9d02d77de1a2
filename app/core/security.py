# app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import get_settings

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"
RESET = "reset"


class TokenError(Exception):
    """Raised when a token cannot be decoded or has the wrong type."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _secret_for(token_type: str) -> str:
    if token_type == REFRESH:
        return settings.JWT_REFRESH_SECRET
    return settings.JWT_SECRET


def _encode(user_id: int, token_type: str, expires_delta: timedelta, **extra: Any) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        **extra,
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.JWT_ALG)


def create_access_token(user_id: int, role: str) -> str:
    return _encode(
        user_id,
        ACCESS,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        role=role,
    )


def create_refresh_token(user_id: int) -> str:
    return _encode(user_id, REFRESH, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def create_reset_token(user_id: int, password_hash: str) -> str:
    """
    Password reset token.

    Carries a fingerprint of the current password hash so the token
    stops working once the password has been changed.
    """
    return _encode(
        user_id,
        RESET,
        timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
        pwd=password_hash[-10:],
    )


def decode_token(token: str, expected_type: str) -> dict[str, Any]:
    """
    Decode and verify a token signed by this API.

    Verification:
      - signature (HS256 with the secret for `expected_type`)
      - expiration time (exp)
      - `type` claim equals `expected_type`

    Raises:
        TokenError: if the token is invalid, expired or of another type.
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(expected_type),
            algorithms=[settings.JWT_ALG],
        )
    except JWTError as exc:
        raise TokenError(str(exc)) from exc

    if payload.get("type") != expected_type:
        raise TokenError("Unexpected token type")
    return payload
