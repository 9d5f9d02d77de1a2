# app/core/cors.py
import logging

from starlette.middleware.cors import CORSMiddleware

from app.core.config import Settings

logger = logging.getLogger("uvicorn")

# Shop domains that are always allowed
SHOP_ORIGINS = [
    "https://victoriababyshop.co.ke",
    "https://www.victoriababyshop.co.ke",
    "https://victoria-kids-production.up.railway.app",
]

# Local dev servers on any port
LOCAL_ORIGIN_REGEX = r"^http://(localhost|127\.0\.0\.1)(:[0-9]+)?$"


def allowed_origins(settings: Settings) -> list[str]:
    origins = list(SHOP_ORIGINS)
    for extra in (settings.FRONTEND_URL, settings.ADMIN_FRONTEND_URL):
        if extra and extra not in origins:
            origins.append(extra.rstrip("/"))
    return origins


class ShopCORSMiddleware(CORSMiddleware):
    """
    CORSMiddleware that logs rejected origins.

    With `allow_unlisted=True` an unlisted origin is still served (after the
    warning). Only enabled in production via CORS_ALLOW_UNLISTED_IN_PRODUCTION.
    """

    def __init__(self, app, allow_unlisted: bool = False, **kwargs) -> None:
        super().__init__(app, **kwargs)
        self.allow_unlisted = allow_unlisted

    def is_allowed_origin(self, origin: str) -> bool:
        if super().is_allowed_origin(origin):
            return True
        logger.warning(f"Origin {origin} not allowed by CORS")
        return self.allow_unlisted


def cors_options(settings: Settings) -> dict:
    return {
        "allow_origins": allowed_origins(settings),
        "allow_origin_regex": LOCAL_ORIGIN_REGEX,
        "allow_credentials": True,
        "allow_methods": ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization", "X-Requested-With"],
        "allow_unlisted": settings.is_production and settings.CORS_ALLOW_UNLISTED_IN_PRODUCTION,
    }
