# app/main.py
from contextlib import asynccontextmanager
import logging
import time

import uvicorn
from fastapi import FastAPI, Request
from sqlmodel import Session

from app.core.config import get_settings
from app.core.cors import ShopCORSMiddleware, cors_options
from app.core.errors import register_exception_handlers
from app.database import create_db_and_tables, engine

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import product as _product_models  # noqa: F401
from app.models import cart as _cart_models  # noqa: F401
from app.models import order as _order_models  # noqa: F401
from app.models import newsletter as _newsletter_models  # noqa: F401

# Routers
from app.routers.auth import router as auth_router
from app.routers.products import router as products_router
from app.routers.categories import router as categories_router
from app.routers.cart import router as cart_router
from app.routers.orders import router as orders_router
from app.routers.favorites import router as favorites_router
from app.routers.newsletter import router as newsletter_router
from app.routers.media import router as media_router
from app.routers.admin import router as admin_router
from app.seed import seed_sample_data

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    On startup make sure the schema exists (and optionally load the demo
    catalogue); on shutdown release pooled connections.
    """
    logger.info(f"🔄 Startup: Connecting to {engine.dialect.name} database...")
    try:
        create_db_and_tables()
        logger.info("✅ Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: DB connection FAILED: {e}")
        raise

    if settings.SEED_SAMPLE_DATA:
        with Session(engine) as session:
            seed_sample_data(session)
        logger.info("🌱 Startup: sample data ready.")

    logger.info(f"🚀 {settings.PROJECT_NAME} running in {settings.ENVIRONMENT} mode")
    yield
    engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log `METHOD path status duration` for every request."""
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
    )
    return response


# --- CORS configuration ---
# Added last so it wraps everything, including error responses
app.add_middleware(ShopCORSMiddleware, **cors_options(settings))

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(categories_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)
app.include_router(favorites_router, prefix=settings.API_PREFIX)
app.include_router(newsletter_router, prefix=settings.API_PREFIX)
app.include_router(media_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "victoria-kids-api"}


def serve() -> None:
    """`python -m app.main`; deployments usually run `uvicorn app.main:app` directly."""
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    serve()
