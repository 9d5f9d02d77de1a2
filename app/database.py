# app/database.py
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine setup per backend
#
# - postgresql : small pool + pool_pre_ping, optional sslmode
#                (managed Postgres poolers limit client count)
# - mysql      : pool_recycle below the server wait_timeout
# - sqlite     : single shared connection for in-memory DBs,
#                foreign keys switched on (ON DELETE rules rely on it)
# ---------------------------------------------------------

db_url = settings.DATABASE_URL

engine_kwargs: dict = {"echo": settings.DB_ECHO}

if db_url.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
else:
    if db_url.startswith("postgres") and settings.DB_SSLMODE and "sslmode=" not in db_url:
        sep = "&" if "?" in db_url else "?"
        db_url = f"{db_url}{sep}sslmode={settings.DB_SSLMODE}"
    engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
    if db_url.startswith("mysql"):
        engine_kwargs["pool_recycle"] = 3600

engine = create_engine(db_url, **engine_kwargs)


if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_and_tables() -> None:
    """Startup hook: issue CREATE TABLE for any shop table still missing."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Request-scoped session. Services decide when to commit; anything left
    uncommitted is rolled back when the request ends.
    """
    with Session(engine) as session:
        yield session
