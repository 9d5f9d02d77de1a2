import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ.setdefault("JWT_SECRET", "test-access-secret")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app.database import engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402
from app.seed import SAMPLE_PASSWORD, seed_sample_data  # noqa: E402
from tests.shop_data import ADMIN_ID, CUSTOMER_ID, auth_header  # noqa: E402


@pytest.fixture(autouse=True)
def db():
    """Fresh schema + sample data for every test."""
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_sample_data(session)
    yield


@pytest.fixture
def session():
    with Session(engine) as session:
        yield session


@pytest.fixture
def client():
    # Not used as a context manager: tables come from the `db` fixture
    return TestClient(app)


@pytest.fixture
def password():
    return SAMPLE_PASSWORD


@pytest.fixture
def customer_headers():
    return auth_header(CUSTOMER_ID)


@pytest.fixture
def admin_headers():
    return auth_header(ADMIN_ID, "admin")


@pytest.fixture
def other_customer(session):
    """A second customer, for ownership checks."""
    user = User(name="Other Parent", email="other@example.com", password="x" * 60)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def other_headers(other_customer):
    return auth_header(other_customer.id)
