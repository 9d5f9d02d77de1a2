# app/seed.py
"""
Sample data for development.

Each table is only filled when it is empty, so running this again is
harmless. Run on startup with SEED_SAMPLE_DATA=true, or by hand:

    python -m app.seed
"""
import logging
from functools import lru_cache

from sqlalchemy import func
from sqlmodel import Session, select

from app.core.security import hash_password
from app.database import create_db_and_tables, engine
from app.models import cart as _cart_models  # noqa: F401
from app.models import newsletter as _newsletter_models  # noqa: F401
from app.models import order as _order_models  # noqa: F401
from app.models.product import Category, Product, ProductImage
from app.models.user import User

logger = logging.getLogger("uvicorn")

# Both sample accounts share this password
SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    {"name": "Admin User", "email": "admin@example.com", "role": "admin"},
    {"name": "Test User", "email": "test@example.com", "phone": "555-123-4567"},
]

SAMPLE_CATEGORIES = [
    ("Clothing", "clothing", "Baby clothes and accessories"),
    ("Furniture", "furniture", "Cribs, changing tables, and more"),
    ("Feeding", "feeding", "Bottles, bibs, and other feeding supplies"),
    ("Toys", "toys", "Educational and fun toys for all ages"),
    ("Electronics", "electronics", "Monitors, humidifiers, and other electronics"),
]

SAMPLE_PRODUCTS = [
    {
        "name": "Baby Onesie",
        "description": "Soft cotton onesie for newborns",
        "price": 19.99,
        "original_price": 24.99,
        "category": "clothing",
        "stock": 15,
        "rating": 4.5,
        "reviews": 28,
        "featured": True,
        "is_new": True,
        "image": "/images/products/onesie1.jpg",
    },
    {
        "name": "Baby Crib",
        "description": "Convertible 4-in-1 crib that grows with your child",
        "price": 299.99,
        "original_price": 349.99,
        "category": "furniture",
        "stock": 8,
        "rating": 4.8,
        "reviews": 42,
        "featured": True,
        "is_luxury": True,
        "image": "/images/products/crib1.jpg",
    },
    {
        "name": "Baby Bottles Set",
        "description": "Set of 3 anti-colic baby bottles",
        "price": 24.99,
        "original_price": 29.99,
        "category": "feeding",
        "stock": 25,
        "rating": 4.3,
        "reviews": 76,
        "is_budget": True,
        "image": "/images/products/bottles1.jpg",
    },
    {
        "name": "Baby Monitor",
        "description": "HD video monitor with night vision",
        "price": 89.99,
        "original_price": 99.99,
        "category": "electronics",
        "stock": 5,
        "rating": 4.6,
        "reviews": 54,
        "featured": True,
        "image": "/images/products/monitor1.jpg",
    },
    {
        "name": "Baby Mobile",
        "description": "Musical mobile with starry night projection",
        "price": 39.99,
        "original_price": 49.99,
        "category": "toys",
        "stock": 3,
        "rating": 4.2,
        "reviews": 31,
        "is_new": True,
        "image": "/images/products/mobile1.jpg",
    },
]


@lru_cache
def _sample_password_hash() -> str:
    return hash_password(SAMPLE_PASSWORD)


def _is_empty(session: Session, model) -> bool:
    return session.exec(select(func.count()).select_from(model)).one() == 0


def seed_sample_data(session: Session) -> None:
    if _is_empty(session, User):
        logger.info("Adding sample users...")
        session.add_all(
            [User(password=_sample_password_hash(), **data) for data in SAMPLE_USERS]
        )
        session.commit()

    if _is_empty(session, Category):
        logger.info("Adding sample categories...")
        session.add_all(
            [
                Category(
                    name=name,
                    slug=slug,
                    description=description,
                    image_url=f"/images/categories/{slug}.jpg",
                )
                for name, slug, description in SAMPLE_CATEGORIES
            ]
        )
        session.commit()

    if _is_empty(session, Product):
        logger.info("Adding sample products...")
        category_ids = {
            slug: cid for cid, slug in session.exec(select(Category.id, Category.slug)).all()
        }
        for data in SAMPLE_PRODUCTS:
            data = dict(data)
            image = data.pop("image")
            product = Product(category_id=category_ids.get(data.pop("category")), **data)
            session.add(product)
            session.flush()
            session.add(ProductImage(product_id=product.id, image_url=image, is_primary=True))
        session.commit()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    with Session(engine) as session:
        seed_sample_data(session)
    logger.info("✅ Sample data ready.")


if __name__ == "__main__":
    main()
