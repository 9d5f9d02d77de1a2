# app/routers/categories.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.pagination import PageParams
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.category import CategoryRead
from app.schemas.product import ProductPage
from app.services.category_service import CategoryService
from app.services.product_service import ProductService

router = APIRouter(prefix="/categories", tags=["Categories"])

repo = CategoryRepository()
service = CategoryService(repo)
product_service = ProductService(ProductRepository(), repo)


@router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """All categories with their product counts."""
    return service.list_categories(session)


@router.get("/slug/{slug}", response_model=CategoryRead)
def get_category_by_slug(slug: str, session: Session = Depends(get_session)):
    return service.read_by_slug(session, slug)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, session: Session = Depends(get_session)):
    return service.read_category(session, category_id)


@router.get("/{category_id}/products", response_model=ProductPage)
def list_category_products(
    category_id: int,
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
    sort: str | None = Query(None),
):
    """
    Products in one category, paginated like the main listing.
    """
    service.get_category(session, category_id)
    return product_service.list_products(
        session,
        page=paging.page,
        limit=paging.limit,
        category_id=category_id,
        sort=sort,
    )
