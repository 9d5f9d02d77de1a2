# app/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.pagination import PageParams
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import ProductDetail, ProductPage, ProductRead
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
category_repo = CategoryRepository()
service = ProductService(repo, category_repo)


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
    search: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    sort: str | None = Query(None, description='"field,asc|desc", e.g. "price,asc"'),
):
    """
    Storefront listing.

    - `search` matches name or description.
    - `category` is a category id, name or slug.
    """
    return service.list_products(
        session,
        page=paging.page,
        limit=paging.limit,
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )


@router.get("/featured", response_model=list[ProductRead])
def featured_products(
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    return service.list_shelf(session, "featured", limit)


@router.get("/new", response_model=list[ProductRead])
def new_products(
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    return service.list_shelf(session, "new", limit)


@router.get("/budget", response_model=list[ProductRead])
def budget_products(
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    return service.list_shelf(session, "budget", limit)


@router.get("/luxury", response_model=list[ProductRead])
def luxury_products(
    session: Session = Depends(get_session),
    limit: int = Query(8, ge=1, le=50),
):
    return service.list_shelf(session, "luxury", limit)


@router.get("/related/{product_id}", response_model=list[ProductRead])
def related_products(
    product_id: int,
    session: Session = Depends(get_session),
    limit: int = Query(4, ge=1, le=20),
):
    """
    Other products from the same category.
    """
    return service.list_related(session, product_id, limit)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: int,
    session: Session = Depends(get_session),
):
    """
    Product page: category, images, sizes, colors and care instructions.
    """
    return service.get_product_detail(session, product_id)
