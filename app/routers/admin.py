# app/routers/admin.py
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.core.pagination import PageParams
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.category_repo import CategoryRepository
from app.repositories.newsletter_repo import NewsletterRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.stats_repo import StatsRepository
from app.repositories.user_repo import UserRepository
from app.schemas.category import CategoryCreate, CategoryPage, CategoryRead, CategoryUpdate
from app.schemas.common import Message
from app.schemas.newsletter import SubscriberPage
from app.schemas.order import OrderPage, OrderStatus, OrderStatusUpdate, OrderWithItemsRead
from app.schemas.product import (
    ProductCreate,
    ProductDeleted,
    ProductDetail,
    ProductPage,
    ProductUpdate,
)
from app.schemas.stats import DashboardStats, LowStockProduct, RecentOrder, SalesReport
from app.schemas.user import CustomerPage, UserRead, UserRoleUpdate
from app.services.category_service import CategoryService
from app.services.newsletter_service import NewsletterService
from app.services.order_service import OrderService
from app.services.product_service import ProductService
from app.services.stats_service import LOW_STOCK_THRESHOLD, StatsService
from app.services.user_service import UserService

# Every route below requires role='admin'
router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

product_repo = ProductRepository()
category_repo = CategoryRepository()

product_service = ProductService(product_repo, category_repo)
category_service = CategoryService(category_repo)
order_service = OrderService(OrderRepository(), CartRepository(), product_repo)
stats_service = StatsService(StatsRepository(), product_repo, category_repo)
user_service = UserService(UserRepository())
newsletter_service = NewsletterService(NewsletterRepository())


# -------- Dashboard --------


@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(session: Session = Depends(get_session)):
    """
    Headline numbers: customers, products, orders, revenue (cancelled
    orders excluded), pending orders and low-stock products.
    """
    return stats_service.get_dashboard_stats(session)


@router.get("/dashboard/recent-orders", response_model=list[RecentOrder])
def recent_orders(
    session: Session = Depends(get_session),
    limit: int = Query(5, ge=1, le=50),
):
    return stats_service.get_recent_orders(session, limit)


@router.get("/dashboard/low-stock", response_model=list[LowStockProduct])
def low_stock(
    session: Session = Depends(get_session),
    threshold: int = Query(LOW_STOCK_THRESHOLD, ge=0),
):
    return stats_service.get_low_stock(session, threshold)


@router.get("/customers", response_model=CustomerPage)
def list_customers(
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
    search: str | None = None,
):
    """
    Customers with order count and total spent.
    """
    return stats_service.list_customers(session, paging.page, paging.limit, search)


@router.get("/reports/sales", response_model=SalesReport)
def sales_report(
    session: Session = Depends(get_session),
    start_date: date | None = None,
    end_date: date | None = None,
):
    """
    Daily revenue between two dates (inclusive, defaults to the last 30 days).
    """
    return stats_service.get_sales_report(session, start_date, end_date)


# -------- Users --------


@router.get("/users/{user_id}", response_model=UserRead)
def get_user(user_id: int, session: Session = Depends(get_session)):
    return user_service.get_user(session, user_id)


@router.patch("/users/{user_id}/role", response_model=UserRead)
def update_user_role(
    user_id: int,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return user_service.update_role(session, admin, user_id, payload)


@router.delete("/users/{user_id}", response_model=Message)
def delete_user(
    user_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    user_service.delete_user(session, admin, user_id)
    return Message(message="User removed")


# -------- Products --------


@router.get("/products", response_model=ProductPage)
def admin_list_products(
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
    search: str | None = None,
):
    return product_service.list_products(
        session, page=paging.page, limit=paging.limit, search=search
    )


@router.get("/products/{product_id}", response_model=ProductDetail)
def admin_get_product(product_id: int, session: Session = Depends(get_session)):
    return product_service.get_product_detail(session, product_id)


@router.post("/products", response_model=ProductDetail, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductCreate, session: Session = Depends(get_session)):
    """
    Create a product with images, sizes, colors and care instructions.
    The first image URL becomes the primary image.
    """
    return product_service.create_product(session, payload)


@router.put("/products/{product_id}", response_model=ProductDetail)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial update. Any child list sent replaces the stored one.
    """
    return product_service.update_product(session, product_id, payload)


@router.delete("/products/{product_id}", response_model=ProductDeleted)
def delete_product(product_id: int, session: Session = Depends(get_session)):
    return product_service.delete_product(session, product_id)


# -------- Categories --------


@router.get("/categories", response_model=CategoryPage)
def admin_list_categories(
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
):
    return category_service.list_page(session, paging.page, paging.limit)


@router.get("/categories/{category_id}", response_model=CategoryRead)
def admin_get_category(category_id: int, session: Session = Depends(get_session)):
    return category_service.read_category(session, category_id)


@router.post("/categories", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, session: Session = Depends(get_session)):
    return category_service.create_category(session, payload)


@router.put("/categories/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    return category_service.update_category(session, category_id, payload)


@router.delete("/categories/{category_id}", response_model=Message)
def delete_category(category_id: int, session: Session = Depends(get_session)):
    """
    Delete a category. Its products stay, uncategorized.
    """
    category_service.delete_category(session, category_id)
    return Message(message="Category removed")


# -------- Orders --------


@router.get("/orders", response_model=OrderPage)
def admin_list_orders(
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
    status_filter: OrderStatus | None = Query(None, alias="status"),
):
    return order_service.list_all_orders(session, paging.page, paging.limit, status_filter)


@router.get("/orders/{order_id}", response_model=OrderWithItemsRead)
def admin_get_order(order_id: int, session: Session = Depends(get_session)):
    return order_service.get_order_admin(session, order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderWithItemsRead)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Move an order through pending -> processing -> shipped -> delivered,
    or cancel it before shipping (stock is restored).
    """
    return order_service.update_status(session, order_id, payload)


# -------- Newsletter --------


@router.get("/newsletter/subscribers", response_model=SubscriberPage)
def list_subscribers(
    session: Session = Depends(get_session),
    paging: PageParams = Depends(),
    active_only: bool = False,
):
    return newsletter_service.list_subscribers(session, paging.page, paging.limit, active_only)
