"""
FastAPI providers for repositories and services.

Routes depend on the service providers; tests swap the repository providers
through `app.dependency_overrides`.
"""
from fastapi import Depends

from app.core.database import get_db
from app.repositories.cart import CartRepository
from app.repositories.catalog import CatalogRepository
from app.repositories.order import OrderRepository
from app.repositories.table import TableRepository
from app.repositories.user import UserRepository
from app.services.cart import CartService
from app.services.conversion import ConversionService
from app.services.order import OrderService
from app.services.qr_codec import QRCodec
from app.services.table_session import TableSessionService


def get_tables() -> TableRepository:
    return TableRepository(get_db())


def get_carts() -> CartRepository:
    return CartRepository(get_db())


def get_orders() -> OrderRepository:
    return OrderRepository(get_db())


def get_catalog() -> CatalogRepository:
    return CatalogRepository(get_db())


def get_users() -> UserRepository:
    return UserRepository(get_db())


def get_qr_codec() -> QRCodec:
    return QRCodec()


def get_table_sessions(tables=Depends(get_tables), codec=Depends(get_qr_codec)) -> TableSessionService:
    return TableSessionService(tables, codec)


def get_cart_service(
    carts=Depends(get_carts),
    catalog=Depends(get_catalog),
    sessions=Depends(get_table_sessions),
) -> CartService:
    return CartService(carts, catalog, sessions)


def get_order_service(orders=Depends(get_orders)) -> OrderService:
    return OrderService(orders)


def get_conversion_service(
    carts=Depends(get_carts),
    orders=Depends(get_orders),
    catalog=Depends(get_catalog),
    users=Depends(get_users),
    sessions=Depends(get_table_sessions),
) -> ConversionService:
    return ConversionService(carts, orders, catalog, users, sessions)
