from fastapi import APIRouter, Depends, Query
from datetime import date
from typing import List, Optional
from app.core.dependencies import get_order_service
from app.middleware.roles import get_current_admin_user, get_current_user
from app.models.order import Order, OrderListResponse, OrderStatus, OrderStatusUpdate
from app.models.user import CurrentUser
from app.services.order import OrderService


router = APIRouter(prefix="/order", tags=["Orders"])


@router.get("/", response_model=OrderListResponse)
async def list_orders(
    client_id: Optional[str] = Query(None, alias="clientId"),
    status: Optional[OrderStatus] = Query(None),
    table_id: Optional[str] = Query(None, alias="tableId"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: CurrentUser = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service)
):
    """List orders, newest first. Clients only see their own."""
    return await orders.list(
        current_user,
        client_id=client_id,
        status=status,
        table_id=table_id,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit
    )


@router.get("/pending/kitchen", response_model=List[Order])
async def get_kitchen_orders(
    current_user: CurrentUser = Depends(get_current_admin_user),
    orders: OrderService = Depends(get_order_service)
):
    """Confirmed and preparing orders, oldest first (Admin only)."""
    return await orders.kitchen_queue()


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service)
):
    return await orders.get(order_id, current_user)


@router.put("/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str,
    status_data: OrderStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service)
):
    """Move an order through its lifecycle."""
    return await orders.update_status(order_id, status_data.status, current_user, status_data.comment)


@router.delete("/{order_id}", response_model=Order)
async def cancel_order(
    order_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    orders: OrderService = Depends(get_order_service)
):
    """Cancel an order. Clients may only cancel while it is pending."""
    return await orders.cancel(order_id, current_user)
