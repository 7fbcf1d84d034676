from fastapi import APIRouter, status, Depends, Query
from typing import Optional
from app.core.dependencies import get_cart_service, get_conversion_service
from app.middleware.roles import get_current_user, ensure_owner_or_admin
from app.models.cart import AddItemRequest, Cart, CartSummary, UpdateItemRequest
from app.models.order import ConvertCartRequest, Order
from app.models.user import CurrentUser
from app.services.cart import CartService
from app.services.conversion import ConversionService


router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("/{client_id}", response_model=Cart)
async def get_cart(
    client_id: str,
    table_id: Optional[str] = Query(None, alias="tableId"),
    current_user: CurrentUser = Depends(get_current_user),
    carts: CartService = Depends(get_cart_service)
):
    """Get the client's active cart, optionally at a given table."""
    ensure_owner_or_admin(current_user, client_id)
    return await carts.get_active_cart(client_id, table_id)


@router.get("/{client_id}/summary", response_model=CartSummary)
async def get_cart_summary(
    client_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    carts: CartService = Depends(get_cart_service)
):
    """Item count and total of the active cart. Empty summary when there is none."""
    ensure_owner_or_admin(current_user, client_id)
    return await carts.summary(client_id)


@router.post("/{client_id}/add", response_model=Cart)
async def add_to_cart(
    client_id: str,
    request: AddItemRequest,
    current_user: CurrentUser = Depends(get_current_user),
    carts: CartService = Depends(get_cart_service)
):
    """Add a dish to the cart for the given table."""
    ensure_owner_or_admin(current_user, client_id)
    return await carts.add_item(client_id, request.tableId, request.dishId, request.quantity, request.note)


@router.put("/{client_id}/update-item", response_model=Cart)
async def update_cart_item(
    client_id: str,
    request: UpdateItemRequest,
    current_user: CurrentUser = Depends(get_current_user),
    carts: CartService = Depends(get_cart_service)
):
    ensure_owner_or_admin(current_user, client_id)
    return await carts.update_item(client_id, request.tableId, request.dishId, request.quantity, request.note)


@router.delete("/{client_id}/remove/{dish_id}/{table_id}", response_model=Cart)
async def remove_cart_item(
    client_id: str,
    dish_id: str,
    table_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    carts: CartService = Depends(get_cart_service)
):
    ensure_owner_or_admin(current_user, client_id)
    return await carts.remove_item(client_id, table_id, dish_id)


@router.delete("/{client_id}/clear/{table_id}", response_model=Cart)
async def clear_cart(
    client_id: str,
    table_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    carts: CartService = Depends(get_cart_service)
):
    ensure_owner_or_admin(current_user, client_id)
    return await carts.clear(client_id, table_id)


@router.post("/{client_id}/convert-to-order", response_model=Order, status_code=status.HTTP_201_CREATED)
async def convert_cart_to_order(
    client_id: str,
    request: ConvertCartRequest,
    current_user: CurrentUser = Depends(get_current_user),
    conversion: ConversionService = Depends(get_conversion_service)
):
    """Turn the active cart at the table into a pending order."""
    ensure_owner_or_admin(current_user, client_id)
    return await conversion.convert(
        client_id,
        request.tableId,
        mode=request.mode,
        comment=request.comment,
        menu_of_the_day_id=request.menuOfTheDayId
    )
