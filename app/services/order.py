import logging
import math
from datetime import date, datetime, time, timezone
from typing import List, Optional

from app.exceptions import Forbidden, OrderNotFound, StaleTransition
from app.models.order import Order, OrderListResponse, OrderStatus
from app.models.user import CurrentUser
from app.services.order_state import OrderStateMachine

logger = logging.getLogger(__name__)

KITCHEN_STATUSES = (OrderStatus.CONFIRMED, OrderStatus.PREPARING)

# Last instant of a day, to the millisecond
END_OF_DAY = time(23, 59, 59, 999000)


class OrderService:

    def __init__(self, orders):
        self.orders = orders

    async def get(self, order_id: str, requester: CurrentUser) -> Order:
        order = await self.orders.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)
        if not requester.is_admin and order.clientId != requester.id:
            raise Forbidden("Accès refusé", details={"order_id": order_id})
        return order

    async def list(
        self,
        requester: CurrentUser,
        client_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        table_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        limit: int = 10,
    ) -> OrderListResponse:
        """Page through orders. `date_to` covers the whole of that day (UTC)."""
        # Clients only ever see their own orders
        if not requester.is_admin:
            client_id = requester.id

        orders, total = await self.orders.list_orders(
            client_id=client_id,
            status=status,
            table_id=table_id,
            ordered_from=datetime.combine(date_from, time.min, tzinfo=timezone.utc) if date_from else None,
            ordered_to=datetime.combine(date_to, END_OF_DAY, tzinfo=timezone.utc) if date_to else None,
            skip=(page - 1) * limit,
            take=limit,
        )
        return OrderListResponse(
            orders=orders,
            total=total,
            currentPage=page,
            totalPages=math.ceil(total / limit) if limit else 0,
        )

    async def kitchen_queue(self) -> List[Order]:
        """Orders the kitchen is working on, oldest first."""
        return await self.orders.list_by_statuses(KITCHEN_STATUSES)

    async def update_status(
        self, order_id: str, label: str, requester: CurrentUser, comment: Optional[str] = None
    ) -> Order:
        target = OrderStateMachine.parse_target(label)

        order = await self.orders.get(order_id)
        if order is None:
            raise OrderNotFound(order_id)

        OrderStateMachine.authorize(order, target, requester)
        changed = OrderStateMachine.apply(order, target, datetime.now(timezone.utc), comment)

        saved = await self.orders.update_status(changed, expected_status=order.status)
        if saved is None:
            logger.info("Order %s changed before %s could be applied", order_id, target.value)
            raise StaleTransition(order_id, order.status.value)

        logger.info(
            "Order %s (%s): %s -> %s by %s",
            order.id, order.number, order.status.value, target.value, requester.id
        )
        return saved

    async def cancel(self, order_id: str, requester: CurrentUser) -> Order:
        comment = "Annulée par admin" if requester.is_admin else "Annulée par client"
        return await self.update_status(order_id, OrderStatus.CANCELLED.value, requester, comment)
