"""
Cart to order conversion.

Creating the order is the authoritative step: once it is stored the
conversion has succeeded. Deactivating the cart, occupying the table and
linking the order into the client's history follow as idempotent steps that
are retried and, if they still fail, logged as warnings without failing the
request. A cart left active by such a failure cannot be converted twice,
since an order's `cartId` is unique.
"""
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from app.core.config import settings
from app.exceptions import AppException, CartNotFound, EmptyCart, MenuNotFound, ValidationError
from app.models.order import FulfillmentMode, Order, OrderItem, OrderStatus
from app.services.cart import cart_locks
from app.services.table_session import TableSessionService
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)


class ConversionService:

    def __init__(
        self,
        carts,
        orders,
        catalog,
        users,
        sessions: TableSessionService,
        locks: Optional[KeyedLock] = None,
    ):
        self.carts = carts
        self.orders = orders
        self.catalog = catalog
        self.users = users
        self.sessions = sessions
        self.locks = locks or cart_locks

    async def convert(
        self,
        client_id: str,
        table_id: str,
        mode: FulfillmentMode = FulfillmentMode.DINE_IN,
        comment: str = "",
        menu_of_the_day_id: Optional[str] = None,
    ) -> Order:
        async with self.locks.hold(client_id):
            cart = await self.carts.find_active(client_id, table_id)
            if cart is None:
                raise CartNotFound(client_id, table_id)
            if not cart.items:
                raise EmptyCart(cart.id)

            if menu_of_the_day_id and await self.catalog.find_menu_of_the_day(menu_of_the_day_id) is None:
                raise MenuNotFound(menu_of_the_day_id)

            # Names come from the catalog now; prices stay those captured in the cart
            dishes = {dish.id: dish for dish in await self.catalog.find_dishes_by_ids(cart.dish_ids)}
            missing = [dish_id for dish_id in cart.dish_ids if dish_id not in dishes]
            if missing:
                raise ValidationError("Plat du panier introuvable", details={"dish_ids": missing})

            items = tuple(
                OrderItem(
                    dishId=line.dishId,
                    name=dishes[line.dishId].name,
                    quantity=line.quantity,
                    unitPrice=line.unitPrice,
                    note=line.note,
                )
                for line in cart.items
            )
            subtotal = round(sum(item.quantity * item.unitPrice for item in items), 2)
            tax = round(subtotal * settings.TAX_RATE, 2)

            number = await self.orders.next_number(settings.ORDER_NUMBER_PREFIX)
            order = await self.orders.create(Order(
                number=number,
                clientId=client_id,
                tableId=table_id,
                cartId=cart.id,
                menuOfTheDayId=menu_of_the_day_id,
                subtotal=subtotal,
                tax=tax,
                total=round(subtotal + tax, 2),
                currency=cart.currency,
                status=OrderStatus.PENDING,
                orderedAt=datetime.now(timezone.utc),
                comment=(comment or "").strip(),
                mode=mode,
                items=items,
            ))
            logger.info(
                "Cart %s converted to order %s (%s) for client %s, total %s %s",
                cart.id, order.id, order.number, client_id, order.total, order.currency
            )

            await self._best_effort(f"deactivate cart {cart.id}", lambda: self.carts.deactivate(cart.id))
            if mode == FulfillmentMode.DINE_IN:
                await self._best_effort(
                    f"occupy table {table_id}",
                    lambda: self.sessions.ensure_occupied(table_id, client_id)
                )
            await self._best_effort(
                f"link order {order.id} to client {client_id}",
                lambda: self.users.append_order_to_history(client_id, order.id)
            )

        return order

    async def _best_effort(self, step: str, action: Callable[[], Awaitable]) -> bool:
        retries = settings.BEST_EFFORT_RETRIES
        for attempt in range(1, retries + 1):
            try:
                await action()
                return True
            except AppException as e:
                logger.warning("Post-order step failed: %s (attempt %s/%s): %r", step, attempt, retries, e)
        logger.warning("Post-order step abandoned: %s", step)
        return False
