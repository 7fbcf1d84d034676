import logging
from typing import Callable, Optional

from app.core.config import settings
from app.exceptions import CartNotFound, DishNotFound, DishUnavailable, InvalidQuantity, StaleWrite
from app.models.cart import Cart, CartSummary, CartSummaryTable
from app.services.table_session import TableSessionService
from app.utils.locks import KeyedLock

logger = logging.getLogger(__name__)

# Shared by every service that rewrites a client's carts
cart_locks = KeyedLock()


class CartService:
    """
    Cart operations for one client at one table.

    Each mutation re-reads the active cart, applies the change, recomputes the
    total against current dish availability and writes back with a version
    check. A lost check restarts the whole cycle, up to `CART_WRITE_RETRIES`
    times. Writers in this process are additionally serialized per client.
    """

    def __init__(self, carts, catalog, sessions: TableSessionService, locks: Optional[KeyedLock] = None):
        self.carts = carts
        self.catalog = catalog
        self.sessions = sessions
        self.locks = locks or cart_locks

    async def get_active_cart(self, client_id: str, table_id: Optional[str] = None) -> Cart:
        cart = await self.carts.find_active(client_id, table_id)
        if cart is None:
            raise CartNotFound(client_id, table_id)
        # The stored total may still count dishes that went off the menu
        await self.recompute_total(cart)
        return cart

    async def summary(self, client_id: str) -> CartSummary:
        cart = await self.carts.find_active(client_id)
        if cart is None:
            return CartSummary(currency=settings.CURRENCY)

        await self.recompute_total(cart)
        table = await self.sessions.tables.get(cart.tableId)
        return CartSummary(
            itemsCount=cart.item_count,
            total=cart.total,
            currency=cart.currency,
            table=CartSummaryTable(id=table.id, number=table.number) if table else None,
        )

    async def recompute_total(self, cart: Cart) -> float:
        dishes = await self.catalog.find_dishes_by_ids(cart.dish_ids)
        return cart.compute_total(dish.id for dish in dishes if dish.isAvailable)

    async def add_item(self, client_id: str, table_id: str, dish_id: str, quantity: int, note: str = "") -> Cart:
        if quantity < 1:
            raise InvalidQuantity(quantity)

        async with self.locks.hold(client_id):
            table = await self.sessions.get(table_id)

            dish = await self.catalog.find_dish_by_id(dish_id)
            if dish is None:
                raise DishNotFound(dish_id)
            if not dish.isAvailable:
                raise DishUnavailable(dish_id)

            note = (note or "").strip()
            cart = await self._write(
                client_id, table_id,
                lambda c: c.add_item(dish.id, quantity, dish.price, note),
                create=True,
            )

            if not table.isOccupied:
                await self.sessions.ensure_occupied(table_id, client_id)

        logger.info("Dish %s x%s added to cart %s (client %s)", dish_id, quantity, cart.id, client_id)
        return cart

    async def update_item(
        self, client_id: str, table_id: str, dish_id: str, quantity: int, note: Optional[str] = None
    ) -> Cart:
        if quantity < 1:
            raise InvalidQuantity(quantity)
        if note is not None:
            note = note.strip()

        async with self.locks.hold(client_id):
            cart = await self._write(client_id, table_id, lambda c: c.update_item(dish_id, quantity, note))

        logger.info("Dish %s set to x%s in cart %s", dish_id, quantity, cart.id)
        return cart

    async def remove_item(self, client_id: str, table_id: str, dish_id: str) -> Cart:
        """Remove the dish's line. Removing a dish that is not there changes nothing."""
        async with self.locks.hold(client_id):
            cart = await self.get_active_cart(client_id, table_id)
            if cart.find_item(dish_id) is None:
                return cart
            cart = await self._write(client_id, table_id, lambda c: c.remove_item(dish_id))

        logger.info("Dish %s removed from cart %s", dish_id, cart.id)
        return cart

    async def clear(self, client_id: str, table_id: str) -> Cart:
        async with self.locks.hold(client_id):
            cart = await self._write(client_id, table_id, lambda c: c.clear())

        logger.info("Cart %s cleared", cart.id)
        return cart

    async def _deactivate_other_tables(self, client_id: str, table_id: str):
        for other in await self.carts.find_active_for_client(client_id):
            if other.tableId != table_id and await self.carts.deactivate(other.id):
                logger.info("Cart %s deactivated: client %s moved to table %s", other.id, client_id, table_id)

    async def _write(self, client_id: str, table_id: str, mutate: Callable[[Cart], object], create: bool = False) -> Cart:
        retries = settings.CART_WRITE_RETRIES
        cart = None
        for attempt in range(1, retries + 1):
            cart = await self.carts.find_active(client_id, table_id)
            if cart is None:
                if not create:
                    raise CartNotFound(client_id, table_id)
                await self._deactivate_other_tables(client_id, table_id)
                cart = await self.carts.create(
                    Cart(clientId=client_id, tableId=table_id, currency=settings.CURRENCY)
                )
                if cart is None:
                    logger.debug("Lost cart creation race for client %s table %s", client_id, table_id)
                    continue
                logger.info("Cart %s created for client %s at table %s", cart.id, client_id, table_id)

            mutate(cart)
            await self.recompute_total(cart)
            saved = await self.carts.save(cart)
            if saved is not None:
                return saved
            logger.debug("Stale write on cart %s (attempt %s/%s)", cart.id, attempt, retries)

        cart_id = cart.id if cart is not None else f"{client_id}:{table_id}"
        logger.warning("Giving up on cart %s after %s concurrent writes", cart_id, retries)
        raise StaleWrite(cart_id, retries)
