from typing import List, Optional

from prisma.errors import UniqueViolationError

from app.models.cart import Cart
from app.repositories.base import PrismaRepository, storage_errors, to_json


def active_key(client_id: str, table_id: str) -> str:
    return f"{client_id}:{table_id}"


class CartRepository(PrismaRepository):
    """
    Carts are single documents; every write is a compare-and-swap on `version`
    and the unique `activeKey` keeps one active cart per (client, table).
    """

    @staticmethod
    def _items(cart: Cart):
        return to_json([item.model_dump() for item in cart.items])

    async def get(self, cart_id: str) -> Optional[Cart]:
        with storage_errors("cart.get", cart_id=cart_id):
            record = await self.db.cart.find_unique(where={"id": cart_id})
        return Cart.model_validate(record) if record else None

    async def find_active(self, client_id: str, table_id: Optional[str] = None) -> Optional[Cart]:
        where = {"clientId": client_id, "isActive": True}
        if table_id:
            where["tableId"] = table_id
        with storage_errors("cart.find_active", client_id=client_id, table_id=table_id):
            record = await self.db.cart.find_first(where=where, order={"updatedAt": "desc"})
        return Cart.model_validate(record) if record else None

    async def find_active_for_client(self, client_id: str) -> List[Cart]:
        with storage_errors("cart.find_active_for_client", client_id=client_id):
            records = await self.db.cart.find_many(where={"clientId": client_id, "isActive": True})
        return [Cart.model_validate(r) for r in records]

    async def create(self, cart: Cart) -> Optional[Cart]:
        """Insert a new active cart. None when another one won the race for the same key."""
        try:
            with storage_errors("cart.create", client_id=cart.clientId, table_id=cart.tableId):
                record = await self.db.cart.create(
                    data={
                        "clientId": cart.clientId,
                        "tableId": cart.tableId,
                        "activeKey": active_key(cart.clientId, cart.tableId),
                        "items": self._items(cart),
                        "total": cart.total,
                        "currency": cart.currency,
                    }
                )
        except UniqueViolationError:
            return None
        return Cart.model_validate(record)

    async def save(self, cart: Cart) -> Optional[Cart]:
        """Write items and total if nobody else wrote since `cart.version` was read."""
        with storage_errors("cart.save", cart_id=cart.id):
            count = await self.db.cart.update_many(
                where={"id": cart.id, "version": cart.version, "isActive": True},
                data={
                    "items": self._items(cart),
                    "total": cart.total,
                    "version": {"increment": 1},
                }
            )
        if count != 1:
            return None
        return await self.get(cart.id)

    async def deactivate(self, cart_id: str) -> bool:
        with storage_errors("cart.deactivate", cart_id=cart_id):
            count = await self.db.cart.update_many(
                where={"id": cart_id, "isActive": True},
                data={"isActive": False, "activeKey": None}
            )
        return count == 1
