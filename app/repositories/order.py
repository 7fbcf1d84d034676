from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from prisma.errors import UniqueViolationError

from app.exceptions import Conflict
from app.models.order import Order, OrderStatus
from app.repositories.base import PrismaRepository, storage_errors, to_json

ORDER_COUNTER = "order"


class OrderRepository(PrismaRepository):

    @staticmethod
    def _history(order: Order):
        return to_json([entry.model_dump(mode="json") for entry in order.history])

    async def next_number(self, prefix: str) -> str:
        """Allocate the next sequential, zero-padded order number."""
        with storage_errors("order.next_number"):
            counter = await self.db.counter.upsert(
                where={"name": ORDER_COUNTER},
                data={
                    "create": {"name": ORDER_COUNTER, "value": 1},
                    "update": {"value": {"increment": 1}},
                }
            )
        return f"{prefix}{counter.value:06d}"

    async def create(self, order: Order) -> Order:
        try:
            with storage_errors("order.create", number=order.number, cart_id=order.cartId):
                record = await self.db.order.create(
                    data={
                        "number": order.number,
                        "clientId": order.clientId,
                        "tableId": order.tableId,
                        "cartId": order.cartId,
                        "menuOfTheDayId": order.menuOfTheDayId,
                        "subtotal": order.subtotal,
                        "tax": order.tax,
                        "total": order.total,
                        "currency": order.currency,
                        "status": order.status.value,
                        "orderedAt": order.orderedAt,
                        "comment": order.comment,
                        "mode": order.mode.value,
                        "items": to_json([item.model_dump() for item in order.items]),
                        "history": self._history(order),
                    }
                )
        except UniqueViolationError:
            raise Conflict("Panier déjà converti en commande", details={"cart_id": order.cartId})
        return Order.model_validate(record)

    async def get(self, order_id: str) -> Optional[Order]:
        with storage_errors("order.get", order_id=order_id):
            record = await self.db.order.find_unique(where={"id": order_id})
        return Order.model_validate(record) if record else None

    async def list_orders(
        self,
        client_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        table_id: Optional[str] = None,
        ordered_from: Optional[datetime] = None,
        ordered_to: Optional[datetime] = None,
        skip: int = 0,
        take: int = 10,
    ) -> Tuple[List[Order], int]:
        """Filtered page of orders, newest first, with the total match count. Date bounds are inclusive."""
        where = {}
        if client_id:
            where["clientId"] = client_id
        if status:
            where["status"] = status.value
        if table_id:
            where["tableId"] = table_id
        if ordered_from or ordered_to:
            where["orderedAt"] = {}
            if ordered_from:
                where["orderedAt"]["gte"] = ordered_from
            if ordered_to:
                where["orderedAt"]["lte"] = ordered_to

        with storage_errors("order.list", **where):
            records = await self.db.order.find_many(
                where=where,
                skip=skip,
                take=take,
                order={"orderedAt": "desc"}
            )
            total = await self.db.order.count(where=where)
        return [Order.model_validate(r) for r in records], total

    async def list_by_statuses(self, statuses: Sequence[OrderStatus]) -> List[Order]:
        with storage_errors("order.list_by_statuses"):
            records = await self.db.order.find_many(
                where={"status": {"in": [s.value for s in statuses]}},
                order={"orderedAt": "asc"}
            )
        return [Order.model_validate(r) for r in records]

    async def update_status(self, order: Order, expected_status: OrderStatus) -> Optional[Order]:
        """Persist `order`'s new status only if the stored one is still `expected_status`."""
        with storage_errors("order.update_status", order_id=order.id):
            count = await self.db.order.update_many(
                where={"id": order.id, "status": expected_status.value},
                data={
                    "status": order.status.value,
                    "history": self._history(order),
                    "confirmedAt": order.confirmedAt,
                    "deliveredAt": order.deliveredAt,
                }
            )
        if count != 1:
            return None
        return await self.get(order.id)
