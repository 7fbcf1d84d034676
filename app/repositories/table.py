from datetime import datetime
from typing import List, Optional, Tuple

from prisma.errors import UniqueViolationError

from app.exceptions import DuplicateTable
from app.models.table import Table
from app.repositories.base import PrismaRepository, storage_errors


class TableRepository(PrismaRepository):

    async def get(self, table_id: str) -> Optional[Table]:
        with storage_errors("table.get", table_id=table_id):
            record = await self.db.table.find_unique(where={"id": table_id})
        return Table.model_validate(record) if record else None

    async def get_by_number(self, restaurant_id: str, number: str) -> Optional[Table]:
        with storage_errors("table.get_by_number", restaurant_id=restaurant_id, number=number):
            record = await self.db.table.find_first(
                where={"restaurantId": restaurant_id, "number": number}
            )
        return Table.model_validate(record) if record else None

    async def list_available(self) -> List[Table]:
        with storage_errors("table.list_available"):
            records = await self.db.table.find_many(
                where={"isOccupied": False},
                order={"number": "asc"}
            )
        return [Table.model_validate(r) for r in records]

    async def list_tables(
        self,
        occupied: Optional[bool] = None,
        skip: int = 0,
        take: int = 10,
    ) -> Tuple[List[Table], int]:
        where = {}
        if occupied is not None:
            where["isOccupied"] = occupied

        with storage_errors("table.list", **where):
            records = await self.db.table.find_many(
                where=where,
                skip=skip,
                take=take,
                order={"number": "asc"}
            )
            total = await self.db.table.count(where=where)
        return [Table.model_validate(r) for r in records], total

    async def create(self, restaurant_id: str, number: str, capacity: int) -> Table:
        try:
            with storage_errors("table.create", restaurant_id=restaurant_id, number=number):
                record = await self.db.table.create(
                    data={
                        "restaurantId": restaurant_id,
                        "number": number,
                        "capacity": capacity,
                    }
                )
        except UniqueViolationError:
            raise DuplicateTable(number)
        return Table.model_validate(record)

    async def update(self, table_id: str, data: dict) -> Optional[Table]:
        """Apply `data` to the table. None when it does not exist."""
        try:
            with storage_errors("table.update", table_id=table_id):
                record = await self.db.table.update(where={"id": table_id}, data=data)
        except UniqueViolationError:
            raise DuplicateTable(data.get("number"))
        return Table.model_validate(record) if record else None

    async def delete_if_free(self, table_id: str) -> bool:
        with storage_errors("table.delete", table_id=table_id):
            count = await self.db.table.delete_many(
                where={"id": table_id, "isOccupied": False}
            )
        return count == 1

    async def claim(self, table_id: str, client_id: str, at: datetime) -> bool:
        """Flip a free table to occupied. False when it was not free (or is missing)."""
        with storage_errors("table.claim", table_id=table_id, client_id=client_id):
            count = await self.db.table.update_many(
                where={"id": table_id, "isOccupied": False},
                data={"isOccupied": True, "occupiedAt": at, "currentClientId": client_id}
            )
        return count == 1

    async def release(self, table_id: str) -> bool:
        """Flip an occupied table to free. False when it was not occupied (or is missing)."""
        with storage_errors("table.release", table_id=table_id):
            count = await self.db.table.update_many(
                where={"id": table_id, "isOccupied": True},
                data={"isOccupied": False, "occupiedAt": None, "currentClientId": None}
            )
        return count == 1

    async def set_qr_code(self, table_id: str, token: str) -> Optional[Table]:
        with storage_errors("table.set_qr_code", table_id=table_id):
            record = await self.db.table.update(
                where={"id": table_id},
                data={"qrCode": token}
            )
        return Table.model_validate(record) if record else None
