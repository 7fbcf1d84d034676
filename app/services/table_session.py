import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from app.core.config import settings
from app.exceptions import (
    AlreadyFree, AlreadyOccupied, DuplicateTable, Forbidden, TableNotFound, TableOccupied
)
from app.models.table import Table, TableCreate, TableListResponse, TableUpdate
from app.models.user import CurrentUser
from app.services.qr_codec import QRCodec, QRValidation

logger = logging.getLogger(__name__)


class TableSessionService:
    """
    Owns the occupancy of physical tables.

    Every transition is a single conditional write on the occupancy flag, so
    two clients racing for the same free table cannot both win.
    """

    def __init__(self, tables, codec: Optional[QRCodec] = None):
        self.tables = tables
        self.codec = codec or QRCodec()

    async def get(self, table_id: str) -> Table:
        table = await self.tables.get(table_id)
        if table is None:
            raise TableNotFound(table_id)
        return table

    async def list_available(self) -> List[Table]:
        return await self.tables.list_available()

    async def list_tables(
        self, available: Optional[bool] = None, page: int = 1, limit: int = 10
    ) -> TableListResponse:
        """All tables ordered by number, optionally only the free (or only the occupied) ones."""
        occupied = None if available is None else not available
        tables, total = await self.tables.list_tables(occupied=occupied, skip=(page - 1) * limit, take=limit)
        return TableListResponse(
            tables=tables,
            total=total,
            currentPage=page,
            totalPages=math.ceil(total / limit) if limit else 0,
        )

    async def occupy(self, table_id: str, client_id: str) -> Table:
        claimed = await self.tables.claim(table_id, client_id, datetime.now(timezone.utc))
        if not claimed:
            # Lost the swap: tell a missing table apart from an occupied one
            await self.get(table_id)
            raise AlreadyOccupied(table_id)

        logger.info("Table %s occupied by client %s", table_id, client_id)
        return await self.get(table_id)

    async def free(self, table_id: str, requester: Optional[CurrentUser] = None) -> Table:
        """
        Release a table. With a requester, only an admin or the current
        occupant may do it.
        """
        table = await self.get(table_id)
        if requester is not None and not requester.is_admin and table.isOccupied \
                and table.currentClientId != requester.id:
            raise Forbidden("Accès refusé", details={"table_id": table_id})

        released = await self.tables.release(table_id)
        if not released:
            await self.get(table_id)
            raise AlreadyFree(table_id)

        logger.info("Table %s freed", table_id)
        return await self.get(table_id)

    async def ensure_occupied(self, table_id: str, client_id: str) -> bool:
        """Occupy the table for `client_id` if it is free. Never raises on a lost race."""
        table = await self.get(table_id)
        if table.isOccupied:
            return False
        claimed = await self.tables.claim(table_id, client_id, datetime.now(timezone.utc))
        if claimed:
            logger.info("Table %s occupied by client %s", table_id, client_id)
        else:
            logger.debug("Table %s was taken concurrently; leaving occupancy as is", table_id)
        return claimed

    async def generate_token(self, table_id: str, table_number: str) -> Tuple[Table, str]:
        """Encode a fresh token for the table and persist it. Returns (table, image)."""
        token, image = self.codec.encode(table_id, table_number)
        table = await self.tables.set_qr_code(table_id, token)
        if table is None:
            raise TableNotFound(table_id)
        return table, image

    async def get_qr_code(self, table_id: str) -> Tuple[str, str]:
        """Return the stored token and its image, generating one if the table has none."""
        table = await self.get(table_id)
        if not table.qrCode:
            table, image = await self.generate_token(table.id, table.number)
            return table.qrCode, image
        return table.qrCode, self.codec.render(table.qrCode)

    async def regenerate_qr_code(self, table_id: str) -> Tuple[str, str]:
        """Replace the stored token with a fresh one, restarting its expiry window."""
        table = await self.get(table_id)
        table, image = await self.generate_token(table.id, table.number)
        logger.info("QR code regenerated for table %s", table.id)
        return table.qrCode, image

    async def create(self, data: TableCreate) -> Tuple[Table, str]:
        restaurant_id = data.restaurantId or settings.DEFAULT_RESTAURANT_ID
        if await self.tables.get_by_number(restaurant_id, data.number):
            raise DuplicateTable(data.number)

        table = await self.tables.create(restaurant_id, data.number, data.capacity)
        table, image = await self.generate_token(table.id, table.number)
        logger.info("Table %s created (number %s)", table.id, table.number)
        return table, image

    async def update(self, table_id: str, data: TableUpdate) -> Table:
        """
        Change number and/or capacity. A new number must be free in the
        restaurant; a renumbered table gets a fresh QR token.
        """
        table = await self.get(table_id)
        changes = data.model_dump(exclude_none=True)
        if not changes:
            return table

        renumbered = "number" in changes and changes["number"] != table.number
        if renumbered:
            existing = await self.tables.get_by_number(table.restaurantId, changes["number"])
            if existing and existing.id != table.id:
                raise DuplicateTable(changes["number"])

        updated = await self.tables.update(table_id, changes)
        if updated is None:
            raise TableNotFound(table_id)
        if renumbered:
            updated, _ = await self.generate_token(updated.id, updated.number)

        logger.info("Table %s updated: %s", table_id, changes)
        return updated

    async def delete(self, table_id: str):
        await self.get(table_id)
        if not await self.tables.delete_if_free(table_id):
            # Re-check: the table may have vanished rather than become occupied
            await self.get(table_id)
            raise TableOccupied(table_id)
        logger.info("Table %s deleted", table_id)

    async def validate_token(self, token: str) -> Tuple[QRValidation, Optional[Table]]:
        """Validate a scanned token, then resolve the table it names."""
        result = self.codec.validate(token)
        if not result.valid:
            return result, None
        return result, await self.get(result.tableId)
