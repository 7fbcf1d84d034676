from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from prisma import Prisma

# Global database connection
db: Optional["Prisma"] = None


async def connect_db():
    """Connect to the database."""
    global db
    if db is None:
        # The generated client only exists after `prisma generate`
        from prisma import Prisma

        db = Prisma()
        await db.connect()


async def disconnect_db():
    """Disconnect from the database."""
    global db
    if db is not None:
        await db.disconnect()
        db = None


def get_db() -> "Prisma":
    """Get the database connection."""
    if db is None:
        raise RuntimeError("Database not connected. Call connect_db() first.")
    return db
