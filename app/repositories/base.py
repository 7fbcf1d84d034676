import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prisma.errors import PrismaError, UniqueViolationError

from app.exceptions import Internal

if TYPE_CHECKING:
    from prisma import Json

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str, **context):
    """
    Log Prisma failures with their context and surface an opaque Internal error.

    Unique violations pass through untouched; repositories translate them into
    domain conflicts.
    """
    try:
        yield
    except UniqueViolationError:
        raise
    except PrismaError as e:
        logger.exception("Storage failure during %s %s", operation, context)
        raise Internal(details={"operation": operation, **context}) from e


def to_json(value) -> "Json":
    """Wrap `value` for a Json column."""
    # Generated along with the client by `prisma generate`
    from prisma import Json

    return Json(value)


class PrismaRepository:
    """Base class for repositories wrapping the Prisma client."""

    def __init__(self, db):
        self.db = db
