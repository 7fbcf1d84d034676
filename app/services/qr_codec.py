"""
Table QR codes.

A table token is a URL pointing at the client menu page whose query string
carries `type=table&id=<tableId>&number=<tableNumber>&timestamp=<epoch-ms>`.
Validation is purely syntactic and temporal; resolving the table id is the
caller's job.
"""
import base64
import io
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlsplit

import qrcode

from app.core.config import settings
from app.exceptions import MalformedToken

logger = logging.getLogger(__name__)

TOKEN_TYPE_TABLE = "table"

REASON_INVALID = "QR code invalide"
REASON_MALFORMED = "Format de QR code invalide"
REASON_EXPIRED = "QR code expiré"


@dataclass(frozen=True)
class QRPayload:
    type: Optional[str]
    tableId: Optional[str]
    tableNumber: Optional[str]
    timestamp: Optional[int]


@dataclass(frozen=True)
class QRValidation:
    valid: bool
    tableId: Optional[str] = None
    tableNumber: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, table_id: str, table_number: str) -> "QRValidation":
        return cls(valid=True, tableId=table_id, tableNumber=table_number)

    @classmethod
    def rejected(cls, reason: str) -> "QRValidation":
        return cls(valid=False, reason=reason)


def _now_ms() -> int:
    return int(time.time() * 1000)


class QRCodec:
    """Encode, decode and validate table tokens."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        expiry_enabled: Optional[bool] = None,
        max_age_hours: Optional[int] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self.base_url = base_url or settings.QR_BASE_URL
        self.expiry_enabled = settings.QR_EXPIRY_ENABLED if expiry_enabled is None else expiry_enabled
        hours = settings.QR_MAX_AGE_HOURS if max_age_hours is None else max_age_hours
        self.max_age_ms = hours * 60 * 60 * 1000
        self.clock = clock

    def build_token(self, table_id: str, table_number: str, timestamp: Optional[int] = None) -> str:
        query = urlencode({
            "type": TOKEN_TYPE_TABLE,
            "id": table_id,
            "number": table_number,
            "timestamp": self.clock() if timestamp is None else timestamp,
        })
        return f"{self.base_url}?{query}"

    @staticmethod
    def render(token: str) -> str:
        """Render `token` as a PNG data URL."""
        qr = qrcode.QRCode(
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=1,
        )
        qr.add_data(token)
        qr.make(fit=True)
        img = qr.make_image(fill_color="#000000", back_color="#FFFFFF")

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")

    def encode(self, table_id: str, table_number: str) -> Tuple[str, str]:
        token = self.build_token(table_id, table_number)
        image = self.render(token)
        logger.info("QR code generated for table %s (number %s)", table_id, table_number)
        return token, image

    def decode(self, token: str) -> QRPayload:
        if not token or not isinstance(token, str):
            raise MalformedToken("empty token")

        parts = urlsplit(token.strip())
        if not parts.scheme or not parts.netloc:
            raise MalformedToken("not an absolute URL")

        params = parse_qs(parts.query)

        def first(name: str) -> Optional[str]:
            values = params.get(name)
            return values[0] if values else None

        raw_timestamp = first("timestamp")
        timestamp = None
        if raw_timestamp is not None:
            try:
                timestamp = int(raw_timestamp)
            except ValueError:
                raise MalformedToken(f"timestamp is not an integer: {raw_timestamp!r}")

        return QRPayload(
            type=first("type"),
            tableId=first("id"),
            tableNumber=first("number"),
            timestamp=timestamp,
        )

    def validate(self, token: str) -> QRValidation:
        try:
            payload = self.decode(token)
        except MalformedToken as e:
            logger.info("QR code rejected: %s", e.reason)
            return QRValidation.rejected(REASON_MALFORMED)

        if payload.type != TOKEN_TYPE_TABLE or not payload.tableId or not payload.tableNumber:
            logger.info("QR code rejected: missing fields (%s)", payload)
            return QRValidation.rejected(REASON_INVALID)

        if self.expiry_enabled:
            if payload.timestamp is None:
                logger.info("QR code rejected: no timestamp for table %s", payload.tableId)
                return QRValidation.rejected(REASON_INVALID)
            age = self.clock() - payload.timestamp
            if age > self.max_age_ms:
                logger.info("QR code expired for table %s (age %sms)", payload.tableId, age)
                return QRValidation.rejected(REASON_EXPIRED)

        return QRValidation.ok(payload.tableId, payload.tableNumber)
