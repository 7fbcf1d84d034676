from pydantic import BaseModel, Field
from typing import Optional, List, Tuple
from datetime import datetime
from enum import Enum


class FulfillmentMode(str, Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Order Item Models
class OrderItem(BaseModel):
    """Line copied from the cart at conversion time. Never edited afterwards."""
    dishId: str
    name: str
    quantity: int = Field(..., ge=1)
    unitPrice: float = Field(..., ge=0)
    note: str = ""

    class Config:
        frozen = True


class StatusChange(BaseModel):
    status: OrderStatus
    timestamp: datetime
    comment: str = ""


# Order Models
class Order(BaseModel):
    id: Optional[str] = None
    number: str
    clientId: str
    tableId: str
    cartId: Optional[str] = None
    menuOfTheDayId: Optional[str] = None
    subtotal: float
    tax: float
    total: float
    currency: str = "FCFA"
    status: OrderStatus = OrderStatus.PENDING
    orderedAt: datetime
    confirmedAt: Optional[datetime] = None
    deliveredAt: Optional[datetime] = None
    comment: str = ""
    mode: FulfillmentMode = FulfillmentMode.DINE_IN
    items: Tuple[OrderItem, ...]
    history: List[StatusChange] = []

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    orders: List[Order]
    total: int
    currentPage: int
    totalPages: int


# Request bodies
class ConvertCartRequest(BaseModel):
    tableId: str = Field(..., min_length=1)
    mode: FulfillmentMode = FulfillmentMode.DINE_IN
    comment: str = Field("", max_length=500)
    menuOfTheDayId: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    # Kept as a plain string so unknown labels surface as "Statut invalide"
    status: str = Field(..., min_length=1)
    comment: Optional[str] = Field(None, max_length=500)
