from pydantic import BaseModel, Field
from typing import Optional, List, Iterable
from datetime import datetime

from app.exceptions import InvalidQuantity, ItemNotFound


class CartItem(BaseModel):
    dishId: str
    quantity: int = Field(..., ge=1)
    unitPrice: float = Field(..., ge=0)
    note: str = ""


class Cart(BaseModel):
    """
    Active selection of a client at a table.

    `total` is derived: callers must run `compute_total` with the set of
    currently available dishes before trusting it.
    """
    id: Optional[str] = None
    clientId: str
    tableId: str
    items: List[CartItem] = []
    total: float = 0
    currency: str = "FCFA"
    isActive: bool = True
    version: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def dish_ids(self) -> List[str]:
        return [item.dishId for item in self.items]

    def find_item(self, dish_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.dishId == dish_id:
                return item
        return None

    def add_item(self, dish_id: str, quantity: int, unit_price: float, note: str = "") -> CartItem:
        """Merge into the existing line for the dish, or append a new one."""
        if quantity < 1:
            raise InvalidQuantity(quantity)

        item = self.find_item(dish_id)
        if item is not None:
            item.quantity += quantity
            if note:
                item.note = note
            return item

        item = CartItem(dishId=dish_id, quantity=quantity, unitPrice=unit_price, note=note or "")
        self.items.append(item)
        return item

    def update_item(self, dish_id: str, quantity: int, note: Optional[str] = None) -> CartItem:
        if quantity < 1:
            raise InvalidQuantity(quantity)

        item = self.find_item(dish_id)
        if item is None:
            raise ItemNotFound(dish_id)

        item.quantity = quantity
        if note is not None:
            item.note = note
        return item

    def remove_item(self, dish_id: str) -> bool:
        """Drop the line for the dish. Returns False when it was not there."""
        remaining = [item for item in self.items if item.dishId != dish_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def clear(self):
        self.items = []
        self.total = 0

    def compute_total(self, available_dish_ids: Iterable[str]) -> float:
        """Sum quantity x unit price over lines whose dish is still orderable."""
        available = set(available_dish_ids)
        self.total = round(sum(
            item.quantity * item.unitPrice
            for item in self.items
            if item.dishId in available
        ), 2)
        return self.total


# Request bodies
class AddItemRequest(BaseModel):
    dishId: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    tableId: str = Field(..., min_length=1)
    note: str = Field("", max_length=500)


class UpdateItemRequest(BaseModel):
    dishId: str = Field(..., min_length=1)
    # Range is checked by the cart so the caller gets "Quantité invalide"
    quantity: int
    tableId: str = Field(..., min_length=1)
    note: Optional[str] = Field(None, max_length=500)


class CartSummaryTable(BaseModel):
    id: str
    number: str


class CartSummary(BaseModel):
    itemsCount: int = 0
    total: float = 0
    currency: str = "FCFA"
    table: Optional[CartSummaryTable] = None
