from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# Catalog records consumed by the cart and conversion services.
class Dish(BaseModel):
    id: str
    name: str
    price: float = Field(..., ge=0)
    isAvailable: bool = True

    class Config:
        from_attributes = True


class MenuOfTheDay(BaseModel):
    id: str
    title: str
    date: Optional[datetime] = None
    isActive: bool = True
    dishIds: List[str] = []

    class Config:
        from_attributes = True
