from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class TableBase(BaseModel):
    number: str = Field(..., min_length=1, max_length=10)
    capacity: int = Field(..., ge=1, le=20)


class TableCreate(TableBase):
    restaurantId: Optional[str] = None


class TableUpdate(BaseModel):
    number: Optional[str] = Field(None, min_length=1, max_length=10)
    capacity: Optional[int] = Field(None, ge=1, le=20)


class Table(TableBase):
    id: str
    restaurantId: str
    isOccupied: bool = False
    occupiedAt: Optional[datetime] = None
    currentClientId: Optional[str] = None
    qrCode: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailableTable(BaseModel):
    id: str
    number: str
    capacity: int

    class Config:
        from_attributes = True


class TableListResponse(BaseModel):
    tables: List[Table]
    total: int
    currentPage: int
    totalPages: int


class TableWithQRCode(BaseModel):
    table: Table
    qrCodeImage: str


class TableQRCode(BaseModel):
    qrCode: str
    qrCodeImage: str


class OccupyRequest(BaseModel):
    # Only admins may occupy on behalf of another client
    clientId: Optional[str] = None


class QRValidateRequest(BaseModel):
    qrToken: str = Field(..., min_length=1)


class QRValidateResponse(BaseModel):
    tableId: str
    tableNumber: str
    capacity: int
    occupied: bool
