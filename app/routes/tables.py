from fastapi import APIRouter, status, Depends, Body, Query
from typing import List, Optional
from app.core.dependencies import get_table_sessions
from app.exceptions import ValidationError
from app.middleware.roles import get_current_admin_user, get_current_user, ensure_owner_or_admin
from app.models.table import (
    AvailableTable, OccupyRequest, QRValidateRequest, QRValidateResponse,
    Table, TableCreate, TableListResponse, TableQRCode, TableUpdate, TableWithQRCode
)
from app.models.user import CurrentUser
from app.services.table_session import TableSessionService


router = APIRouter(prefix="/table", tags=["Tables"])


@router.get("/", response_model=TableListResponse)
async def list_tables(
    available: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: CurrentUser = Depends(get_current_admin_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """List tables by number, optionally filtered on availability (Admin only)."""
    return await sessions.list_tables(available=available, page=page, limit=limit)


@router.get("/available", response_model=List[AvailableTable])
async def get_available_tables(sessions: TableSessionService = Depends(get_table_sessions)):
    """List free tables (public endpoint)."""
    tables = await sessions.list_available()
    return [AvailableTable.model_validate(table) for table in tables]


@router.post("/validate-qr", response_model=QRValidateResponse)
async def validate_qr_code(
    request: QRValidateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Validate a scanned table QR code."""
    result, table = await sessions.validate_token(request.qrToken)
    if not result.valid:
        raise ValidationError(result.reason, details={"qr_token": request.qrToken})

    return QRValidateResponse(
        tableId=table.id,
        tableNumber=table.number,
        capacity=table.capacity,
        occupied=table.isOccupied
    )


@router.get("/{table_id}", response_model=Table)
async def get_table(table_id: str, sessions: TableSessionService = Depends(get_table_sessions)):
    """Get table by ID (public endpoint)."""
    return await sessions.get(table_id)


@router.post("/", response_model=TableWithQRCode, status_code=status.HTTP_201_CREATED)
async def create_table(
    table_data: TableCreate,
    current_user: CurrentUser = Depends(get_current_admin_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Create a table and its QR code (Admin only)."""
    table, image = await sessions.create(table_data)
    return TableWithQRCode(table=table, qrCodeImage=image)


@router.put("/{table_id}", response_model=Table)
async def update_table(
    table_id: str,
    table_data: TableUpdate,
    current_user: CurrentUser = Depends(get_current_admin_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Change table number or capacity (Admin only)."""
    return await sessions.update(table_id, table_data)


@router.delete("/{table_id}")
async def delete_table(
    table_id: str,
    current_user: CurrentUser = Depends(get_current_admin_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Delete a free table (Admin only)."""
    await sessions.delete(table_id)
    return {"message": "Table supprimée"}


@router.get("/{table_id}/qrcode", response_model=TableQRCode)
async def get_table_qr_code(
    table_id: str,
    current_user: CurrentUser = Depends(get_current_admin_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Get the table QR code, generating it on first request (Admin only)."""
    token, image = await sessions.get_qr_code(table_id)
    return TableQRCode(qrCode=token, qrCodeImage=image)


@router.post("/{table_id}/qrcode/regenerate", response_model=TableQRCode)
async def regenerate_table_qr_code(
    table_id: str,
    current_user: CurrentUser = Depends(get_current_admin_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Issue a fresh QR code for the table, replacing the stored one (Admin only)."""
    token, image = await sessions.regenerate_qr_code(table_id)
    return TableQRCode(qrCode=token, qrCodeImage=image)


@router.post("/{table_id}/occupy", response_model=Table)
async def occupy_table(
    table_id: str,
    request: Optional[OccupyRequest] = Body(None),
    current_user: CurrentUser = Depends(get_current_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Occupy a free table. Admins may occupy on behalf of a client."""
    client_id = request.clientId if request and request.clientId else current_user.id
    ensure_owner_or_admin(current_user, client_id)
    return await sessions.occupy(table_id, client_id)


@router.post("/{table_id}/free", response_model=Table)
async def free_table(
    table_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    sessions: TableSessionService = Depends(get_table_sessions)
):
    """Free a table (current occupant or Admin)."""
    return await sessions.free(table_id, current_user)
