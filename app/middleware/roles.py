from fastapi import Depends
from app.exceptions import Forbidden
from app.middleware.auth import auth_middleware, security
from app.models.user import CurrentUser


def is_owner_or_admin(requester: CurrentUser, owner_id: str) -> bool:
    return requester.is_admin or requester.id == owner_id


def ensure_owner_or_admin(requester: CurrentUser, owner_id: str):
    """Raise Forbidden unless `requester` is `owner_id` or an admin."""
    if not is_owner_or_admin(requester, owner_id):
        raise Forbidden("Accès refusé", details={"requester_id": requester.id, "owner_id": owner_id})


# Dependency functions for FastAPI
async def get_current_user(credentials=Depends(security)) -> CurrentUser:
    """FastAPI dependency to get current authenticated user."""
    return await auth_middleware.get_current_user(credentials)


async def get_current_admin_user(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency to get current admin user."""
    if not current_user.is_admin:
        raise Forbidden("Accès administrateur requis", details={"requester_id": current_user.id})
    return current_user
