from enum import Enum
from pydantic import BaseModel


class UserRole(str, Enum):
    """User roles carried in the access token."""
    CLIENT = "client"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """Authenticated requester resolved from the bearer token."""
    id: str
    role: UserRole = UserRole.CLIENT

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
