from fastapi import HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from pydantic import ValidationError
from app.auth.jwt import verify_token
from app.models.user import CurrentUser


security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class AuthMiddleware:
    """
    Resolves the bearer token into a CurrentUser.

    Users are managed elsewhere; the token's `sub` and `role` claims are
    trusted as issued.
    """

    @staticmethod
    async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials]) -> CurrentUser:
        """Get current user from JWT token (required - raises exception if invalid)."""
        if not credentials:
            raise _unauthorized("Non authentifié")

        payload = verify_token(credentials.credentials)
        if payload is None or payload.get("sub") is None:
            raise _unauthorized("Token invalide")

        try:
            return CurrentUser(id=str(payload["sub"]), role=payload.get("role", "client"))
        except ValidationError:
            raise _unauthorized("Token invalide")


# Instance of auth middleware
auth_middleware = AuthMiddleware()
