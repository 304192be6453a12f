"""
Authentication dependencies for the catalog backend
Verifies bearer JWTs issued by the auth service and provides user context

Token issuance lives with the user service; this module only verifies.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from app.core.config import settings
from app.core.errors import UnauthenticatedError, UnauthorizedError


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: str
    email: str
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def verify_token(token: Optional[str]) -> Optional[TokenUser]:
    """
    Verify a bearer token and return the identity it carries.

    Token payload:
    {
        "id": "64f1c0...",
        "role": "customer" | "admin",
        "email": "someone@example.com",
        "exp": 1234567890
    }

    Returns None for a missing, expired, malformed or incomplete token.
    Callers decide whether "no identity" is an error.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        return None

    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        return None

    return TokenUser(
        id=str(user_id),
        email=email,
        role=payload.get("role", "customer"),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that requires a valid bearer token.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    user = verify_token(credentials.credentials if credentials else None)
    if user is None:
        raise UnauthenticatedError("Authentication required")
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """
    Optional authentication - returns None if no valid token provided.

    Anonymous catalog browsing goes through this dependency.
    """
    return verify_token(credentials.credentials if credentials else None)


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/products/{product_id}")
        async def delete_product(
            product_id: str,
            user: TokenUser = Depends(require_role("admin"))
        ):
            pass
    """
    async def role_checker(
        user: TokenUser = Depends(get_current_user)
    ) -> TokenUser:
        # Role hierarchy: admin > customer
        role_hierarchy = {
            "admin": 2,
            "customer": 1,
        }

        user_level = role_hierarchy.get(user.role, 0)
        required_level = role_hierarchy.get(required_role, 0)

        if user_level < required_level:
            raise UnauthorizedError(
                f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


require_admin = require_role("admin")
