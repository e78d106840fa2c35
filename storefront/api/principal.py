"""Caller identity for API requests.

Bearer tokens are HS256 JWTs issued by the identity provider. The ``sub``
claim carries the numeric user id and ``role`` the caller role. Requests
without a token are served as an anonymous shopper.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt

from storefront.domain.principal import Principal, Role
from storefront.infrastructure.config import settings


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be turned into a principal."""


def decode_principal(token: str) -> Principal:
    """Decode a bearer token into a principal.

    Args:
        token: Encoded JWT.

    Returns:
        Principal with the token's identity and role.

    Raises:
        InvalidTokenError: If the token is invalid, expired, or has no
            numeric subject.
    """
    try:
        claims = jwt.decode(token, settings.auth_secret, algorithms=[settings.auth_algorithm])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e

    subject = claims.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as e:
        raise InvalidTokenError(f"Invalid subject claim: {subject!r}") from e

    return Principal(id=user_id, role=Role.parse(claims.get("role")))


def encode_principal(
    user_id: int,
    role: Role = Role.SHOPPER,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Issue a bearer token for a principal (development and tests).

    Args:
        user_id: Numeric user identity.
        role: Caller role.
        expires_in: Token lifetime.

    Returns:
        Encoded JWT.
    """
    now = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "role": role.value,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, settings.auth_secret, algorithm=settings.auth_algorithm)


# ============================================================================
# Dependencies
# ============================================================================


def get_principal(request: Request) -> Principal:
    """Get the principal resolved by PrincipalMiddleware."""
    return getattr(request.state, "principal", None) or Principal.anonymous()


def require_admin(
    principal: Annotated[Principal, Depends(get_principal)],
) -> Principal:
    """Allow only admins through.

    Raises:
        HTTPException: 401 for anonymous callers, 403 for non-admins.
    """
    if not principal.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "UNAUTHORIZED",
                "message": "Authentication required",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error_code": "FORBIDDEN",
                "message": "Admin role required",
            },
        )
    return principal
