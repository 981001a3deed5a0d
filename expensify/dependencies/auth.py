"""Authentication dependencies for protected routes."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from expensify.exceptions import AuthError
from expensify.services.identity_provider import (
    IdentityProvider,
    Principal,
    get_identity_provider,
)

security = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
) -> Principal:
    """
    Resolve the bearer credential to the calling principal.

    Usage:
        @router.get("/protected")
        def protected_route(principal: Principal = Depends(get_current_principal)):
            return {"owner_id": principal.id}
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("User not authenticated")

    principal = identity_provider.resolve_principal(credentials.credentials)
    if principal is None:
        raise AuthError("Invalid or expired token")

    return principal
