"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTIdentityProvider
from infrastructure.auth.provider import Identity

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton identity provider
_identity_provider: JWTIdentityProvider | None = None


def get_identity_provider() -> JWTIdentityProvider:
    """Get or create the identity provider singleton."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = JWTIdentityProvider()
    return _identity_provider


async def get_bearer_credential(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
) -> str:
    """Raw bearer token, used as the sign-in credential."""
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )
    return credentials.credentials


async def get_current_identity(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    identity_provider: JWTIdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """
    Dependency to get the identity behind a valid bearer token.

    Raises:
        AuthenticationError: If no token provided or token is invalid
    """
    if not credentials:
        raise AuthenticationError(
            message="Authorization header required",
            error_code=ErrorCode.UNAUTHORIZED,
        )

    identity = await identity_provider.validate_token(credentials.credentials)

    if not identity:
        raise AuthenticationError(
            message="Invalid or expired token",
            error_code=ErrorCode.INVALID_TOKEN,
        )

    return identity


async def get_signed_in_identity(
    identity: Annotated[Identity, Depends(get_current_identity)],
    identity_provider: JWTIdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """
    Dependency requiring a valid token whose subject has signed in.

    Raises:
        AuthenticationError: If the user signed out or never signed in
    """
    if identity_provider.current(identity.uid) is None:
        raise AuthenticationError(
            message="Sign in required",
            error_code=ErrorCode.NOT_SIGNED_IN,
        )
    return identity


# Type aliases for convenience in route handlers
BearerCredential = Annotated[str, Depends(get_bearer_credential)]
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
SignedInIdentity = Annotated[Identity, Depends(get_signed_in_identity)]
