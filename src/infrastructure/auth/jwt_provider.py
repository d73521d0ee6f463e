"""JWT identity provider implementation.

Verifies federated ID tokens (RS256/ES256 via the provider's JWKS, e.g.
Google) and locally-created tokens (HS256 for development and tests), and
keeps track of who is signed in so the view layer can react to
sign-in/sign-out events.

Google ID token payload structure:
    {
        "iss": "https://accounts.google.com",
        "aud": "<client-id>.apps.googleusercontent.com",
        "sub": "110169484474386276334",
        "email": "user@example.com",
        "name": "Jane Doe",
        "exp": 1234567890
    }
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import httpx
from jose import JWTError, jwk, jwt

from core.config import settings
from core.exceptions import AuthFailure
from infrastructure.auth.provider import AuthStateCallback, AuthStateChange, Identity

logger = logging.getLogger(__name__)

ASYMMETRIC_ALGORITHMS = ("RS256", "ES256")

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache the identity provider's JWKS keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.identity_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
            # Build a kid -> key mapping
            _jwks_cache = {}
            for key_data in jwks_data.get("keys", []):
                kid = key_data.get("kid")
                if kid:
                    _jwks_cache[kid] = key_data
            logger.info("Fetched %d JWKS keys from %s", len(_jwks_cache), jwks_url)
            return _jwks_cache
    except Exception:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}


class JWTIdentityProvider:
    """JWT-based identity provider.

    Validates provider-issued (RS256/ES256) and locally-created (HS256)
    tokens, and publishes ``AuthStateChange`` events on sign-in/sign-out.
    """

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        issuer: str = settings.identity_issuer,
        audience: str = settings.identity_audience,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._issuer = issuer
        self._audience = audience
        self._signed_in: dict[str, Identity] = {}
        self._listeners: list[AuthStateCallback] = []

    async def validate_token(self, token: str) -> Optional[Identity]:
        """
        Validate a JWT and extract the identity.

        Detects the signing algorithm from the token header:
        - RS256/ES256 (identity provider): validates via JWKS public key
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            Identity if valid, None if invalid or expired
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg in ASYMMETRIC_ALGORITHMS:
                payload = await self._validate_asymmetric(token, header)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )

            if payload is None:
                return None

            uid = payload.get("sub")
            email = payload.get("email")

            if not uid or not email:
                return None

            if self._issuer and payload.get("iss") != self._issuer:
                return None

            return Identity(
                uid=str(uid),
                email=email,
                display_name=payload.get("name"),
            )

        except JWTError:
            return None

    async def _validate_asymmetric(self, token: str, header: dict) -> Optional[dict]:
        """Validate an RS256/ES256-signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None
        # Provider tokens must name this client in aud
        if not self._audience:
            logger.warning("Rejecting %s token: no identity audience configured", header.get("alg"))
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Key not found, try refetching JWKS (key rotation)
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        alg = header["alg"]
        public_key = jwk.construct(key_data, algorithm=alg)
        return jwt.decode(
            token,
            public_key,
            algorithms=[alg],
            audience=self._audience,
        )

    async def sign_in(self, credential: str) -> Identity:
        """Verify a credential and mark its subject as signed in."""
        identity = await self.validate_token(credential)
        if identity is None:
            raise AuthFailure()

        self._signed_in[identity.uid] = identity
        await self._emit(AuthStateChange(uid=identity.uid, identity=identity))
        return identity

    async def sign_out(self, identity: Identity) -> None:
        """Forget a signed-in identity and announce it."""
        self._signed_in.pop(identity.uid, None)
        await self._emit(AuthStateChange(uid=identity.uid, identity=None))

    def current(self, uid: str) -> Optional[Identity]:
        return self._signed_in.get(uid)

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _emit(self, change: AuthStateChange) -> None:
        for listener in list(self._listeners):
            await listener(change)

    def create_token(self, identity: Identity) -> str:
        """
        Create an HS256 JWT for an identity (local development and tests).

        Args:
            identity: The identity to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": identity.uid,
            "email": identity.email,
            "name": identity.display_name,
            "exp": expire,
        }
        if self._issuer:
            payload["iss"] = self._issuer

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
