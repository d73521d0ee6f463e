"""Identity provider protocol."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Identity:
    """A user as reported by the federated identity provider."""

    uid: str
    email: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class AuthStateChange:
    """Signed-in (identity set) or signed-out (identity None) event."""

    uid: str
    identity: Optional[Identity]

    @property
    def signed_in(self) -> bool:
        return self.identity is not None


AuthStateCallback = Callable[[AuthStateChange], Awaitable[None]]


class IIdentityProvider(Protocol):
    """Protocol for identity providers."""

    async def validate_token(self, token: str) -> Optional[Identity]:
        """
        Validate an ID token.

        Args:
            token: The bearer token to validate

        Returns:
            Identity if valid, None if invalid
        """
        ...

    async def sign_in(self, credential: str) -> Identity:
        """
        Sign a user in with a provider-issued credential.

        Raises:
            AuthFailure: If the provider rejects the credential
        """
        ...

    async def sign_out(self, identity: Identity) -> None:
        """Sign a user out. Signing out twice is a no-op."""
        ...

    def current(self, uid: str) -> Optional[Identity]:
        """Return the signed-in identity for a uid, if any."""
        ...

    def on_auth_state_changed(self, callback: AuthStateCallback) -> Callable[[], None]:
        """
        Subscribe to sign-in/sign-out events.

        Returns:
            A function that removes the subscription
        """
        ...
