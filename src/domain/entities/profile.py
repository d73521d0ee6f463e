"""User profile domain entity."""

from dataclasses import dataclass

from domain.entities.server_value import ServerTimestamp


@dataclass
class UserProfile:
    """One profile per authenticated identity, stored at ``users/{uid}``.

    A stored profile always has ``profile_complete`` set; there is no draft
    state. ``joined_date`` is written as ``ServerValue.TIMESTAMP`` and read
    back as epoch milliseconds.
    """

    user_id: str
    display_name: str
    birthdate: str
    email: str
    profile_complete: bool = False
    joined_date: int | ServerTimestamp | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.profile_complete and self.display_name and self.birthdate)

    @property
    def avatar(self) -> str:
        """Upper-cased first letter of the display name."""
        return self.display_name[:1].upper()
