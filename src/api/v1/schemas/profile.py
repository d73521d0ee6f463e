"""Pydantic schemas for Profile API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import UserProfile


class ProfileCreate(BaseModel):
    """Profile setup form.

    Fields take any JSON value so that a missing or mistyped value is
    reported as a form error next to the field rather than a request error.
    """

    display_name: Any = None
    birthdate: Any = Field(None, description="Calendar date, e.g. 1990-04-12")


class ProfileResponse(BaseModel):
    """Schema for a stored profile."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "110169484474386276334",
                "display_name": "Jane Doe",
                "birthdate": "1990-04-12",
                "email": "jane@example.com",
                "profile_complete": True,
                "joined_date": 1767225600000,
                "avatar": "J",
            }
        }
    )

    user_id: str
    display_name: str
    birthdate: str
    email: str
    profile_complete: bool
    joined_date: int | None = None
    avatar: str

    @classmethod
    def from_entity(cls, profile: UserProfile) -> "ProfileResponse":
        return cls(
            user_id=profile.user_id,
            display_name=profile.display_name,
            birthdate=profile.birthdate,
            email=profile.email,
            profile_complete=profile.profile_complete,
            joined_date=profile.joined_date if isinstance(profile.joined_date, int) else None,
            avatar=profile.avatar,
        )


class ProfileDetailResponse(BaseModel):
    """Wrapper for single profile response."""

    data: ProfileResponse
