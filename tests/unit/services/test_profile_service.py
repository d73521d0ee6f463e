"""Unit tests for ProfileService."""

import pytest

from core.exceptions import (
    ErrorCode,
    ProfileAlreadyCompleteError,
    ProfileNotFoundError,
    ReadFailure,
    ValidationFailure,
    WriteFailure,
)
from domain.entities.profile import UserProfile
from domain.entities.server_value import ServerValue
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


@pytest.fixture
def stored_profile(user_id: str) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        display_name="Jane",
        birthdate="1990-04-12",
        email="jane@example.com",
        profile_complete=True,
        joined_date=1704099600000,
    )


# --- get ---


class TestGet:
    @pytest.mark.asyncio
    async def test_returns_stored_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str, stored_profile
    ):
        uow.profiles.read.return_value = stored_profile

        result = await service.get(user_id)

        assert result == stored_profile
        uow.profiles.read.assert_called_once_with(user_id)

    @pytest.mark.asyncio
    async def test_returns_none_when_absent(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str
    ):
        uow.profiles.read.return_value = None

        assert await service.get(user_id) is None

    @pytest.mark.asyncio
    async def test_read_failure_counts_as_absent(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str
    ):
        uow.profiles.read.side_effect = ReadFailure(f"users/{user_id}")

        assert await service.get(user_id) is None


class TestGetById:
    @pytest.mark.asyncio
    async def test_raises_when_absent(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str
    ):
        uow.profiles.read.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await service.get_by_id(user_id)


# --- complete ---


class TestComplete:
    @pytest.mark.asyncio
    async def test_writes_complete_profile_with_server_timestamp(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str, stored_profile
    ):
        uow.profiles.read.return_value = None
        uow.profiles.write.return_value = stored_profile

        result = await service.complete(
            user_id=user_id,
            email="jane@example.com",
            display_name=" Jane ",
            birthdate="1990-04-12",
        )

        assert result == stored_profile
        written = uow.profiles.write.call_args.args[0]
        assert written.user_id == user_id
        assert written.display_name == "Jane"
        assert written.birthdate == "1990-04-12"
        assert written.email == "jane@example.com"
        assert written.profile_complete is True
        assert written.joined_date is ServerValue.TIMESTAMP
        assert uow.committed

    @pytest.mark.asyncio
    async def test_missing_birthdate_writes_nothing(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str
    ):
        with pytest.raises(ValidationFailure) as exc_info:
            await service.complete(
                user_id=user_id, email="jane@example.com", display_name="Jane", birthdate=""
            )

        assert exc_info.value.field == "birthdate"
        uow.profiles.read.assert_not_called()
        uow.profiles.write.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_second_submission_is_rejected(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str, stored_profile
    ):
        uow.profiles.read.return_value = stored_profile

        with pytest.raises(ProfileAlreadyCompleteError):
            await service.complete(
                user_id=user_id, email="jane@example.com", display_name="Other", birthdate="2000-01-01"
            )

        uow.profiles.write.assert_not_called()

    @pytest.mark.asyncio
    async def test_write_failure_propagates(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: str
    ):
        uow.profiles.read.return_value = None
        uow.profiles.write.side_effect = WriteFailure(f"users/{user_id}")

        with pytest.raises(WriteFailure) as exc_info:
            await service.complete(
                user_id=user_id, email="jane@example.com", display_name="Jane", birthdate="1990-04-12"
            )

        assert exc_info.value.error_code == ErrorCode.WRITE_FAILED
        assert not uow.committed


class TestUserProfile:
    def test_avatar_is_upper_cased_initial(self, stored_profile: UserProfile):
        stored_profile.display_name = "jane"

        assert stored_profile.avatar == "J"

    def test_incomplete_without_flag(self, stored_profile: UserProfile):
        stored_profile.profile_complete = False

        assert not stored_profile.is_complete
