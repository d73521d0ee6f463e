"""Unit tests for ActivityService."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import ValidationFailure, WriteFailure
from domain.entities.server_value import ServerValue
from domain.services.activity_service import ActivityService, collection_path
from tests.conftest import FixedClock
from tests.unit.conftest import FakeUnitOfWork

KEY = "-NqTestKey0000000000"

STORED = {
    "description": "Morning run",
    "duration": 30,
    "timestamp": 1704099600000,
    "date": "Mon Jan 01 2024",
    "time": "09:00 AM",
}


@pytest.fixture
def channel() -> MagicMock:
    channel = MagicMock()
    channel.publish = AsyncMock()
    return channel


@pytest.fixture
def service(uow: FakeUnitOfWork, channel: MagicMock) -> ActivityService:
    return ActivityService(lambda: uow, channel, clock=FixedClock())


# --- log ---


class TestLog:
    @pytest.mark.asyncio
    async def test_appends_record_with_captured_date_and_time(
        self, service: ActivityService, uow: FakeUnitOfWork, user_id: str
    ):
        uow.activities.write.return_value = STORED

        record = await service.log(user_id, "Morning run", "30")

        uow.activities.append.assert_called_once_with(user_id)
        _, key, draft = uow.activities.write.call_args.args
        assert key == KEY
        assert draft.description == "Morning run"
        assert draft.duration == 30
        assert draft.date == "Mon Jan 01 2024"
        assert draft.time == "09:00 AM"
        assert draft.timestamp is ServerValue.TIMESTAMP
        assert uow.committed

        assert record.id == KEY
        assert record.timestamp == 1704099600000

    @pytest.mark.asyncio
    async def test_client_time_decides_date_and_time(
        self, service: ActivityService, uow: FakeUnitOfWork, user_id: str
    ):
        uow.activities.write.return_value = STORED
        evening = datetime(2024, 1, 1, 21, 15, tzinfo=timezone(timedelta(hours=-5)))

        await service.log(user_id, "Evening walk", 20, client_time=evening)

        draft = uow.activities.write.call_args.args[2]
        assert draft.date == "Mon Jan 01 2024"
        assert draft.time == "09:15 PM"

    @pytest.mark.asyncio
    async def test_publishes_fresh_snapshot(
        self, service: ActivityService, uow: FakeUnitOfWork, channel: MagicMock, user_id: str
    ):
        uow.activities.write.return_value = STORED
        uow.activities.snapshot.return_value = {KEY: STORED}

        await service.log(user_id, "Morning run", 30)

        channel.publish.assert_awaited_once_with(collection_path(user_id), {KEY: STORED})

    @pytest.mark.asyncio
    async def test_invalid_duration_writes_nothing(
        self, service: ActivityService, uow: FakeUnitOfWork, channel: MagicMock, user_id: str
    ):
        with pytest.raises(ValidationFailure) as exc_info:
            await service.log(user_id, "Morning run", "0")

        assert exc_info.value.field == "duration"
        uow.activities.append.assert_not_called()
        uow.activities.write.assert_not_called()
        channel.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_write_failure_skips_publish(
        self, service: ActivityService, uow: FakeUnitOfWork, channel: MagicMock, user_id: str
    ):
        uow.activities.write.side_effect = WriteFailure(f"activities/{user_id}/{KEY}")

        with pytest.raises(WriteFailure):
            await service.log(user_id, "Morning run", 30)

        assert not uow.committed
        channel.publish.assert_not_called()


# --- subscribe ---


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_delivers_current_snapshot_immediately(
        self, service: ActivityService, uow: FakeUnitOfWork, channel: MagicMock, user_id: str
    ):
        uow.activities.snapshot.return_value = None
        callback = AsyncMock()

        subscription = await service.subscribe(user_id, callback)

        channel.subscribe.assert_called_once_with(f"activities/{user_id}", callback)
        assert subscription is channel.subscribe.return_value
        callback.assert_awaited_once_with(None)
