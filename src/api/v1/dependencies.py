"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from api.dependencies.auth import get_identity_provider
from core.clock import Clock, SystemClock
from domain.services.activity_service import ActivityService
from domain.services.profile_service import ProfileService
from domain.services.view_controller import ViewController, ViewRegistry
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from infrastructure.realtime.channel import SnapshotChannel


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_clock() -> Clock:
    """Get the wall clock used for captured dates and the dashboard clock."""
    return SystemClock()


@lru_cache
def get_snapshot_channel() -> SnapshotChannel:
    """Get the process-wide live-update channel."""
    return SnapshotChannel()


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_activity_service() -> ActivityService:
    """Get Activity service instance."""
    return ActivityService(get_uow_factory(), get_snapshot_channel(), clock=get_clock())


@lru_cache
def get_view_registry() -> ViewRegistry:
    """Get the registry of per-user view controllers."""
    identity_provider = get_identity_provider()

    def controller_factory(user_id: str | None) -> ViewController:
        return ViewController(
            user_id,
            profiles=get_profile_service(),
            activities=get_activity_service(),
            identity_provider=identity_provider,
            clock=get_clock(),
        )

    return ViewRegistry(identity_provider, controller_factory)
