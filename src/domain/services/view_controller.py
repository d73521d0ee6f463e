"""Per-user view state machine.

A ``ViewController`` owns everything one user's page shows: which section is
visible, the banners next to each form, the profile card and the latest
activity snapshot. It moves between three states:

    UNAUTHENTICATED --signed in, profile incomplete--> PROFILE_INCOMPLETE
    UNAUTHENTICATED --signed in, profile complete----> DASHBOARD
    PROFILE_INCOMPLETE --profile submitted-----------> DASHBOARD
    any --signed out---------------------------------> UNAUTHENTICATED

Transitions are driven by auth-state events from the identity provider
(routed here by ``ViewRegistry``), by form submissions and by live snapshot
deliveries. Form failures never escape a handler: they become the banner of
the form that triggered them and an ``Outcome`` for the caller.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

import structlog

from core.clock import Clock, SystemClock, calendar_day
from core.config import settings
from core.exceptions import (
    AppException,
    AuthFailure,
    ErrorCode,
    InvalidViewStateError,
)
from domain.entities.profile import UserProfile
from domain.entities.view import ActivitySummary, Banner, BannerKind, Form, ViewState
from domain.repositories.activity_repository import ISubscription
from domain.services.activity_service import ActivityService
from domain.services.aggregation import aggregate
from domain.services.profile_service import ProfileService
from infrastructure.auth.provider import AuthStateChange, Identity, IIdentityProvider

logger = structlog.get_logger()

ACTIVITY_LOGGED_MESSAGE = "Activity logged successfully!"

WRITE_FAILURE_MESSAGES = {
    Form.SETUP: "Failed to save profile. Please try again.",
    Form.ACTIVITY: "Failed to log activity. Please try again.",
}


@dataclass(frozen=True)
class Outcome:
    """Result of a user action handled by the controller."""

    ok: bool
    status_code: int = 200
    error_code: ErrorCode | None = None


class ViewController:
    """View state and form handlers for a single user."""

    def __init__(
        self,
        user_id: str | None,
        profiles: ProfileService,
        activities: ActivityService,
        identity_provider: IIdentityProvider,
        clock: Clock | None = None,
        success_message_seconds: float = settings.success_message_seconds,
    ) -> None:
        self.user_id = user_id
        self._profiles = profiles
        self._activities = activities
        self._identity_provider = identity_provider
        self._clock = clock or SystemClock()
        self._success_message_seconds = success_message_seconds

        self._state = ViewState.UNAUTHENTICATED
        self._identity: Identity | None = None
        self._profile: UserProfile | None = None
        self._snapshot: dict[str, Any] | None = None
        self._subscription: ISubscription | None = None
        self._banners: dict[Form, Banner] = {}
        self._success_timer: asyncio.TimerHandle | None = None
        self._client_tz: tzinfo | None = None

    # --- Read-only view ---

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def profile(self) -> UserProfile | None:
        return self._profile

    @property
    def banners(self) -> list[Banner]:
        return list(self._banners.values())

    def now(self) -> datetime:
        """Current moment, in the client's UTC offset once one is known."""
        moment = self._clock.now()
        if self._client_tz is not None:
            return moment.astimezone(self._client_tz)
        return moment

    def observe_client_time(self, client_time: datetime | None) -> None:
        """Adopt the UTC offset of the client's local clock for "today"."""
        if client_time is not None and client_time.tzinfo is not None:
            self._client_tz = client_time.tzinfo

    def summary(self) -> ActivitySummary:
        """Aggregate the last delivered snapshot against today's date."""
        if self._state is not ViewState.DASHBOARD:
            return ActivitySummary()
        return aggregate(self._snapshot, calendar_day(self.now()))

    # --- Transition triggers ---

    async def on_auth_state_changed(self, identity: Identity | None) -> None:
        if identity is None:
            self._enter_unauthenticated()
            return

        self._identity = identity
        self._banners.pop(Form.AUTH, None)

        profile = await self._profiles.get(identity.uid)
        if self._identity is not identity:
            # Superseded by a later auth event while the profile was read
            return
        if profile and profile.is_complete:
            await self._enter_dashboard(profile)
        else:
            self._enter_profile_setup()

    async def on_snapshot(self, snapshot: dict[str, Any] | None) -> None:
        """Live-update callback. The newest snapshot replaces the previous one."""
        if self._state is not ViewState.DASHBOARD:
            return
        self._snapshot = snapshot

    # --- Form handlers ---

    async def submit_profile(self, display_name: Any, birthdate: Any) -> Outcome:
        try:
            identity = self._require_identity("save profile")
            profile = await self._profiles.complete(
                user_id=identity.uid,
                email=identity.email,
                display_name=display_name,
                birthdate=birthdate,
            )
        except AppException as exc:
            return self.fail(Form.SETUP, exc)

        if self._identity is identity:
            self._banners.pop(Form.SETUP, None)
            await self._enter_dashboard(profile)
        return Outcome(ok=True)

    async def submit_activity(
        self,
        description: Any,
        duration: Any,
        client_time: datetime | None = None,
    ) -> Outcome:
        try:
            identity = self._require_identity("log activity")
            if self._state is not ViewState.DASHBOARD:
                raise InvalidViewStateError(self._state.value, "log activity")
            self.observe_client_time(client_time)
            await self._activities.log(identity.uid, description, duration, client_time)
        except AppException as exc:
            return self.fail(Form.ACTIVITY, exc)

        if self._identity is identity:
            self._show_success(Form.ACTIVITY, ACTIVITY_LOGGED_MESSAGE)
        return Outcome(ok=True, status_code=201)

    async def sign_out(self) -> Outcome:
        identity = self._identity
        if identity is None:
            return Outcome(ok=True)
        await self._identity_provider.sign_out(identity)
        return Outcome(ok=True)

    def fail(self, form: Form, exc: AppException) -> Outcome:
        """Turn a failure into the form's banner."""
        message = exc.message
        if exc.error_code is ErrorCode.WRITE_FAILED:
            message = WRITE_FAILURE_MESSAGES.get(form, message)

        logger.warning(
            "form_submission_failed",
            form=form.value,
            user_id=self.user_id,
            error_code=exc.error_code.value,
            message=exc.message,
        )
        self._set_banner(Banner(form=form, kind=BannerKind.ERROR, message=message))
        return Outcome(ok=False, status_code=exc.status_code, error_code=exc.error_code)

    def close(self) -> None:
        """Release the live subscription and any pending timer."""
        self._cancel_subscription()
        self._cancel_success_timer()

    # --- Internals ---

    def _require_identity(self, action: str) -> Identity:
        if self._identity is None:
            raise InvalidViewStateError(self._state.value, action)
        return self._identity

    def _transition(self, new_state: ViewState) -> None:
        if new_state is not self._state:
            logger.info(
                "view_transition",
                user_id=self.user_id,
                from_state=self._state.value,
                to_state=new_state.value,
            )
        self._state = new_state

    def _enter_unauthenticated(self) -> None:
        self._cancel_subscription()
        self._cancel_success_timer()
        self._identity = None
        self._profile = None
        self._snapshot = None
        self._client_tz = None
        self._banners = {f: b for f, b in self._banners.items() if f is Form.AUTH}
        self._transition(ViewState.UNAUTHENTICATED)

    def _enter_profile_setup(self) -> None:
        self._cancel_subscription()
        self._profile = None
        self._snapshot = None
        self._transition(ViewState.PROFILE_INCOMPLETE)

    async def _enter_dashboard(self, profile: UserProfile) -> None:
        identity = self._identity
        self._profile = profile
        self._transition(ViewState.DASHBOARD)
        if self._subscription is not None or identity is None:
            return

        subscription = await self._activities.subscribe(identity.uid, self.on_snapshot)
        if self._identity is not identity or self._subscription is not None:
            subscription.cancel()
        else:
            self._subscription = subscription

    def _set_banner(self, banner: Banner) -> None:
        if banner.form is Form.ACTIVITY:
            self._cancel_success_timer()
        self._banners[banner.form] = banner

    def _show_success(self, form: Form, message: str) -> None:
        banner = Banner(form=form, kind=BannerKind.SUCCESS, message=message)
        self._set_banner(banner)
        loop = asyncio.get_running_loop()
        self._success_timer = loop.call_later(
            self._success_message_seconds, self._dismiss, banner
        )

    def _dismiss(self, banner: Banner) -> None:
        if self._banners.get(banner.form) is banner:
            del self._banners[banner.form]
        self._success_timer = None

    def _cancel_success_timer(self) -> None:
        if self._success_timer is not None:
            self._success_timer.cancel()
            self._success_timer = None

    def _cancel_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None


class ViewRegistry:
    """Holds one ``ViewController`` per user and routes auth events to it."""

    def __init__(
        self,
        identity_provider: IIdentityProvider,
        controller_factory: Callable[[str | None], ViewController],
    ) -> None:
        self._identity_provider = identity_provider
        self._controller_factory = controller_factory
        self._controllers: dict[str, ViewController] = {}
        self._unsubscribe = identity_provider.on_auth_state_changed(self._dispatch)

    def get(self, user_id: str) -> ViewController:
        """Get the user's controller, creating it in UNAUTHENTICATED if new."""
        controller = self._controllers.get(user_id)
        if controller is None:
            controller = self._controller_factory(user_id)
            self._controllers[user_id] = controller
        return controller

    def find(self, user_id: str) -> ViewController:
        """The user's controller while signed in, else a fresh signed-out one."""
        return self._controllers.get(user_id) or self._controller_factory(user_id)

    async def sign_in(self, credential: str) -> tuple[ViewController, Outcome]:
        """Sign in with a provider credential.

        On success the provider's signed-in event has already moved the
        user's controller to its next state. On failure a detached
        controller carrying the auth banner is returned.
        """
        try:
            identity = await self._identity_provider.sign_in(credential)
        except AuthFailure as exc:
            controller = self._controller_factory(None)
            return controller, controller.fail(Form.AUTH, exc)
        return self.find(identity.uid), Outcome(ok=True)

    async def sign_out(self, user_id: str) -> tuple[ViewController, Outcome]:
        controller = self.find(user_id)
        return controller, await controller.sign_out()

    async def _dispatch(self, change: AuthStateChange) -> None:
        if change.signed_in:
            await self.get(change.uid).on_auth_state_changed(change.identity)
            return
        # Signed-out users keep no controller; callers render the one they hold
        controller = self._controllers.pop(change.uid, None)
        if controller is not None:
            await controller.on_auth_state_changed(None)

    def close(self) -> None:
        self._unsubscribe()
        for controller in self._controllers.values():
            controller.close()
        self._controllers.clear()
