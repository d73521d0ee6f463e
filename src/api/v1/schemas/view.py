"""Pydantic schemas for the rendered page view."""

from pydantic import BaseModel, Field

from core.clock import display_time
from domain.entities.view import ViewState
from domain.services.view_controller import Outcome, ViewController


class SectionsResponse(BaseModel):
    """Visibility of the three top-level sections; exactly one is true."""

    auth: bool
    profile_setup: bool
    dashboard: bool


class BannerResponse(BaseModel):
    kind: str
    message: str


class UserCardResponse(BaseModel):
    display_name: str
    email: str
    avatar: str


class StatsResponse(BaseModel):
    activities_today: int = 0
    total_activities: int = 0
    active_days: int = 0


class ActivityItemResponse(BaseModel):
    """One row of today's activity list."""

    id: str
    description: str
    duration: int
    time: str


class ViewResponse(BaseModel):
    """Everything the page needs to paint itself."""

    state: ViewState
    sections: SectionsResponse
    banners: dict[str, BannerResponse] = Field(
        default_factory=dict,
        description="Keyed by region: auth-error, setup-error, activity-error, activity-success",
    )
    user: UserCardResponse | None = None
    stats: StatsResponse = Field(default_factory=StatsResponse)
    activities: list[ActivityItemResponse] = Field(default_factory=list)
    placeholder: str | None = None
    current_time: str
    error_code: str | None = None


def build_view(controller: ViewController, outcome: Outcome | None = None) -> ViewResponse:
    """Render a controller's current state."""
    state = controller.state
    view = ViewResponse(
        state=state,
        sections=SectionsResponse(
            auth=state is ViewState.UNAUTHENTICATED,
            profile_setup=state is ViewState.PROFILE_INCOMPLETE,
            dashboard=state is ViewState.DASHBOARD,
        ),
        banners={
            b.region: BannerResponse(kind=b.kind.value, message=b.message)
            for b in controller.banners
        },
        current_time=display_time(controller.now()),
        error_code=outcome.error_code.value if outcome and outcome.error_code else None,
    )

    profile = controller.profile
    if state is ViewState.DASHBOARD and profile is not None:
        summary = controller.summary()
        view.user = UserCardResponse(
            display_name=profile.display_name,
            email=profile.email,
            avatar=profile.avatar,
        )
        view.stats = StatsResponse(
            activities_today=summary.activities_today,
            total_activities=summary.total_activities,
            active_days=summary.active_days,
        )
        view.activities = [
            ActivityItemResponse(
                id=r.id, description=r.description, duration=r.duration, time=r.time
            )
            for r in summary.today
        ]
        view.placeholder = summary.placeholder

    return view
