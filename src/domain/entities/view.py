"""View state machine and presentation entities."""

from dataclasses import dataclass, field
from enum import StrEnum

from domain.entities.activity import ActivityRecord

NO_ACTIVITIES_TODAY = "No activities logged today. Start by adding your first activity!"


class ViewState(StrEnum):
    """Which top-level section is visible. Exactly one at a time."""

    UNAUTHENTICATED = "unauthenticated"
    PROFILE_INCOMPLETE = "profile_incomplete"
    DASHBOARD = "dashboard"


class Form(StrEnum):
    """Forms that own a banner slot."""

    AUTH = "auth"
    SETUP = "setup"
    ACTIVITY = "activity"


class BannerKind(StrEnum):
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Banner:
    """A single message shown next to the form that triggered it."""

    form: Form
    kind: BannerKind
    message: str

    @property
    def region(self) -> str:
        """Named page region, e.g. ``activity-error``."""
        return f"{self.form.value}-{self.kind.value}"


@dataclass(frozen=True)
class ActivitySummary:
    """Output of the aggregation pipeline."""

    ordered_all: list[ActivityRecord] = field(default_factory=list)
    today: list[ActivityRecord] = field(default_factory=list)
    activities_today: int = 0
    total_activities: int = 0
    active_days: int = 0

    @property
    def placeholder(self) -> str | None:
        """Text shown instead of today's list when it is empty."""
        return NO_ACTIVITIES_TODAY if not self.today else None
