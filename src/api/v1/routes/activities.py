"""Activity API routes."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request, Response, status

from api.dependencies.auth import SignedInIdentity
from api.v1.dependencies import get_activity_service, get_clock, get_view_registry
from api.v1.schemas.activity import ActivityCreate, ActivitySummaryResponse
from api.v1.schemas.common import AUTH_ERROR_RESPONSES
from api.v1.schemas.view import ViewResponse, build_view
from core.clock import Clock, calendar_day, in_offset_of
from core.rate_limit import limiter
from domain.services.activity_service import ActivityService
from domain.services.aggregation import aggregate
from domain.services.view_controller import ViewRegistry

router = APIRouter(prefix="/activities", tags=["activities"])


@router.get(
    "",
    response_model=ActivitySummaryResponse,
    summary="List my activities with statistics",
    responses={
        **AUTH_ERROR_RESPONSES,
        200: {"description": "All activities newest first, today's subset and counters"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_activities(
    request: Request,
    identity: SignedInIdentity,
    service: ActivityService = Depends(get_activity_service),
    clock: Clock = Depends(get_clock),
    client_time: datetime | None = Query(
        None, description="Client's local clock; its UTC offset decides which day is today"
    ),
) -> ActivitySummaryResponse:
    """Get every activity of the signed-in user, newest first, plus statistics."""
    snapshot = await service.snapshot(identity.uid)
    summary = aggregate(snapshot, calendar_day(in_offset_of(clock.now(), client_time)))
    return ActivitySummaryResponse.from_summary(summary)


@router.post(
    "",
    response_model=ViewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an activity",
    responses={
        **AUTH_ERROR_RESPONSES,
        201: {"description": "Activity logged; the view carries the activity-success banner"},
        409: {"description": "Dashboard not active"},
        422: {"description": "Missing or invalid field; the view carries the activity-error banner"},
        503: {"description": "Store rejected the write"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def log_activity(
    request: Request,
    response: Response,
    body: ActivityCreate,
    identity: SignedInIdentity,
    registry: ViewRegistry = Depends(get_view_registry),
) -> ViewResponse:
    """
    Submit the activity form.

    The new record reaches the dashboard through the live-update channel,
    so the returned view already includes it.
    """
    controller = registry.get(identity.uid)
    outcome = await controller.submit_activity(
        body.description, body.duration, client_time=body.client_time
    )
    response.status_code = outcome.status_code
    return build_view(controller, outcome)
