"""Session API routes: sign-in, sign-out and the rendered view."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request, Response

from api.dependencies.auth import BearerCredential, CurrentIdentity
from api.v1.dependencies import get_view_registry
from api.v1.schemas.common import AUTH_ERROR_RESPONSES
from api.v1.schemas.view import ViewResponse, build_view
from core.rate_limit import limiter
from domain.services.view_controller import ViewRegistry

router = APIRouter(prefix="/session", tags=["session"])


@router.post(
    "",
    response_model=ViewResponse,
    summary="Sign in with an identity provider token",
    responses={
        **AUTH_ERROR_RESPONSES,
        200: {"description": "Signed in; the view shows profile setup or the dashboard"},
        401: {"description": "Token rejected; the view carries the auth-error banner"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sign_in(
    request: Request,
    response: Response,
    credential: BearerCredential,
    registry: ViewRegistry = Depends(get_view_registry),
) -> ViewResponse:
    """
    Exchange the provider's ID token for a signed-in session.

    The user's profile decides the next section: the one-time profile
    setup, or the dashboard when the profile is already complete.
    """
    controller, outcome = await registry.sign_in(credential)
    response.status_code = outcome.status_code
    return build_view(controller, outcome)


@router.delete(
    "",
    response_model=ViewResponse,
    summary="Sign out",
    responses={
        **AUTH_ERROR_RESPONSES,
        200: {"description": "Signed out; the view shows the auth section"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def sign_out(
    request: Request,
    response: Response,
    identity: CurrentIdentity,
    registry: ViewRegistry = Depends(get_view_registry),
) -> ViewResponse:
    """Sign out and clear the dashboard from the view."""
    controller, outcome = await registry.sign_out(identity.uid)
    response.status_code = outcome.status_code
    return build_view(controller, outcome)


@router.get(
    "/view",
    response_model=ViewResponse,
    summary="Get the current view",
    responses={
        **AUTH_ERROR_RESPONSES,
        200: {"description": "Visible section, banners, stats and today's activities"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_view(
    request: Request,
    identity: CurrentIdentity,
    registry: ViewRegistry = Depends(get_view_registry),
    client_time: datetime | None = Query(
        None, description="Client's local clock; its UTC offset decides which day is today"
    ),
) -> ViewResponse:
    """Render the user's page as of now."""
    controller = registry.find(identity.uid)
    controller.observe_client_time(client_time)
    return build_view(controller)
