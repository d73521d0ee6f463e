"""Profile API routes."""

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies.auth import SignedInIdentity
from api.v1.dependencies import get_profile_service, get_view_registry
from api.v1.schemas.common import AUTH_ERROR_RESPONSES
from api.v1.schemas.profile import ProfileCreate, ProfileDetailResponse, ProfileResponse
from api.v1.schemas.view import ViewResponse, build_view
from core.rate_limit import limiter
from domain.services.profile_service import ProfileService
from domain.services.view_controller import ViewRegistry

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
    responses={
        **AUTH_ERROR_RESPONSES,
        200: {"description": "The signed-in user's profile"},
        404: {"description": "Profile not set up yet"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    identity: SignedInIdentity,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the profile of the signed-in user."""
    profile = await service.get_by_id(identity.uid)
    return ProfileDetailResponse(data=ProfileResponse.from_entity(profile))


@router.post(
    "",
    response_model=ViewResponse,
    summary="Complete profile setup",
    responses={
        **AUTH_ERROR_RESPONSES,
        200: {"description": "Profile saved; the view shows the dashboard"},
        409: {"description": "Profile already complete"},
        422: {"description": "Missing field; the view carries the setup-error banner"},
        503: {"description": "Store rejected the write"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def submit_profile(
    request: Request,
    response: Response,
    body: ProfileCreate,
    identity: SignedInIdentity,
    registry: ViewRegistry = Depends(get_view_registry),
) -> ViewResponse:
    """Submit the one-time profile form (display name and birthdate)."""
    controller = registry.get(identity.uid)
    outcome = await controller.submit_profile(body.display_name, body.birthdate)
    response.status_code = outcome.status_code
    return build_view(controller, outcome)
