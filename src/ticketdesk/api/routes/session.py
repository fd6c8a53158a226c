"""Session endpoints: resolution, login, logout and activity."""

from fastapi import APIRouter

from ticketdesk.api.dependencies import ResolverDep
from ticketdesk.api.models import (
    ActivityRequest,
    ActivityResponse,
    APIResponse,
    LoginRequest,
    MountRequest,
    SessionResponse,
    VisibilityRequest,
    VisibilityResponse,
    snapshot_to_session,
)

router = APIRouter(prefix="/session", tags=["session"])


@router.get("", response_model=APIResponse[SessionResponse])
def get_session(resolver: ResolverDep) -> APIResponse[SessionResponse]:
    """Get the current resolution state."""
    return APIResponse(data=snapshot_to_session(resolver.snapshot()))


@router.post("/mount", response_model=APIResponse[SessionResponse])
def mount(request: MountRequest, resolver: ResolverDep) -> APIResponse[SessionResponse]:
    """Open the dashboard at a location (resolves ?clientId= or the stored session)."""
    resolver.mount(request.location)
    return APIResponse(data=snapshot_to_session(resolver.snapshot()))


@router.post("/login", response_model=APIResponse[SessionResponse])
def login(request: LoginRequest, resolver: ResolverDep) -> APIResponse[SessionResponse]:
    """Log in by email."""
    email = request.email.strip()
    if not resolver.resolve_client(email=email):
        return APIResponse(
            data=snapshot_to_session(resolver.snapshot()),
            error=f"No client found for {email}",
        )
    return APIResponse(data=snapshot_to_session(resolver.snapshot()))


@router.post("/logout", response_model=APIResponse[SessionResponse])
def logout(resolver: ResolverDep) -> APIResponse[SessionResponse]:
    """Log out; any ticket being drafted is discarded with the workspace."""
    resolver.logout()
    return APIResponse(data=snapshot_to_session(resolver.snapshot()))


@router.post("/activity", response_model=APIResponse[ActivityResponse])
def record_activity(
    request: ActivityRequest, resolver: ResolverDep
) -> APIResponse[ActivityResponse]:
    """Report user activity to keep the session alive."""
    refreshed = resolver.record_activity(request.signal)
    return APIResponse(data=ActivityResponse(refreshed=refreshed))


@router.post("/visibility", response_model=APIResponse[VisibilityResponse])
def visibility_change(
    request: VisibilityRequest, resolver: ResolverDep
) -> APIResponse[VisibilityResponse]:
    """Report that the page became visible or hidden."""
    scheduled = resolver.on_visibility_change(request.visible)
    return APIResponse(data=VisibilityResponse(scheduled=scheduled))
