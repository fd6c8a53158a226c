"""Ticket intake endpoints."""

from fastapi import APIRouter, Query

from ticketdesk.api.dependencies import ResolverDep, WizardDep
from ticketdesk.api.models import (
    APIResponse,
    IntakeAnswersRequest,
    IntakeDetailsRequest,
    IntakeStateResponse,
    PreviewResponse,
    wizard_to_response,
)
from ticketdesk.resolution import NotAuthenticatedError
from ticketdesk.tickets.priority import preview_priority

router = APIRouter(prefix="/intake", tags=["intake"])


@router.get("", response_model=APIResponse[IntakeStateResponse])
def get_intake(wizard: WizardDep, resolver: ResolverDep) -> APIResponse[IntakeStateResponse]:
    """Get the current wizard state."""
    return APIResponse(data=wizard_to_response(wizard, resolver.snapshot().projects))


@router.post("/details", response_model=APIResponse[IntakeStateResponse])
def submit_details(
    request: IntakeDetailsRequest, wizard: WizardDep, resolver: ResolverDep
) -> APIResponse[IntakeStateResponse]:
    """Submit step 1 and move to the priority questions."""
    if not resolver.is_authenticated:
        raise NotAuthenticatedError("Log in before creating a ticket")
    wizard.submit_details(
        title=request.title,
        description=request.description,
        type=request.type,
        project_id=request.project_id,
    )
    return APIResponse(data=wizard_to_response(wizard, resolver.snapshot().projects))


@router.post("/back", response_model=APIResponse[IntakeStateResponse])
def back(wizard: WizardDep, resolver: ResolverDep) -> APIResponse[IntakeStateResponse]:
    """Return from the priority questions to the details."""
    wizard.back()
    return APIResponse(data=wizard_to_response(wizard, resolver.snapshot().projects))


@router.post("/answers", response_model=APIResponse[IntakeStateResponse])
def submit_answers(
    request: IntakeAnswersRequest, wizard: WizardDep, resolver: ResolverDep
) -> APIResponse[IntakeStateResponse]:
    """Submit the four ratings and create the ticket."""
    wizard.submit(request.model_dump(exclude_none=True))
    return APIResponse(data=wizard_to_response(wizard, resolver.snapshot().projects))


@router.post("/cancel", response_model=APIResponse[IntakeStateResponse])
def cancel(wizard: WizardDep, resolver: ResolverDep) -> APIResponse[IntakeStateResponse]:
    """Discard the draft and return to the details step."""
    wizard.cancel()
    return APIResponse(data=wizard_to_response(wizard, resolver.snapshot().projects))


@router.get("/preview", response_model=APIResponse[PreviewResponse])
def preview(
    q1: int | None = Query(None, ge=1, le=5),
    q2: int | None = Query(None, ge=1, le=5),
    q3: int | None = Query(None, ge=1, le=5),
    q4: int | None = Query(None, ge=1, le=5),
) -> APIResponse[PreviewResponse]:
    """Live score and level for a partial set of ratings (missing ones count as 0)."""
    score, level = preview_priority(q1, q2, q3, q4)
    return APIResponse(data=PreviewResponse(score=score, level=level))
