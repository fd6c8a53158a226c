"""Form models for the Ticket Intake flow."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ticketdesk.tickets.models import TicketType

REQUIRED_MESSAGE = "This field is required"
RATING_MESSAGE = "Choose a rating from 1 to 5"

QUESTIONS = ("q1", "q2", "q3", "q4")
QUESTION_LABELS = {
    "q1": "Business impact",
    "q2": "Number of users affected",
    "q3": "Complete blocker",
    "q4": "Desired turnaround",
}


class IntakeStep(StrEnum):
    """Wizard steps, in order."""

    DETAILS = "details"
    PRIORITY = "priority"
    CONFIRMATION = "confirmation"


class TicketDetails(BaseModel):
    """Step 1: what the ticket is about."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    type: TicketType
    project_id: str = Field(..., min_length=1)


class PriorityAnswers(BaseModel):
    """Step 2: the four 1-5 ratings."""

    q1: int = Field(..., ge=1, le=5)
    q2: int = Field(..., ge=1, le=5)
    q3: int = Field(..., ge=1, le=5)
    q4: int = Field(..., ge=1, le=5)


def field_errors(error: ValidationError) -> dict[str, str]:
    """Flatten a pydantic error into one message per field."""
    fields: dict[str, str] = {}
    for err in error.errors():
        name = ".".join(str(part) for part in err["loc"]) or "__root__"
        if err["type"] in ("missing", "string_too_short"):
            message = REQUIRED_MESSAGE
        elif name in QUESTIONS:
            message = RATING_MESSAGE
        else:
            message = err["msg"]
        fields.setdefault(name, message)
    return fields
