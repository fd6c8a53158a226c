"""Ticket Intake - Guided multi-step ticket creation."""

from ticketdesk.intake.exceptions import IntakeError, IntakeStepError, IntakeValidationError
from ticketdesk.intake.models import IntakeStep, PriorityAnswers, TicketDetails
from ticketdesk.intake.wizard import IntakeWizard, generate_ticket_id

__all__ = [
    "IntakeError",
    "IntakeStep",
    "IntakeStepError",
    "IntakeValidationError",
    "IntakeWizard",
    "PriorityAnswers",
    "TicketDetails",
    "generate_ticket_id",
]
