"""IntakeWizard - three-step guided ticket creation."""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ticketdesk.intake.exceptions import IntakeStepError, IntakeValidationError
from ticketdesk.intake.models import (
    QUESTIONS,
    RATING_MESSAGE,
    IntakeStep,
    PriorityAnswers,
    TicketDetails,
    field_errors,
)
from ticketdesk.tickets.models import Ticket, TicketStatus
from ticketdesk.tickets.priority import assess_priority, preview_priority

if TYPE_CHECKING:
    from collections.abc import Callable

    from ticketdesk.tickets.models import PriorityLevel, Project

logger = logging.getLogger("ticketdesk.intake")


def generate_ticket_id() -> str:
    """Generate a new unique ticket id."""
    return f"tick_{uuid.uuid4().hex}"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _provided(**values: Any) -> dict[str, Any]:
    """Drop blank values so they are reported as missing rather than mistyped."""
    return {k: v for k, v in values.items() if v is not None and v != ""}


class IntakeWizard:
    """Details -> Priority Questions -> Confirmation.

    Movement is linear: forward from details once they validate, back from
    the questions to the details, and confirmation only after a successful
    submission. Cancelling at any step discards everything and returns to
    the details step.
    """

    def __init__(
        self,
        on_create: Callable[[Ticket], Ticket | None],
        projects: Callable[[], list[Project]] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the wizard.

        Args:
            on_create: Receives the new ticket on submission; may return the
                ticket as finally applied (e.g. rebound to the session client)
            projects: Supplies the projects the client may pick from; when given,
                the selected project must be one of them
            clock: Source of the creation instant
        """
        self._on_create = on_create
        self._projects = projects
        self._clock = clock
        self._lock = threading.Lock()
        self._reset()

    def _reset(self) -> None:
        self._step = IntakeStep.DETAILS
        self._details: TicketDetails | None = None
        self._answers: dict[str, int] = {}
        self._created: Ticket | None = None

    # --- State ---

    @property
    def step(self) -> IntakeStep:
        return self._step

    @property
    def details(self) -> TicketDetails | None:
        return self._details

    @property
    def answers(self) -> dict[str, int]:
        return dict(self._answers)

    @property
    def created_ticket(self) -> Ticket | None:
        """The ticket produced by the last submission, shown on confirmation."""
        return self._created

    def preview(self) -> tuple[float, PriorityLevel]:
        """Score and level for the answers given so far."""
        return preview_priority(*(self._answers.get(q) for q in QUESTIONS))

    # --- Step 1 ---

    def submit_details(
        self,
        title: str | None,
        description: str | None,
        type: str | None,  # noqa: A002
        project_id: str | None,
    ) -> TicketDetails:
        """Validate the details and move to the priority questions.

        Raises:
            IntakeStepError: If not on the details step
            IntakeValidationError: With a message per invalid field
        """
        with self._lock:
            if self._step != IntakeStep.DETAILS:
                raise IntakeStepError(f"Details cannot be edited at step {self._step}")
            try:
                details = TicketDetails(
                    **_provided(
                        title=title,
                        description=description,
                        type=type,
                        project_id=project_id,
                    )
                )
            except ValidationError as e:
                raise IntakeValidationError(field_errors(e)) from e

            self._check_project(details.project_id)
            self._details = details
            self._step = IntakeStep.PRIORITY
            return details

    def back(self) -> None:
        """Return from the priority questions to the details, keeping what was entered."""
        with self._lock:
            if self._step != IntakeStep.PRIORITY:
                raise IntakeStepError(f"Cannot go back from step {self._step}")
            self._step = IntakeStep.DETAILS

    # --- Step 2 ---

    def set_answer(self, question: str, value: int) -> None:
        """Record one rating.

        Raises:
            IntakeStepError: If not on the priority step
            IntakeValidationError: If the question or rating is invalid
        """
        with self._lock:
            if self._step != IntakeStep.PRIORITY:
                raise IntakeStepError(f"Ratings cannot be set at step {self._step}")
            if question not in QUESTIONS:
                raise IntakeValidationError({question: "Unknown question"})
            if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
                raise IntakeValidationError({question: RATING_MESSAGE})
            self._answers[question] = value

    def submit(self, answers: dict[str, Any] | None = None) -> Ticket:
        """Create the ticket from the details and all four ratings.

        Args:
            answers: Ratings to record before submitting (merged over earlier ones)

        Raises:
            IntakeStepError: If not on the priority step
            IntakeValidationError: If any rating is missing or invalid, or the
                selected project is no longer available
        """
        with self._lock:
            if self._step != IntakeStep.PRIORITY or self._details is None:
                raise IntakeStepError(f"Cannot submit at step {self._step}")
            # The project list may have changed since the details were entered.
            self._check_project(self._details.project_id)

            merged: dict[str, Any] = {**self._answers, **(answers or {})}
            try:
                ratings = PriorityAnswers(**_provided(**{q: merged.get(q) for q in QUESTIONS}))
            except ValidationError as e:
                raise IntakeValidationError(field_errors(e)) from e
            self._answers = ratings.model_dump()

            details = self._details
            created_at = self._clock()
            assessment = assess_priority(
                ratings.q1, ratings.q2, ratings.q3, ratings.q4, created_at=created_at
            )
            ticket = Ticket(
                id=generate_ticket_id(),
                title=details.title,
                description=details.description,
                type=details.type,
                project_id=details.project_id,
                project_name=self._project_name(details.project_id),
                client_id="",
                q1=ratings.q1,
                q2=ratings.q2,
                q3=ratings.q3,
                q4=ratings.q4,
                priority_score=assessment.score,
                priority_level=assessment.level,
                created_at=created_at.isoformat(),
                deadline=assessment.deadline.isoformat(),
                status=TicketStatus.NEW,
            )

            applied = self._on_create(ticket)
            self._created = applied if applied is not None else ticket
            self._step = IntakeStep.CONFIRMATION
            logger.info(
                "Intake submitted ticket %s (score=%s, level=%s)",
                ticket.id,
                assessment.score,
                assessment.level.name,
            )
            return self._created

    def _check_project(self, project_id: str) -> None:
        if self._projects is None:
            return
        if project_id not in {p.id for p in self._projects()}:
            raise IntakeValidationError({"project_id": "Select one of your projects"})

    def _project_name(self, project_id: str) -> str:
        if self._projects is None:
            return ""
        for project in self._projects():
            if project.id == project_id:
                return project.name
        return ""

    # --- Any step ---

    def cancel(self) -> None:
        """Discard everything entered and return to the details step."""
        with self._lock:
            self._reset()
