"""Priority/Deadline Engine - pure functions over the four intake answers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from ticketdesk.tickets.models import PriorityLevel

# Weights applied to q1..q4 (business impact, users affected, full blocker, desired delay)
QUESTION_WEIGHTS = (3, 2, 3, 2)
HIGH_THRESHOLD = 4.0
MEDIUM_THRESHOLD = 2.5

DEADLINE_DAYS = {
    PriorityLevel.LOW: 7,
    PriorityLevel.MEDIUM: 4,
    PriorityLevel.HIGH: 2,
}
FALLBACK_DEADLINE_DAYS = DEADLINE_DAYS[PriorityLevel.HIGH]


@dataclass(frozen=True)
class PriorityAssessment:
    """Fields derived once, at ticket creation."""

    score: float
    level: PriorityLevel
    deadline: datetime


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def compute_priority_score(q1: int, q2: int, q3: int, q4: int) -> float:
    """Weighted score of the four answers, rounded to one decimal.

    Answers are expected in 1..5; range is not checked here.
    """
    weighted = sum(w * q for w, q in zip(QUESTION_WEIGHTS, (q1, q2, q3, q4), strict=True))
    return _round_half_up(weighted / 10)


def compute_priority_level(score: float) -> PriorityLevel:
    """Map a score to its band. Lower bounds are inclusive."""
    if score >= HIGH_THRESHOLD:
        return PriorityLevel.HIGH
    if score >= MEDIUM_THRESHOLD:
        return PriorityLevel.MEDIUM
    return PriorityLevel.LOW


def compute_deadline(created_at: datetime, level: PriorityLevel | str) -> datetime:
    """Deadline for a ticket created at created_at.

    Unrecognized levels get the shortest (HIGH) delay.
    """
    try:
        days = DEADLINE_DAYS[PriorityLevel(level)]
    except ValueError:
        days = FALLBACK_DEADLINE_DAYS
    return created_at + timedelta(days=days)


def assess_priority(q1: int, q2: int, q3: int, q4: int, created_at: datetime) -> PriorityAssessment:
    """Compute score, level and deadline together."""
    score = compute_priority_score(q1, q2, q3, q4)
    level = compute_priority_level(score)
    deadline = compute_deadline(created_at, level)
    return PriorityAssessment(score=score, level=level, deadline=deadline)


def preview_priority(
    q1: int | None, q2: int | None, q3: int | None, q4: int | None
) -> tuple[float, PriorityLevel]:
    """Live score/level while the intake is being answered; unanswered questions count as 0."""
    score = compute_priority_score(q1 or 0, q2 or 0, q3 or 0, q4 or 0)
    return score, compute_priority_level(score)
