"""Unit tests for the priority/deadline engine."""

from datetime import UTC, datetime, timedelta

import pytest

from ticketdesk.tickets import (
    PriorityLevel,
    assess_priority,
    compute_deadline,
    compute_priority_level,
    compute_priority_score,
    preview_priority,
)

CREATED = datetime(2025, 3, 10, 9, 30, tzinfo=UTC)


@pytest.mark.unit
class TestComputePriorityScore:
    """Tests for compute_priority_score."""

    def test_all_ones(self) -> None:
        """Minimum answers give 1.0."""
        assert compute_priority_score(1, 1, 1, 1) == 1.0

    def test_all_fives(self) -> None:
        """Maximum answers give 5.0."""
        assert compute_priority_score(5, 5, 5, 5) == 5.0

    def test_weights_applied(self) -> None:
        """q1 and q3 weigh 3, q2 and q4 weigh 2."""
        assert compute_priority_score(5, 5, 1, 1) == 3.0
        assert compute_priority_score(5, 1, 5, 1) == 3.4
        assert compute_priority_score(1, 5, 1, 5) == 2.6

    def test_rounded_to_one_decimal(self) -> None:
        """(3*2 + 2*1 + 3*1 + 2*2) / 10 = 1.5."""
        assert compute_priority_score(2, 1, 1, 2) == 1.5

    def test_order_of_answers_matters(self) -> None:
        """Swapping a heavy and a light question changes the score."""
        assert compute_priority_score(4, 2, 3, 3) != compute_priority_score(2, 4, 3, 3)


@pytest.mark.unit
class TestComputePriorityLevel:
    """Tests for compute_priority_level."""

    @pytest.mark.parametrize(
        ("score", "level"),
        [
            (5.0, PriorityLevel.HIGH),
            (4.0, PriorityLevel.HIGH),
            (3.9, PriorityLevel.MEDIUM),
            (2.5, PriorityLevel.MEDIUM),
            (2.4, PriorityLevel.LOW),
            (1.0, PriorityLevel.LOW),
            (0.0, PriorityLevel.LOW),
        ],
    )
    def test_bands(self, score: float, level: PriorityLevel) -> None:
        """Lower bounds are inclusive."""
        assert compute_priority_level(score) == level


@pytest.mark.unit
class TestComputeDeadline:
    """Tests for compute_deadline."""

    @pytest.mark.parametrize(
        ("level", "days"),
        [(PriorityLevel.HIGH, 2), (PriorityLevel.MEDIUM, 4), (PriorityLevel.LOW, 7)],
    )
    def test_days_per_level(self, level: PriorityLevel, days: int) -> None:
        """Each level has a fixed delay."""
        assert compute_deadline(CREATED, level) == CREATED + timedelta(days=days)

    def test_accepts_wire_value(self) -> None:
        """The wire string resolves to its level."""
        assert compute_deadline(CREATED, "Faible") == CREATED + timedelta(days=7)

    def test_unknown_level_falls_back_to_shortest(self) -> None:
        """Unrecognized levels get the HIGH delay."""
        assert compute_deadline(CREATED, "Critique") == CREATED + timedelta(days=2)


@pytest.mark.unit
class TestAssessPriority:
    """Tests for assess_priority and preview_priority."""

    def test_assess_all_fives(self) -> None:
        """Highest answers give HIGH with a 2-day deadline."""
        assessment = assess_priority(5, 5, 5, 5, created_at=CREATED)

        assert assessment.score == 5.0
        assert assessment.level == PriorityLevel.HIGH
        assert assessment.deadline == CREATED + timedelta(days=2)

    def test_assess_medium(self) -> None:
        """3.0 is MEDIUM with a 4-day deadline."""
        assessment = assess_priority(5, 5, 1, 1, created_at=CREATED)

        assert assessment.level == PriorityLevel.MEDIUM
        assert assessment.deadline == CREATED + timedelta(days=4)

    def test_preview_counts_missing_as_zero(self) -> None:
        """Unanswered questions contribute nothing."""
        assert preview_priority(5, None, None, None) == (1.5, PriorityLevel.LOW)

    def test_preview_with_no_answers(self) -> None:
        """Nothing answered yet previews as 0.0 LOW."""
        assert preview_priority(None, None, None, None) == (0.0, PriorityLevel.LOW)
