"""Custom exceptions for the Ticket Intake flow."""


class IntakeError(Exception):
    """Base exception for Ticket Intake errors."""


class IntakeValidationError(IntakeError):
    """One or more fields are missing or invalid; the step cannot advance."""

    def __init__(self, fields: dict[str, str]) -> None:
        super().__init__("Invalid fields: " + ", ".join(sorted(fields)))
        self.fields = fields


class IntakeStepError(IntakeError):
    """Operation is not allowed at the current step."""
