"""
errors.py
---------
Error taxonomy for the intake pipeline.

    ValidationError  - client sent a malformed submission (HTTP 400).
    StorageError     - the document store call failed (HTTP 500).
    NotifyError      - the admin notification failed (logged only).
"""


class IntakeError(Exception):
    """Base class for all intake pipeline errors."""


class ValidationError(IntakeError):
    """
    Raised by the validation gate.

    Attributes:
        errors: List of ``{"field": ..., "message": ...}`` dicts, one per failed field.
    """

    def __init__(self, errors: list[dict]):
        self.errors = errors
        fields = ", ".join(str(e["field"]) for e in errors)
        super().__init__(f"Invalid submission: {fields}")


class StorageError(IntakeError):
    """Raised when a read or write against the document store fails."""


class NotifyError(IntakeError):
    """Raised when the admin notification could not be delivered."""
