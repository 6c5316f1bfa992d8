#!/usr/bin/env python3
"""
Engine exceptions.

Judge failures, reconciliation contract violations and rejected edits all
derive from EngineException so callers can scope failures to one candidate.
"""


class EngineException(Exception):
    """Base exception for engine errors."""
    pass


class JudgeResponseError(EngineException):
    """Raised when the judge returns malformed or schema-invalid output."""
    pass


class JudgeUnavailableError(EngineException):
    """Raised when a judge operation keeps failing after all retries."""

    def __init__(self, operation: str, attempts: int):
        self.operation = operation
        self.attempts = attempts
        super().__init__(
            f"The {operation} service is temporarily unavailable after "
            f"{attempts} attempts. Please try again later."
        )


class ReconciliationError(EngineException):
    """Raised when a judge response cannot be reconciled into a result."""
    pass


class RequirementNotFoundError(EngineException):
    """Raised when an edit targets a requirement id that does not exist."""
    pass


class RequirementEditError(EngineException):
    """Raised when a requirement edit is invalid."""
    pass


class ProtectedRequirementError(RequirementEditError):
    """Raised when deleting a requirement that was not added by a user."""
    pass


class ManualEditError(EngineException):
    """Raised when a manual score override is invalid."""
    pass
