"""
Domain errors for start-list scheduling.

Every error carries a stable ``code`` so the shell layers can surface it
without parsing messages.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for start-list domain errors."""

    default_code = "domain_error"

    def __init__(self, message: str, code: str | None = None, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.field = field


class ValidationError(DomainError):
    """Malformed or constraint-violating input."""

    default_code = "validation_error"


class StateError(DomainError):
    """Operation attempted against a draft in the wrong lifecycle state."""

    default_code = "invalid_state"


class NotFoundError(DomainError):
    """No start list exists for the requested race."""

    default_code = "start_list_not_found"
