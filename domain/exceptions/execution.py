from __future__ import annotations

from domain.exceptions.base import DomainError


class SchemaApplicationError(DomainError):
    def __init__(self, reason: str):
        super().__init__(f"Could not apply challenge setup: {reason}")


class ExecutionError(DomainError):
    """User or reference code raised at runtime."""


class ExecutionEnvironmentError(DomainError):
    """The interpreter could not be acquired. Fatal for the session."""
