from __future__ import annotations
from uuid import UUID

from domain.exceptions.base import DomainError


class SessionNotFound(DomainError):
    def __init__(self, session_id: UUID):
        super().__init__(f"Session not found (id={session_id})")


class SessionBusyError(DomainError):
    def __init__(self, state: str):
        super().__init__(f"Another action is still in progress (state={state})")
