from __future__ import annotations

from typing import Any, Dict, Optional

from domain.exceptions.base import DomainError


class ValidationError(DomainError):
    """Bad or missing user input, raised before any network call."""


class ProxyError(DomainError):
    def __init__(self, message: str, status_code: int = 502, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload if payload is not None else {"error": {"message": message}}


class MalformedResponseError(DomainError):
    def __init__(self, reason: str):
        super().__init__(f"Malformed challenge document: {reason}")
