from __future__ import annotations

from fastapi import HTTPException

from domain.exceptions import (
    DomainError,
    ExecutionEnvironmentError,
    ExecutionError,
    MalformedResponseError,
    ProxyError,
    SchemaApplicationError,
    SessionBusyError,
    SessionNotFound,
    ValidationError,
)

_STATUS = (
    (ValidationError, 400),
    (SessionNotFound, 404),
    (SessionBusyError, 409),
    (MalformedResponseError, 422),
    (SchemaApplicationError, 422),
    (ExecutionError, 422),
    (ExecutionEnvironmentError, 503),
)


def http_error(e: DomainError) -> HTTPException:
    if isinstance(e, ProxyError):
        status = e.status_code if 400 <= e.status_code < 600 else 502
        return HTTPException(status_code=status, detail=str(e))
    for exc_type, status in _STATUS:
        if isinstance(e, exc_type):
            return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
