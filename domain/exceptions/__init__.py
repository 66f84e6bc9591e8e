from .base import DomainError

from .generation import (
    ValidationError,
    ProxyError,
    MalformedResponseError,
)

from .execution import (
    SchemaApplicationError,
    ExecutionError,
    ExecutionEnvironmentError,
)

from .session import (
    SessionNotFound,
    SessionBusyError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "ProxyError",
    "MalformedResponseError",
    "SchemaApplicationError",
    "ExecutionError",
    "ExecutionEnvironmentError",
    "SessionNotFound",
    "SessionBusyError",
]
