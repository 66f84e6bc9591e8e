from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

Row = Dict[str, Any]


@dataclass
class ExecutionResult:
    success: bool
    output: Any  # list[Row] for SQL, captured stdout for Python
    columns: List[str] = field(default_factory=list)
    image: Optional[str] = None  # base64 PNG of the current figure
    execution_time_ms: float = 0.0
    error: Optional[str] = None

    @classmethod
    def ok(cls, output: Any, **kwargs: Any) -> "ExecutionResult":
        return cls(success=True, output=output, **kwargs)

    @classmethod
    def failed(cls, error: str, execution_time_ms: float = 0.0) -> "ExecutionResult":
        return cls(success=False, output=None, execution_time_ms=execution_time_ms, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "output": self.output,
            "columns": list(self.columns),
            "image": self.image,
            "execution_time_ms": self.execution_time_ms,
            "error": self.error,
        }


@dataclass
class LoadReport:
    statements_applied: int = 0
    statements_skipped: int = 0
    skipped_errors: List[str] = field(default_factory=list)
    previews: Dict[str, List[Row]] = field(default_factory=dict)
    files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statements_applied": self.statements_applied,
            "statements_skipped": self.statements_skipped,
            "skipped_errors": list(self.skipped_errors),
            "previews": self.previews,
            "files": list(self.files),
        }


class ExecutionEnvironmentPort(ABC):
    """One live interpreter instance, exclusively owned by one session."""

    @abstractmethod
    def start(self) -> None:
        """Acquire the interpreter. Raises ExecutionEnvironmentError."""
        raise NotImplementedError

    @abstractmethod
    def run(self, code: str) -> ExecutionResult:
        raise NotImplementedError

    @abstractmethod
    def reset(self) -> "ExecutionEnvironmentPort":
        """Return a fresh, started instance. The receiver is left untouched."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        raise NotImplementedError
