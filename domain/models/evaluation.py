from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from domain.ports.executor import ExecutionResult


@dataclass(frozen=True)
class EvaluationOutcome:
    question_index: int
    match: Optional[bool]  # None => the reference itself failed
    feedback: str
    user_result: ExecutionResult
    expected_result: ExecutionResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question_index": self.question_index,
            "match": self.match,
            "feedback": self.feedback,
            "user_result": self.user_result.to_dict(),
            "expected_result": self.expected_result.to_dict(),
        }
