from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

ChallengeKind = Literal["sql", "python"]


@dataclass(frozen=True)
class Question:
    title: str
    difficulty: str
    question: str
    solution: str
    explanation: str = ""
    tags: List[str] = field(default_factory=list)
    starter_code: str = ""
    task_details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "difficulty": self.difficulty,
            "tags": list(self.tags),
            "question": self.question,
            "solution": self.solution,
            "explanation": self.explanation,
            "starter_code": self.starter_code,
            "task_details": self.task_details,
        }


@dataclass(frozen=True)
class Challenge:
    kind: ChallengeKind
    questions: List[Question]
    schema_sql: str = ""
    data_sql: str = ""
    dataset_id: Optional[str] = None
    dataset_description: Optional[str] = None

    def question_at(self, index: int) -> Question:
        return self.questions[index]

    @property
    def fingerprint(self) -> str:
        """Short stable id of the content, used by clients to key per-challenge widgets."""
        raw = json.dumps([self.kind, self.schema_sql, self.data_sql, [q.to_dict() for q in self.questions]])
        return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:12]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "fingerprint": self.fingerprint,
            "schema_sql": self.schema_sql,
            "data_sql": self.data_sql,
            "dataset_id": self.dataset_id,
            "dataset_description": self.dataset_description,
            "questions": [q.to_dict() for q in self.questions],
        }
