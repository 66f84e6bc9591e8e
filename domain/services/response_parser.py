"""
Turns the raw Gemini envelope into a canonical Challenge.

Two document shapes are accepted for SQL challenges: the nested one
(``questions: [...]``) and the older flat one (``question``/``solution_sql`` at
the top level). Both are resolved here, once, so the rest of the code only ever
sees ``Challenge.questions``.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from domain.exceptions import MalformedResponseError, ProxyError
from domain.models.challenge import Challenge, ChallengeKind, Question

_FENCE_RE = re.compile(r"```json\s*|\s*```")


class _SqlQuestionDoc(BaseModel):
    title: str = ""
    difficulty: str = ""
    tags: List[str] = Field(default_factory=list)
    question: str
    solution_sql: str
    explanation: str = ""

    @model_validator(mode="before")
    @classmethod
    def _null_tags(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("tags") is None:
            data = {**data, "tags": []}
        return data


class _SqlChallengeDoc(BaseModel):
    schema_sql: str
    data_sql: str
    questions: List[_SqlQuestionDoc] = Field(min_length=1)

    @model_validator(mode="before")
    @classmethod
    def _wrap_flat_question(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("questions") and data.get("question"):
            flat = {k: data.get(k) for k in ("title", "difficulty", "tags", "question", "solution_sql", "explanation")}
            data = {**data, "questions": [{k: v for k, v in flat.items() if v is not None}]}
        return data


class _PythonChallengeDoc(BaseModel):
    title: str = ""
    dataset_description: Optional[str] = None
    task_details: Optional[str] = None
    question: str = ""
    starter_code: str
    solution_code: str
    explanation: str = ""
    difficulty: str = ""
    tags: List[str] = Field(default_factory=list)


def extract_text(envelope: Dict[str, Any]) -> str:
    if not isinstance(envelope, dict):
        raise ProxyError("Unexpected response from the generation service.")
    error = envelope.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise ProxyError(message or "Generation failed.")
    try:
        return envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProxyError(f"Unexpected response from the generation service: missing {e}") from e


def clean_json(text: str) -> str:
    cleaned = _FENCE_RE.sub("", text).strip()
    return cleaned.replace("\\'", "'")


def parse_document(text: str) -> Dict[str, Any]:
    try:
        doc = json.loads(clean_json(text))
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"invalid JSON ({e.msg} at line {e.lineno})") from e
    if not isinstance(doc, dict):
        raise MalformedResponseError("expected a JSON object")
    return doc


def _describe(e: PydanticValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "document"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def to_sql_challenge(doc: Dict[str, Any]) -> Challenge:
    try:
        parsed = _SqlChallengeDoc.model_validate(doc)
    except PydanticValidationError as e:
        raise MalformedResponseError(_describe(e)) from e

    questions = [
        Question(
            title=q.title,
            difficulty=q.difficulty,
            tags=list(q.tags),
            question=q.question,
            solution=q.solution_sql,
            explanation=q.explanation,
        )
        for q in parsed.questions
    ]
    return Challenge(kind="sql", questions=questions, schema_sql=parsed.schema_sql, data_sql=parsed.data_sql)


def to_python_challenge(doc: Dict[str, Any], dataset_id: Optional[str] = None) -> Challenge:
    try:
        parsed = _PythonChallengeDoc.model_validate(doc)
    except PydanticValidationError as e:
        raise MalformedResponseError(_describe(e)) from e

    question = Question(
        title=parsed.title,
        difficulty=parsed.difficulty,
        tags=list(parsed.tags),
        question=parsed.question,
        solution=parsed.solution_code,
        explanation=parsed.explanation,
        starter_code=parsed.starter_code,
        task_details=parsed.task_details,
    )
    return Challenge(
        kind="python",
        questions=[question],
        dataset_id=dataset_id,
        dataset_description=parsed.dataset_description,
    )


def parse_challenge(text: str, kind: ChallengeKind, dataset_id: Optional[str] = None) -> Challenge:
    doc = parse_document(text)
    if kind == "sql":
        return to_sql_challenge(doc)
    return to_python_challenge(doc, dataset_id=dataset_id)


def parse_envelope(envelope: Dict[str, Any], kind: ChallengeKind, dataset_id: Optional[str] = None) -> Challenge:
    return parse_challenge(extract_text(envelope), kind, dataset_id=dataset_id)
