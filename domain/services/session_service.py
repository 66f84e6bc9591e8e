"""
Interview session state machine.

    uninitialized -> environment_loading -> ready
    ready | challenge_ready -> challenge_loading -> challenge_ready
    challenge_ready -> evaluating -> challenge_ready
    environment_loading -> environment_failed   (terminal)

A session owns exactly one live execution environment. Loading a challenge
builds a fresh environment next to the current one and swaps both the
challenge and the environment only once everything (generation, parsing,
schema/data, reference run) has succeeded. A failed load leaves the previous
challenge untouched.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Optional
from uuid import UUID, uuid4

from domain.exceptions import (
    ExecutionEnvironmentError,
    ExecutionError,
    SessionBusyError,
    ValidationError,
)
from domain.models.catalog import find_dataset
from domain.models.challenge import Challenge, ChallengeKind
from domain.models.evaluation import EvaluationOutcome
from domain.ports.executor import ExecutionEnvironmentPort, ExecutionResult, LoadReport
from domain.services.generation_service import GenerationService
from domain.services.prompt_builder import GenerationParams, build_prompt
from domain.services.response_parser import parse_envelope
from domain.services.result_comparison import feedback_for, results_match
from infrastructure.executor import DatasetLocator


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ENVIRONMENT_LOADING = "environment_loading"
    ENVIRONMENT_FAILED = "environment_failed"
    READY = "ready"
    CHALLENGE_LOADING = "challenge_loading"
    CHALLENGE_READY = "challenge_ready"
    EVALUATING = "evaluating"


_BUSY = (SessionState.ENVIRONMENT_LOADING, SessionState.CHALLENGE_LOADING, SessionState.EVALUATING)


class InterviewSession(ABC):
    kind: ClassVar[ChallengeKind]

    def __init__(
        self,
        environment: ExecutionEnvironmentPort,
        generator: GenerationService,
        session_id: Optional[UUID] = None,
    ):
        self.id = session_id or uuid4()
        self.environment = environment
        self.generator = generator
        self.logger = logging.getLogger(__name__)

        self.state = SessionState.UNINITIALIZED
        self.environment_error: Optional[str] = None

        self.challenge: Optional[Challenge] = None
        self.current_index = 0
        self.load_report: Optional[LoadReport] = None
        self.expected_result: Optional[ExecutionResult] = None
        self.last_result: Optional[ExecutionResult] = None
        self.last_outcome: Optional[EvaluationOutcome] = None
        self.feedback: Optional[str] = None
        self.last_error: Optional[str] = None

    # -------------------------
    # Guards
    # -------------------------
    def _require(self, *allowed: SessionState) -> None:
        if self.state == SessionState.ENVIRONMENT_FAILED:
            raise ExecutionEnvironmentError(self.environment_error or "Execution environment failed to load.")
        if self.state in _BUSY:
            raise SessionBusyError(self.state.value)
        if self.state not in allowed:
            if self.state == SessionState.READY:
                raise ValidationError("Generate a challenge first.")
            raise ValidationError(f"Action not allowed in state '{self.state.value}'.")

    # -------------------------
    # Variant hooks
    # -------------------------
    @abstractmethod
    async def _apply(self, environment: ExecutionEnvironmentPort, challenge: Challenge) -> LoadReport:
        """Load schema/data or dataset files into a fresh environment."""

    def _dataset_id(self, params: GenerationParams) -> Optional[str]:
        return None

    def _ready_message(self, params: GenerationParams) -> str:
        return "Challenge generated!"

    # -------------------------
    # Transitions
    # -------------------------
    async def start(self) -> None:
        self._require(SessionState.UNINITIALIZED)
        self.state = SessionState.ENVIRONMENT_LOADING
        try:
            await asyncio.to_thread(self.environment.start)
        except ExecutionEnvironmentError as e:
            self.logger.error("Environment failed for session %s: %s", self.id, e)
            self.environment_error = str(e)
            self.state = SessionState.ENVIRONMENT_FAILED
            raise
        self.state = SessionState.READY

    async def load_challenge(self, params: GenerationParams, api_key: Optional[str] = None) -> Challenge:
        self._require(SessionState.READY, SessionState.CHALLENGE_READY)
        previous = self.state
        try:
            prompt = build_prompt(self.kind, params)
        except ValidationError as e:
            self.feedback = str(e)
            raise

        self.state = SessionState.CHALLENGE_LOADING
        fresh: Optional[ExecutionEnvironmentPort] = None
        try:
            envelope = await self.generator.generate(prompt, api_key)
            challenge = parse_envelope(envelope, self.kind, dataset_id=self._dataset_id(params))

            fresh = await asyncio.to_thread(self.environment.reset)
            report = await self._apply(fresh, challenge)
            expected = await asyncio.to_thread(fresh.run, challenge.question_at(0).solution)
        except Exception as e:
            if fresh is not None:
                fresh.close()
            self.last_error = str(e)
            self.feedback = f"Generation failed: {e}"
            if isinstance(e, ExecutionEnvironmentError):
                self.environment_error = str(e)
                self.state = SessionState.ENVIRONMENT_FAILED
            else:
                self.state = previous
            self.logger.warning("Challenge load failed for session %s: %s", self.id, e)
            raise

        old = self.environment
        self.environment = fresh
        self.challenge = challenge
        self.current_index = 0
        self.load_report = report
        self.expected_result = expected
        self.last_result = None
        self.last_outcome = None
        self.last_error = None
        self.feedback = self._ready_message(params)
        self.state = SessionState.CHALLENGE_READY
        old.close()

        self.logger.info(
            "Session %s loaded %s challenge with %d question(s)", self.id, self.kind, len(challenge.questions)
        )
        return challenge

    async def select_question(self, index: int) -> ExecutionResult:
        self._require(SessionState.CHALLENGE_READY)
        if index < 0 or index >= len(self.challenge.questions):
            raise ValidationError(f"Question index out of range: {index}")

        self.state = SessionState.EVALUATING
        try:
            expected = await asyncio.to_thread(self.environment.run, self.challenge.question_at(index).solution)
        finally:
            self.state = SessionState.CHALLENGE_READY

        self.current_index = index
        self.expected_result = expected
        self.last_result = None
        self.last_outcome = None
        self.feedback = None
        return expected

    async def run(self, code: str) -> ExecutionResult:
        """Execute without grading. Raises ExecutionError when the code fails."""
        self._require(SessionState.CHALLENGE_READY)
        code = self._require_code(code)

        self.state = SessionState.EVALUATING
        try:
            result = await asyncio.to_thread(self.environment.run, code)
        finally:
            self.state = SessionState.CHALLENGE_READY

        self.last_result = result
        if not result.success:
            self.feedback = f"Error: {result.error}"
            raise ExecutionError(result.error or "Execution failed.")
        self.feedback = None
        return result

    async def submit(self, code: str) -> EvaluationOutcome:
        self._require(SessionState.CHALLENGE_READY)
        code = self._require_code(code)
        question = self.challenge.question_at(self.current_index)

        self.state = SessionState.EVALUATING
        try:
            # reference first: the user's code may mutate shared tables
            expected = await asyncio.to_thread(self.environment.run, question.solution)
            user = await asyncio.to_thread(self.environment.run, code)
        finally:
            self.state = SessionState.CHALLENGE_READY

        match = results_match(user, expected)
        outcome = EvaluationOutcome(
            question_index=self.current_index,
            match=match,
            feedback=feedback_for(match, user),
            user_result=user,
            expected_result=expected,
        )
        self.expected_result = expected
        self.last_result = user
        self.last_outcome = outcome
        self.feedback = outcome.feedback
        return outcome

    def close(self) -> None:
        self.environment.close()

    # -------------------------
    # Observability
    # -------------------------
    @staticmethod
    def _require_code(code: Optional[str]) -> str:
        if code is None or not code.strip():
            raise ValidationError("Please write some code first.")
        return code

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": str(self.id),
            "kind": self.kind,
            "state": self.state.value,
            "environment_error": self.environment_error,
            "challenge": self.challenge.to_dict() if self.challenge else None,
            "current_index": self.current_index,
            "question_count": len(self.challenge.questions) if self.challenge else 0,
            "load_report": self.load_report.to_dict() if self.load_report else None,
            "expected_result": self.expected_result.to_dict() if self.expected_result else None,
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "last_outcome": self.last_outcome.to_dict() if self.last_outcome else None,
            "feedback": self.feedback,
            "last_error": self.last_error,
        }


class SqlInterviewSession(InterviewSession):
    kind: ClassVar[ChallengeKind] = "sql"

    async def _apply(self, environment: ExecutionEnvironmentPort, challenge: Challenge) -> LoadReport:
        report = await asyncio.to_thread(environment.load, challenge.schema_sql, challenge.data_sql)
        if report.statements_skipped:
            self.logger.warning(
                "Session %s: %d data statement(s) skipped", self.id, report.statements_skipped
            )
        return report

    def _ready_message(self, params: GenerationParams) -> str:
        return "Interview Loop Ready!" if params.mode == "company" else "Challenge generated!"


class PythonInterviewSession(InterviewSession):
    kind: ClassVar[ChallengeKind] = "python"

    def __init__(
        self,
        environment: ExecutionEnvironmentPort,
        generator: GenerationService,
        locator: DatasetLocator,
        session_id: Optional[UUID] = None,
    ):
        super().__init__(environment, generator, session_id=session_id)
        self.locator = locator

    def _dataset_id(self, params: GenerationParams) -> Optional[str]:
        return params.dataset

    async def _apply(self, environment: ExecutionEnvironmentPort, challenge: Challenge) -> LoadReport:
        dataset = find_dataset(challenge.dataset_id or "")
        if dataset is None:
            raise ValidationError(f"Unknown dataset '{challenge.dataset_id}'.")
        content = await self.locator.fetch(dataset)
        return await asyncio.to_thread(environment.load, {dataset.filename: content})

