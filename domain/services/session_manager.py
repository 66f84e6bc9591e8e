from __future__ import annotations

import logging
from typing import Dict, List
from uuid import UUID

from domain.exceptions import ExecutionEnvironmentError, SessionNotFound, ValidationError
from domain.models.challenge import ChallengeKind
from domain.services.generation_service import GenerationService
from domain.services.session_service import InterviewSession, PythonInterviewSession, SqlInterviewSession
from infrastructure.executor import DatasetLocator, PythonExecutorConfig, SqliteExecutorConfig, make_executor


class SessionManager:
    """In-memory registry of interview sessions. Nothing outlives the process."""

    def __init__(
        self,
        generator: GenerationService,
        locator: DatasetLocator,
        sqlite_config: SqliteExecutorConfig | None = None,
        python_config: PythonExecutorConfig | None = None,
    ):
        self.generator = generator
        self.locator = locator
        self.sqlite_config = sqlite_config or SqliteExecutorConfig()
        self.python_config = python_config or PythonExecutorConfig()
        self._sessions: Dict[UUID, InterviewSession] = {}
        self.logger = logging.getLogger(__name__)

    def build(self, kind: ChallengeKind) -> InterviewSession:
        if kind == "sql":
            env = make_executor("sql", sqlite_config=self.sqlite_config)
            return SqlInterviewSession(env, self.generator)
        if kind == "python":
            env = make_executor("python", python_config=self.python_config)
            return PythonInterviewSession(env, self.generator, self.locator)
        raise ValidationError(f"Unknown challenge kind '{kind}'.")

    async def create(self, kind: ChallengeKind) -> InterviewSession:
        session = self.build(kind)
        self._sessions[session.id] = session
        try:
            await session.start()
        except ExecutionEnvironmentError:
            # kept so the client can display the failure reason
            self.logger.error("Session %s started in failed state", session.id)
        return session

    def get(self, session_id: UUID) -> InterviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def delete(self, session_id: UUID) -> None:
        session = self.get(session_id)
        session.close()
        del self._sessions[session_id]

    def list_ids(self) -> List[UUID]:
        return list(self._sessions)

    def close_all(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
