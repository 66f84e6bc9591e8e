from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.core.deps import get_session_manager
from app.routes.errors import http_error
from domain.exceptions import DomainError
from domain.models.catalog import STAGES
from domain.services.prompt_builder import GenerationParams
from domain.services.session_manager import SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


class SessionCreateIn(BaseModel):
    kind: Literal["sql", "python"] = "sql"


class ChallengeRequestIn(BaseModel):
    mode: Literal["manual", "auto", "company"] = "manual"
    topic: str = ""
    company: str = ""
    difficulty: str = "Medium"
    dataset: str = "titanic"
    stage: str = STAGES[0]
    api_key: Optional[str] = Field(default=None, alias="apiKey")

    model_config = {"populate_by_name": True}

    def to_params(self) -> GenerationParams:
        return GenerationParams(
            mode=self.mode,
            topic=self.topic,
            company=self.company,
            difficulty=self.difficulty,
            dataset=self.dataset,
            stage=self.stage,
        )


class CodeIn(BaseModel):
    code: str


@router.post("", status_code=201)
async def create_session(
    payload: SessionCreateIn,
    manager: SessionManager = Depends(get_session_manager),
):
    session = await manager.create(payload.kind)
    return session.snapshot()


@router.get("/{session_id}")
async def get_session(
    session_id: UUID,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        return manager.get(session_id).snapshot()
    except DomainError as e:
        raise http_error(e)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: UUID,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        manager.delete(session_id)
    except DomainError as e:
        raise http_error(e)
    return None


@router.post("/{session_id}/challenge")
async def generate_challenge(
    session_id: UUID,
    payload: ChallengeRequestIn,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        session = manager.get(session_id)
        await session.load_challenge(payload.to_params(), api_key=payload.api_key)
        return session.snapshot()
    except DomainError as e:
        raise http_error(e)


@router.post("/{session_id}/questions/{index}")
async def select_question(
    session_id: UUID,
    index: int,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        session = manager.get(session_id)
        await session.select_question(index)
        return session.snapshot()
    except DomainError as e:
        raise http_error(e)


@router.post("/{session_id}/run")
async def run_code(
    session_id: UUID,
    payload: CodeIn,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        session = manager.get(session_id)
        result = await session.run(payload.code)
        return result.to_dict()
    except DomainError as e:
        raise http_error(e)


@router.post("/{session_id}/submit")
async def submit_code(
    session_id: UUID,
    payload: CodeIn,
    manager: SessionManager = Depends(get_session_manager),
):
    try:
        session = manager.get(session_id)
        outcome = await session.submit(payload.code)
        return outcome.to_dict()
    except DomainError as e:
        raise http_error(e)
