from __future__ import annotations

import sqlite3

from fastapi import APIRouter, Depends

from app.core.deps import get_session_manager, get_settings
from app.core.settings import Settings
from domain.models.catalog import DATASETS, DIFFICULTIES, SQL_MODES, STAGES
from domain.services.session_manager import SessionManager

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    settings: Settings = Depends(get_settings),
    sessions: SessionManager = Depends(get_session_manager),
):
    return {
        "status": "ok",
        "sqlite_version": sqlite3.sqlite_version,
        "gemini_model": settings.gemini_model,
        "server_key_configured": bool(settings.gemini_api_key),
        "active_sessions": len(sessions.list_ids()),
    }


@router.get("/catalog")
async def catalog():
    return {
        "modes": SQL_MODES,
        "difficulties": DIFFICULTIES,
        "stages": STAGES,
        "datasets": [
            {"id": d.id, "name": d.name, "description": d.description, "filename": d.filename}
            for d in DATASETS
        ],
    }
