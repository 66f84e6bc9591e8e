from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.core.settings import Settings
from app.core.container import Container
from domain.services.generation_service import GenerationService
from domain.services.session_manager import SessionManager


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_container() -> Container:
    return Container(get_settings())


def get_generation_service(container: Container = Depends(get_container)) -> GenerationService:
    return container.generation_service


def get_session_manager(container: Container = Depends(get_container)) -> SessionManager:
    return container.sessions
