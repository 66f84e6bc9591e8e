from __future__ import annotations

from app.core.settings import Settings
from domain.services.generation_service import GenerationService
from domain.services.session_manager import SessionManager

from infrastructure.adapters.llm.gemini_adapter import GeminiAdapter
from infrastructure.executor import DatasetLocator, SqliteExecutorConfig


class Container:
    def __init__(self, settings: Settings):
        self.settings = settings

        self.llm = GeminiAdapter(
            model_name=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_s=settings.generation_timeout_s,
        )
        self.generation_service = GenerationService(self.llm, default_api_key=settings.gemini_api_key)

        self.locator = DatasetLocator(settings.datasets_root, timeout_s=settings.dataset_timeout_s)

        self.sessions = SessionManager(
            generator=self.generation_service,
            locator=self.locator,
            sqlite_config=SqliteExecutorConfig(
                preview_rows=settings.preview_rows,
                isolate_runs=settings.isolate_sql_runs,
            ),
        )
