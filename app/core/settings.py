from __future__ import annotations

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash-exp"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    generation_timeout_s: Optional[float] = 120.0

    datasets_root: str = "datasets"
    dataset_timeout_s: float = 60.0

    isolate_sql_runs: bool = True
    preview_rows: int = 5

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]
