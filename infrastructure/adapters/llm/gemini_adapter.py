from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from domain.exceptions import ProxyError
from domain.ports.llm import LLMProviderPort

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiAdapter(LLMProviderPort):
    def __init__(
        self,
        model_name: str = "gemini-2.0-flash-exp",
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: Optional[float] = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model_name = model_name
        self.url = f"{base_url.rstrip('/')}/models/{model_name}:generateContent"
        self.timeout_s = timeout_s
        self.transport = transport

    async def generate_content(self, prompt: str, api_key: str) -> Dict[str, Any]:
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.post(
                self.url,
                params={"key": api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_s,
            )

        try:
            data = response.json()
        except ValueError:
            data = {"error": {"message": response.text or f"HTTP {response.status_code}"}}

        if response.is_error:
            message = _error_message(data) or f"HTTP {response.status_code}"
            logger.error("Gemini request failed (%s): %s", response.status_code, message)
            raise ProxyError(message, status_code=response.status_code, payload=data)

        return data


def _error_message(data: Any) -> Optional[str]:
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        msg = data["error"].get("message")
        return str(msg) if msg else None
    return None
