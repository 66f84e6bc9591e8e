from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from domain.exceptions import ValidationError
from domain.ports.llm import LLMProviderPort
from domain.services.prompt_builder import require_prompt


class GenerationService:
    """Stateless relay between a prompt and the generative-AI provider."""

    def __init__(self, llm: LLMProviderPort, default_api_key: Optional[str] = None):
        self.llm = llm
        self.default_api_key = default_api_key or None
        self.logger = logging.getLogger(__name__)

    def resolve_api_key(self, api_key: Optional[str]) -> str:
        key = (api_key or "").strip() or self.default_api_key
        if not key:
            raise ValidationError("API Key is missing. Please provide one or configure the server.")
        return key

    async def generate(self, prompt: Optional[str], api_key: Optional[str] = None) -> Dict[str, Any]:
        """
        Retourne l'enveloppe brute du fournisseur.

        La clé fournie par l'appelant est prioritaire, sinon celle du serveur.
        Aucun appel n'est envoyé si aucune des deux n'est disponible.
        """
        key = self.resolve_api_key(api_key)
        text = require_prompt(prompt)
        self.logger.info("Forwarding prompt to provider (%d chars)", len(text))
        return await self.llm.generate_content(text, key)
