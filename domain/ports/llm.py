from abc import ABC, abstractmethod
from typing import Any, Dict


class LLMProviderPort(ABC):
    @abstractmethod
    async def generate_content(self, prompt: str, api_key: str) -> Dict[str, Any]:
        """Envoie le prompt au fournisseur et retourne l'enveloppe JSON brute.

        Lève ProxyError si le fournisseur répond avec un statut non-2xx.
        """
        raise NotImplementedError
