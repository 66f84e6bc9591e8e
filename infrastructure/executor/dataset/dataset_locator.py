from __future__ import annotations
import logging
import os
from dataclasses import dataclass

import httpx

from domain.exceptions import SchemaApplicationError
from domain.models.catalog import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetLocator:
    datasets_root: str  # ex: "datasets"
    timeout_s: float = 60.0

    def csv_path(self, dataset: Dataset) -> str:
        return os.path.join(self.datasets_root, dataset.filename)

    async def fetch(self, dataset: Dataset) -> bytes:
        """Retourne le CSV du dataset, téléchargé une seule fois dans datasets_root."""
        path = self.csv_path(dataset)
        if os.path.isfile(path):
            with open(path, "rb") as fh:
                return fh.read()

        logger.info("Downloading dataset %s from %s", dataset.id, dataset.url)
        try:
            async with httpx.AsyncClient(follow_redirects=True) as client:
                response = await client.get(dataset.url, timeout=self.timeout_s)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise SchemaApplicationError(f"Error loading dataset: {e}") from e

        os.makedirs(self.datasets_root, exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(response.content)
        return response.content
