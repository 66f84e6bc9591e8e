from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.core.deps import get_generation_service
from domain.exceptions import ProxyError, ValidationError
from domain.services.generation_service import GenerationService

router = APIRouter(prefix="/api", tags=["generation"])
logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    prompt: str = ""
    api_key: Optional[str] = Field(default=None, alias="apiKey")

    model_config = {"populate_by_name": True}


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": {"message": message}}, status_code=status_code)


@router.post("/generate")
async def generate(
    req: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
):
    try:
        data = await service.generate(req.prompt, req.api_key)
    except ValidationError as e:
        return _error(str(e), 400)
    except ProxyError as e:
        return JSONResponse(e.payload, status_code=e.status_code)
    except Exception as e:
        logger.exception("Generation proxy failed")
        return _error(str(e) or "Internal Server Error", 500)
    return data
