from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.deps import get_container, get_settings
from app.routes.generate import router as generate_router
from app.routes.health import router as health_router
from app.routes.sessions import router as sessions_router

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # release every live environment
    get_container().sessions.close_all()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Interview Pad", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(generate_router)
    app.include_router(sessions_router)

    return app


app = create_app()
