"""FastAPI web application for the tournament system."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.endpoints.system import router as system_router
from web.endpoints.tournaments import get_tournament_api, router as tournaments_router

logger: logging.Logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the stored tournament on startup."""
    provider = app.dependency_overrides.get(get_tournament_api, get_tournament_api)
    api = provider()
    logger.info(
        f"Tournament loaded: {len(api.manager.participants)} participants, "
        f"created={api.manager.config.created}"
    )

    yield

    logger.info("Shutting down tournament API")


def get_allowed_origins() -> list[str] | None:
    """Get CORS origins from environment or use development defaults."""
    env_origins: str | None = os.environ.get("ALLOWED_ORIGINS")
    if env_origins:
        origins = [origin.strip() for origin in env_origins.split(",")]
        return origins
    return None


# FastAPI app
app: FastAPI = FastAPI(
    title="Round-Robin Tournament Manager",
    description="Registration, fixtures, results and standings for round-robin tournaments",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware setup
allowed_origins: list[str] | None = get_allowed_origins()

if allowed_origins:

    logger.info(f"Setting CORS allowed origins: {allowed_origins}")

    # Production: Use specific origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:

    logger.info("No ALLOWED_ORIGINS set, using development CORS settings")

    # Development: Allow any localhost/127.0.0.1
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(system_router, prefix="/v1")
app.include_router(tournaments_router, prefix="/v1")
