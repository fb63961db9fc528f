"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.core.config import settings
from app.services.auth_cache import AuthCache
from app.services.authenticator import Authenticator

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the authentication cache for the lifetime of the process."""
    cache = AuthCache()
    app.state.auth_cache = cache
    app.state.authenticator = Authenticator(
        cache, ttl_seconds=settings.AUTH_CACHE_TTL_SECONDS
    )
    logger.info(
        "Authentication cache ready: ttl_seconds=%s", settings.AUTH_CACHE_TTL_SECONDS
    )
    try:
        yield
    finally:
        cache.clear()


app = FastAPI(
    title="RBAC API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "RBAC API"}
