"""
Spotify Ranker — FastAPI application entry-point.

Run with:
    uvicorn ranker.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import ranker.models  # noqa: F401  (registers every table on Base.metadata)
from ranker.config import settings
from ranker.database import Base, engine
from ranker.errors import UpstreamError

# ── Import routers ──
from ranker.routers import (
    activity,
    albums,
    auth,
    avatar,
    comments,
    ratings,
    spotify,
    user_comments,
    user_ratings,
    users,
)
from ranker.services.cache import TimeBoxedCache

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables and the process-wide cache on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.cache = TimeBoxedCache(ttl=settings.CACHE_TTL_SECONDS)
    logger.info(f"{settings.APP_NAME} started")
    yield
    app.state.cache.clear()


app = FastAPI(
    title=settings.APP_NAME,
    description="Rate Spotify albums, rate each other, and watch the tier list move.",
    version="0.1.0",
    lifespan=lifespan,
)


# ── Error mapping ──
@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    return JSONResponse(status_code=502, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        message = str(first.get("msg", message)).removeprefix("Value error, ")
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        if field:
            message = f"{field}: {message}"
    return JSONResponse(status_code=400, content={"detail": message})


# ── Register API routers (the /users/{user_id} catch-all goes last) ──
app.include_router(auth.router)
app.include_router(albums.router)
app.include_router(ratings.router)
app.include_router(comments.router)
app.include_router(user_ratings.router)
app.include_router(user_comments.router)
app.include_router(activity.router)
app.include_router(avatar.router)
app.include_router(spotify.router)
app.include_router(users.router)


@app.get("/")
async def health():
    return {"status": "ok", "app": settings.APP_NAME}
