# guestbook/app/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from guestbook.core.config import settings
from guestbook.core.database import engine, wait_for_db
from guestbook.create_tables import init_db
from guestbook.app.routers import entries, auth, profile, domain
from guestbook.core.rate_limit import init_rate_limiter, close_rate_limiter
from guestbook.core.exceptions import GuestbookError
from guestbook.app.exception_handlers import guestbook_exception_handler, general_exception_handler

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        # 1. Wait for the database
        await wait_for_db()

        # 2. Schema bootstrap (dev / single-node deployments)
        if settings.AUTO_CREATE_TABLES:
            await init_db()

        # 3. Redis-backed rate limiter
        if settings.RATE_LIMIT_ENABLED:
            await init_rate_limiter()
    except Exception as e:
        logger.error(f"[lifespan] Startup failure: {e}")
        raise

    yield

    if settings.RATE_LIMIT_ENABLED:
        await close_rate_limiter()
    await engine.dispose()
    logger.info("[lifespan] Shutdown complete")

tags_metadata = [
    {"name": "entries", "description": "Guestbook entries: sign, list, like, moderate"},
    {"name": "auth", "description": "Owner accounts"},
    {"name": "profile", "description": "Presentation and moderation settings"},
    {"name": "domain", "description": "Custom domains"},
]

app = FastAPI(
    title="Guestbook API",
    description="Per-user guestbooks with threaded, moderated entries",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=tags_metadata
)

# Prometheus Metrics (Expose /metrics)
Instrumentator().instrument(app).expose(app)

if settings.DEBUG:
    # Any localhost port in development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:[0-9]+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_exception_handler(GuestbookError, guestbook_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

@app.get("/")
def read_root():
    return {
        "status": "active",
        "env": settings.ENVIRONMENT,
    }

app.include_router(auth.router, prefix="/api/v1/auth")
app.include_router(entries.router, prefix="/api/v1")
app.include_router(profile.router, prefix="/api/v1")
app.include_router(domain.router, prefix="/api/v1")
