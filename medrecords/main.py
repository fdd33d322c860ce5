import asyncio
import logging
import time
from contextlib import asynccontextmanager, suppress
from datetime import datetime, timezone
from typing import Callable, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medrecords.api.deps import api_key
from medrecords.api.errors import register_exception_handlers
from medrecords.api.middleware.rate_limit import (
    InMemoryRateLimitStore,
    RateLimitMiddleware,
    RateLimitStore,
    run_sweeper,
)
from medrecords.api.middleware.request_logger import RequestLoggerMiddleware
from medrecords.api.routes import notes, patients, summaries
from medrecords.config import Settings, get_settings
from medrecords.db.database import check_connection, engine, init_db

logger = logging.getLogger(__name__)

_process_started = time.monotonic()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    # Keep SQL echo out of the request log unless DEBUG asks for it
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def create_app(
    settings: Optional[Settings] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
    clock: Callable[[], float] = time.time,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    store = rate_limit_store or InMemoryRateLimitStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await init_db()
        except Exception:
            logger.critical("Database initialisation failed, refusing to start", exc_info=True)
            raise

        sweeper = asyncio.create_task(
            run_sweeper(store, settings.RATE_LIMIT_WINDOW_SECONDS, clock)
        )
        logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
        try:
            yield
        finally:
            sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await sweeper
            await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Patients, clinical notes and summaries.",
        docs_url="/api-docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.rate_limit_store = store

    # Middleware added last runs first: request logger -> CORS -> rate limiter -> routes
    app.add_middleware(
        RateLimitMiddleware,
        store=store,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        path_prefix=settings.API_PREFIX,
        api_keys=settings.API_KEYS,
        clock=clock,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[
            "X-Request-ID",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
        ],
    )
    app.add_middleware(RequestLoggerMiddleware)

    register_exception_handlers(app)

    # API routes
    api_dependencies = [Depends(api_key)]
    app.include_router(patients.router, prefix=settings.API_PREFIX, tags=["Patients"], dependencies=api_dependencies)
    app.include_router(notes.router, prefix=settings.API_PREFIX, tags=["Notes"], dependencies=api_dependencies)
    app.include_router(summaries.router, prefix=settings.API_PREFIX, tags=["Summaries"], dependencies=api_dependencies)

    @app.get("/health", tags=["System"])
    async def health_check():
        db_status = "healthy" if await check_connection() else "unhealthy"
        return {
            "status": "ok" if db_status == "healthy" else "degraded",
            "database": db_status,
            "service": settings.APP_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - _process_started, 3),
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/", tags=["System"])
    async def root():
        prefix = settings.API_PREFIX
        return {
            "message": f"Welcome to the {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "endpoints": {
                "patients": f"{prefix}/patients",
                "notes": f"{prefix}/notes",
                "summaries": f"{prefix}/summaries",
                "health": "/health",
                "docs": "/api-docs",
            },
        }

    return app


app = create_app()
