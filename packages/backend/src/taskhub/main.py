"""FastAPI application factory.

create_app() returns a configured FastAPI instance. Lifespan manages
startup/shutdown (login timing warm-up, Redis, database engine).
Middleware, CORS, error handling and routers are all registered here.
"""

import asyncio
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskhub import __version__
from taskhub.api import api_router
from taskhub.config import settings
from taskhub.log import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "taskhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from taskhub.services.auth_service import warm_login_timing
    await asyncio.to_thread(warm_login_timing)

    from taskhub.cache import close_redis, init_redis
    try:
        await init_redis()
        logger.info("taskhub.redis_connected")
    except Exception as e:
        # Redis is optional; only rate limiting depends on it
        logger.warning("taskhub.redis_unavailable", error=str(e))

    yield

    logger.info("taskhub.shutdown")
    await close_redis()

    from taskhub.db.engine import engine
    await engine.dispose()


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log everything, tell the caller nothing."""
    logger.exception("request.unhandled_error", path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging(settings.log_level, json_output=settings.log_json)

    app = FastAPI(
        title="TaskHub",
        description="Multi-tenant task management API",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler

    from taskhub.middleware.rate_limit import RateLimitMiddleware
    from taskhub.middleware.request_id import RequestIdMiddleware
    from taskhub.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, unhandled_error)
    app.include_router(api_router)
    return app


# Default app instance (used by uvicorn: taskhub.main:app)
app = create_app()
