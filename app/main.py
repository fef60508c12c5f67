"""
BoweryConnect Crisis API

FastAPI application entry point that ties all components together.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.config import settings
from app.api.routes import chat, health, resources
from app.api.routes.chat import fallback_json_response
from app.core.resources.catalog import get_catalog
from app.core.triage.orchestrator import CrisisChatService
from app.core.triage.types import CompletionParams
from app.infra.claude import ClaudeClient


def setup_logging() -> None:
    """Configure logging based on environment."""
    log_level = logging.DEBUG if settings.debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # === STARTUP ===
    setup_logging()
    logger.info(f"Starting {settings.service_name} in {settings.app_env} mode")

    # Set health check start time
    health.set_start_time()

    # Static tables: fail fast if they are missing or malformed
    catalog = get_catalog(settings.data_dir)

    claude = ClaudeClient()
    app.state.catalog = catalog
    app.state.crisis_service = CrisisChatService(
        llm=claude,
        catalog=catalog,
        params=CompletionParams(
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
        ),
    )

    logger.info(f"Application ready at http://{settings.host}:{settings.port}")

    yield

    # === SHUTDOWN ===
    logger.info("Shutting down application...")

    await claude.close()
    logger.info("Claude client closed")

    logger.info("Shutdown complete")


app = FastAPI(
    title="BoweryConnect Crisis API",
    description="""
    Crisis-support chat for people experiencing homelessness in NYC.

    ## Features
    - 🆘 Immediate-danger detection with a fixed hotline response (no AI)
    - 🤖 Claude-powered supportive replies, adapted to emotion, language and location
    - 🧭 Urgency, follow-up actions and resource categories for every reply
    - 📍 Shelter, food, medical, mental health, tech and warmth resources
    """,
    version=health.VERSION,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    openapi_url="/openapi.json" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials="*" not in settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Crisis chat clients always get a supportive message to show.
    """
    logger.warning(f"Validation error on {request.url.path}: {jsonable_errors(exc)}")

    if request.url.path.endswith("/crisis-chat"):
        return fallback_json_response(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=jsonable_errors(exc),
        )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "detail": jsonable_errors(exc),
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")

    if request.url.path.endswith("/crisis-chat"):
        return fallback_json_response()

    # Don't expose internal errors in production
    detail = str(exc) if settings.is_development else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": detail,
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw input or exception objects."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    """Log request duration in debug mode."""
    start_time = time.time()

    try:
        return await call_next(request)
    finally:
        if settings.debug:
            duration = time.time() - start_time
            logger.debug(
                f"{request.method} {request.url.path} "
                f"completed in {duration:.3f}s"
            )


# Health check routes
app.include_router(health.router)

# Crisis chat and resource routes, also under /api for older clients
app.include_router(chat.router)
app.include_router(resources.router)
app.include_router(chat.router, prefix="/api", include_in_schema=False)
app.include_router(resources.router, prefix="/api", include_in_schema=False)


@app.get("/", tags=["Root"])
async def root() -> dict:
    """
    Root endpoint.

    Returns basic API information.
    """
    return {
        "name": settings.service_name,
        "version": health.VERSION,
        "status": "running",
        "environment": settings.app_env,
        "docs": "/docs" if settings.is_development else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development and settings.debug,
        log_level="debug" if settings.debug else "info",
    )
