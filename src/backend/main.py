"""
StoryVault Backend Application

Short-lived public stories with community voting. Stories drop out of every
public view once their chosen lifetime runs out.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from api.v1 import router as api_v1_router
from core.config import settings
from core.events import create_start_app_handler, create_stop_app_handler
from core.exceptions import StoryVaultError, ValidationError
from core.middleware import SecurityHeadersMiddleware

logger = structlog.get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await create_start_app_handler(app)()
    yield
    await create_stop_app_handler(app)()


async def storyvault_error_handler(request: Request, exc: StoryVaultError) -> JSONResponse:
    """Render a domain error with the status code of its kind."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log("request_failed", kind=exc.kind, code=exc.code, path=request.url.path, method=request.method)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are validation errors like any other."""
    return await storyvault_error_handler(
        request,
        ValidationError.from_errors("Invalid request", "INVALID_REQUEST", exc.errors()),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; the JSON body keeps CORS headers on 500 responses."""
    logger.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "kind": "internal",
            "message": "An internal server error occurred. Please try again later.",
            "details": {"error_type": type(exc).__name__} if settings.DEBUG else {},
        },
    )


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    docs_enabled = settings.DEBUG
    application = FastAPI(
        title=settings.APP_NAME,
        description="Short-lived public stories with community voting",
        version=API_VERSION,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of registration
    application.add_middleware(SecurityHeadersMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    application.add_middleware(GZipMiddleware, minimum_size=1000)

    application.add_exception_handler(StoryVaultError, storyvault_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_error_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    application.include_router(api_v1_router, prefix="/api/v1")
    return application


app = create_application()


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Liveness check. Does not touch the database."""
    return {"status": "healthy", "service": "storyvault-api"}


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    return {
        "name": settings.APP_NAME,
        "version": API_VERSION,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }
