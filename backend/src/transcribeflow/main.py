"""TranscribeFlow Backend - Main FastAPI Application

Document transcription workflow: users upload image files, transcribers
claim and transcribe them, administrators approve or reject the result.

This module creates and configures the FastAPI application, including:
- API routers (auth, users, files) and the health probe
- Middleware (request ID correlation, CORS)
- Exception handlers mapping domain errors to HTTP responses
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import init_db
from .domain.errors import (
    Conflict,
    Forbidden,
    InvalidState,
    NotFound,
    StoreError,
    ValidationError,
    WorkflowError,
)
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router
from .auth.router import router as auth_router
from .auth.session import AuthError
from .files.router import router as files_router
from .users.router import router as users_router

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

_ERROR_STATUS = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Forbidden: status.HTTP_403_FORBIDDEN,
    InvalidState: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_HTTP_ERROR_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    409: "conflict",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the bootstrap admin on startup."""
    logger.info("TranscribeFlow API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    init_db()

    yield

    logger.info("TranscribeFlow API shutting down...")


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def workflow_error_handler(request: Request, exc: WorkflowError) -> JSONResponse:
    """Map domain errors to their HTTP status.

    Store failures are logged in full but answered with a generic message.
    """
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.code,
                "message": "A database error occurred. Please try again later.",
            },
        )

    content = {"error": exc.code, "message": exc.message}
    if isinstance(exc, InvalidState):
        content["current_status"] = exc.current_status
    return JSONResponse(status_code=status_code, content=content)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": exc.code, "message": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            "message": exc.detail,
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    logger.warning(f"Validation error on {request.method} {request.url.path}")
    errors = exc.errors()
    message = errors[0].get("msg", "Request validation failed") if errors else "Request validation failed"
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": message,
            "details": [
                {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
                for error in errors
            ],
        },
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database errors that escaped a repository.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, handlers and routers."""
    is_production = settings.ENVIRONMENT == "production"

    app = FastAPI(
        title="TranscribeFlow API",
        description="Document transcription workflow: upload, claim, transcribe, approve",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        lifespan=lifespan,
    )

    # Request ID Middleware (must be first for proper correlation)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.add_exception_handler(WorkflowError, workflow_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(observability_router)
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(files_router, prefix=API_PREFIX)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": "TranscribeFlow API",
            "version": "0.1.0",
            "docs": None if is_production else "/docs",
            "health": "/health",
        }

    return app


app = create_app()
