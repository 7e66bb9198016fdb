"""
StudyFlow - Main FastAPI Application

This module creates and configures the FastAPI application exposing
question generation and content analysis.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.constants import APP_DESCRIPTION
from ..core.exceptions import LLMError, StudyFlowException
from .routes import generation, health

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.logging.level.value.upper()),
    format=settings.logging.format
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    logger.info(f"Starting {settings.app_name} API")
    logger.info(f"Environment: {settings.environment.value}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.llm.is_configured:
        logger.info(f"Completion model: {settings.llm.gemini_model}")
    else:
        logger.warning("No model API key configured - questions will come from templates only")

    yield

    logger.info(f"Shutting down {settings.app_name} API")


# Create FastAPI application
app = FastAPI(
    title=f"{settings.app_name} API",
    description=APP_DESCRIPTION,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None
)


# Security Middleware
if not settings.debug and not settings.is_testing:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=["localhost", "127.0.0.1", "testserver", settings.host]
    )


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.cors_origins,
    allow_credentials=settings.security.cors_allow_credentials,
    allow_methods=settings.security.cors_allow_methods,
    allow_headers=settings.security.cors_allow_headers,
)


# Custom Exception Handlers
@app.exception_handler(StudyFlowException)
async def studyflow_exception_handler(request: Request, exc: StudyFlowException) -> JSONResponse:
    """Map domain errors to JSON responses."""
    status_code = (
        status.HTTP_502_BAD_GATEWAY if isinstance(exc, LLMError)
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    logger.error(f"{exc} on {request.url.path}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: Any) -> JSONResponse:
    """Handle 404 errors with custom response."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Not Found",
            "message": f"The requested resource {request.url.path} was not found",
            "status_code": 404
        }
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc: Any) -> JSONResponse:
    """Handle 500 errors with custom response."""
    logger.error(f"Internal server error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "message": "An unexpected error occurred. Please try again later.",
            "status_code": 500
        }
    )


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log HTTP requests and responses."""
    start_time = time.time()
    logger.debug(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.debug(
        f"Response: {response.status_code} "
        f"({process_time:.3f}s) {request.method} {request.url.path}"
    )
    response.headers["X-Process-Time"] = str(process_time)
    response.headers["X-API-Version"] = settings.app_version
    return response


@app.get("/", response_model=Dict[str, Any])
async def root() -> Dict[str, Any]:
    """API welcome information."""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "version": settings.app_version,
        "description": APP_DESCRIPTION,
        "documentation": "/docs" if settings.debug else "Documentation disabled in production",
        "endpoints": {
            "health": "GET /api/health",
            "questions": "POST /api/generation/questions",
            "exam": "POST /api/generation/exam",
            "analyze": "POST /api/generation/analyze"
        }
    }


# Include routers
app.include_router(health.router, prefix="/api")
app.include_router(generation.router, prefix="/api")


def run() -> None:
    """Run the API with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "studyflow.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.logging.level.value.lower()
    )


if __name__ == "__main__":
    run()
