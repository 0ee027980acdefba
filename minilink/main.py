"""FastAPI application factory and configuration."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minilink.config import settings
from minilink.database import Database
from minilink.exceptions import MinilinkError
from minilink.schemas.common import ErrorDetail, ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "minilink"
VERSION = "1.0.0"

OPENAPI_TAGS = [
    {"name": "url", "description": "URL shortening and management endpoints"},
    {"name": "users", "description": "User management endpoints"},
]


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL."""
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(f"Starting Minilink in {settings.ENVIRONMENT} mode")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[-1]}")  # Hide credentials
    database = Database()
    if settings.CREATE_TABLES_ON_STARTUP:
        await database.create_tables()
    app.state.database = database
    yield
    # Shutdown
    logger.info("Shutting down Minilink")
    await database.close()


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def minilink_error_handler(request: Request, exc: MinilinkError) -> JSONResponse:
    """Render service errors in the standard error format."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} - {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.code} - {exc.message}")
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed or missing request fields as 400."""
    fields = [".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()]
    logger.warning(f"{request.method} {request.url.path} invalid request: {fields}")
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Request is missing required fields or contains invalid values",
        {"fields": fields},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler that hides internal details from clients."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Internal Server Error",
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="Minilink API",
        description="API documentation for URL shortening service",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(MinilinkError, minilink_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Health check endpoint
    @app.get("/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service=SERVICE_NAME,
            version=VERSION,
            environment=settings.ENVIRONMENT,
        )

    # Mount routes; the catch-all redirect router goes last
    from minilink.routes import redirect, urls, users

    app.include_router(urls.router, tags=["url"])
    app.include_router(users.router, tags=["users"])
    app.include_router(redirect.router, tags=["url"])

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "minilink.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
