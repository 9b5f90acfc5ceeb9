"""
Application entry point. FastAPI app with middleware and routers.
Run: uvicorn main:app --host 0.0.0.0 --port 3001
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import auth_router, health_router, settings_router
from core.config import Settings, get_settings
from core.database import Database
from core.exceptions import ServiceError
from core.middleware import CORS_ALLOW_HEADERS, RequestTimingMiddleware, SecureHeadersMiddleware
from core.security import TokenCodec
from models.schemas import ErrorResponse
from utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: create tables.
    Shutdown: close the connection pool.
    """
    settings: Settings = app.state.settings
    await app.state.database.create_all()
    logger.info(
        "startup",
        extra={
            "app": settings.APP_NAME,
            "env": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "store": app.state.database.url.get_backend_name(),
        },
    )
    yield
    await app.state.database.dispose()
    logger.info("shutdown", extra={"app": settings.APP_NAME})


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory for FastAPI app. Pass settings to override the environment in tests."""
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.APP_NAME,
        description="Account authentication and per-account map settings",
        version="1.0.0",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database.from_settings(settings)
    app.state.token_codec = TokenCodec.from_settings(settings)

    app.add_middleware(RequestTimingMiddleware, slow_request_ms=settings.SLOW_REQUEST_MS)
    app.add_middleware(SecureHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(settings_router)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("request_failed", extra={"path": request.url.path, "error": exc.message})
        return _error(exc.status_code, exc.message, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("invalid_request_body", extra={"path": request.url.path, "errors": len(exc.errors())})
        return _error(400, "Invalid request body")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", extra={"path": request.url.path})
        return _error(500, "Internal server error")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run(
        "main:app",
        host=s.HOST,
        port=s.PORT,
        reload=s.ENVIRONMENT == "development",
        log_level=s.LOG_LEVEL.lower(),
    )
