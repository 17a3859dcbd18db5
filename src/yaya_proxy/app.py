"""
src/yaya_proxy/app.py

FastAPI application factory for the YaYa transactions proxy.

This module wires together:
- Logging configuration (file-based under LOG_DIR)
- CORS and request logging middleware
- The transactions router under /api
- Error handlers mapping ApiError / 404 / unhandled errors to {"error": ...}

Run with:  uvicorn yaya_proxy.app:create_app --factory
"""

import logging
import traceback
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from yaya_proxy.api.transactions import router as transactions_router
from yaya_proxy.config import Settings
from yaya_proxy.errors import ApiError, BadUpstreamResponse
from yaya_proxy.logging_config import setup_logging
from yaya_proxy.services.transactions_service import build_transactions_service

logger = logging.getLogger("yaya_proxy")


def _error_response(status: int, message: str, settings: Settings, exc: Optional[BaseException] = None, details: Any = None) -> JSONResponse:
    content = {"error": message}
    if exc is not None and not settings.is_production:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        content["details"] = details if details is not None else {"type": type(exc).__name__, "message": str(exc)}
    return JSONResponse(status_code=status, content=content)


def register_error_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        logger.error("Error on %s %s: %s", request.method, request.url.path, exc.message)
        if isinstance(exc, BadUpstreamResponse) and exc.diagnostic:
            logger.error("Upstream diagnostic for %s: %s", request.url.path, exc.diagnostic[:500])
        return _error_response(exc.status, exc.public_message(), settings, exc, exc.details())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        logger.warning("HTTP %s on %s %s", exc.status_code, request.method, request.url.path)
        # an unsupported method on a known path is reported as an unknown route
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Not Found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = ", ".join(str(err.get("msg")) for err in exc.errors())
        logger.warning("Request validation failed on %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, "Internal server error", settings, exc)


def create_app(settings: Optional[Settings] = None, client: Optional[Any] = None) -> FastAPI:
    """
    Build the application. ``settings`` defaults to Settings.from_env(), which
    raises ConfigurationError when YaYa credentials are missing.
    """
    setup_logging()
    if settings is None:
        settings = Settings.from_env()

    service = build_transactions_service(settings, client=client)

    app = FastAPI(title="YaYa Transactions Proxy", version="1.0.0")
    app.state.settings = settings
    app.state.transactions_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.client_url],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Lightweight request logger to help trace proxy traffic.
        """
        response = await call_next(request)
        logger.info(
            "HTTP %s %s from %s -> %s",
            request.method,
            request.url.path,
            request.client.host if request.client else "?",
            response.status_code,
        )
        return response

    @app.get("/api/health")
    async def health():
        return {"status": "healthy", "mock": settings.use_mock}

    app.include_router(transactions_router, prefix="/api")
    register_error_handlers(app, settings)

    @app.on_event("startup")
    async def on_startup():
        logger.info(
            "YaYa proxy starting up (env=%s upstream=%s mock=%s)",
            settings.app_env,
            settings.api_base,
            settings.use_mock,
        )

    @app.on_event("shutdown")
    async def on_shutdown():
        await service.close()
        logger.info("YaYa proxy shutting down")

    return app
