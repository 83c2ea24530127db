"""FastAPI application factory for the Chat History API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config import Settings, settings
from src.database.engine import build_engine, build_session_factory, verify_connection
from src.exceptions import GENERIC_INTERNAL_ERROR, AppException
from src.logging_config import configure_logging
from src.middleware.request_id import format_context, request_context
from src.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)


def _make_lifespan(app_settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the connection pool once at startup and dispose it at shutdown.

        A failed connectivity check propagates and stops the server from starting.
        """
        engine = build_engine(app_settings)
        try:
            await verify_connection(engine)
        except Exception:
            logger.critical("Failed to initialize database", exc_info=True)
            await engine.dispose()
            raise
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Database connection pool closed")

    return lifespan


def _error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{"error": message}`` envelope."""
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    app_settings = app_settings or settings
    configure_logging(app_settings.log_level)

    application = FastAPI(
        title="Chat History API",
        description="Paginated, searchable read access to workflow chat history.",
        version="0.1.0",
        lifespan=_make_lifespan(app_settings),
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    application.state.settings = app_settings

    if not app_settings.allowed_origin:
        logger.warning("CHAT_URL is not set; every API request will be rejected with 403")

    # --- Middleware (last added = outermost in Starlette) ---

    # Origin/Referer allow-list — innermost, so denials are still logged and get CORS headers
    from src.middleware.origin_check import OriginCheckMiddleware

    application.add_middleware(OriginCheckMiddleware, allowed_origin=app_settings.allowed_origin)

    from src.middleware.request_id import RequestIdMiddleware

    application.add_middleware(RequestIdMiddleware)

    # CORS — outermost, echoes the single allowed origin
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.allowed_origin] if app_settings.allowed_origin else [],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # --- Routers ---
    from src.api.v1 import api_router

    application.include_router(api_router)

    # --- Exception Handlers ---

    @application.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        context = format_context(request_context(request))
        if exc.status_code >= 500:
            logger.error("Request failed: %s %s", exc.message, context, exc_info=exc)
            return _error_response(exc.status_code, GENERIC_INTERNAL_ERROR)
        logger.warning("Request rejected (%d): %s %s", exc.status_code, exc.message, context)
        return _error_response(exc.status_code, exc.message)

    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = "; ".join(
            f"{'.'.join(str(loc) for loc in err.get('loc', []))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return _error_response(400, message or "Invalid request")

    @application.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception("Unhandled exception: %s %s", exc, format_context(request_context(request)))
        return _error_response(500, GENERIC_INTERNAL_ERROR)

    # Health check
    @application.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok")

    return application


app = create_app()
