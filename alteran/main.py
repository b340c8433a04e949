"""alteran.tech: FastAPI application entry point."""

import signal
import threading
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

# CRITICAL ORDER: configure_structlog MUST be called before all other app imports
# to avoid the structlog cache pitfall (structlog caches the processor chain on first use).
from alteran.core.logging import configure_structlog
from alteran.core.config import get_settings as _get_settings_early

_early_settings = _get_settings_early()
configure_structlog(
    log_level="DEBUG" if _early_settings.debug else "INFO",
    json_logs=not _early_settings.debug,
    sql_echo=_early_settings.sql_echo,
)

import structlog

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from alteran.api.routes import api_router
from alteran.core.config import get_settings
from alteran.core.exceptions import AlteranError
from alteran.db import close_db, init_db
from alteran.db.seed import seed_demo_projects
from alteran.middleware.admin_gate import setup_admin_gate
from alteran.middleware.correlation import get_correlation_id, setup_correlation_middleware
from alteran.web import admin, pages
from alteran.web.templating import render_response

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # SIGTERM flips this so /api/health answers 503 while connections drain
    app.state.shutting_down = False

    def handle_sigterm(signum, frame):
        app.state.shutting_down = True
        logger.info("sigterm_received", action="health_check_503_draining_connections")

    # Signal handlers can only be installed from the main thread
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, handle_sigterm)

    settings = get_settings()
    logger.info("startup_begin", app_name=settings.app_name, debug=settings.debug)

    await init_db()
    logger.info("db_initialized")

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    if settings.seed_demo_data:
        await seed_demo_projects()

    yield

    logger.info("shutdown_begin")
    await close_db()
    logger.info("shutdown_complete")


def _wants_html(request: Request) -> bool:
    return not request.url.path.startswith("/api/")


def _error_response(request: Request, status_code: int, message: str, debug_id: str) -> Response:
    if status_code == 404 and _wants_html(request):
        return render_response("404.html", status_code=404, message=None)
    return JSONResponse(status_code=status_code, content={"error": message, "debug_id": debug_id})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Global exception handler for HTTPException with debug_id tracking.

    Logs errors server-side with full context, returns sanitized response to client.
    """
    debug_id = str(uuid.uuid4())

    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        detail=exc.detail,
    )

    response = _error_response(request, exc.status_code, str(exc.detail), debug_id)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed or missing request fields are a plain 400, not FastAPI's 422."""
    debug_id = str(uuid.uuid4())
    errors = exc.errors()

    logger.warning(
        "request_validation_failed",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        errors=[{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in errors],
    )

    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {field} {first.get('msg', '')}".strip() if field else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message, "debug_id": debug_id})


async def alteran_error_handler(request: Request, exc: AlteranError) -> Response:
    """Map application errors (validation, not found, upstream API) onto their status."""
    debug_id = str(uuid.uuid4())

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "application_error",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        error=exc.message,
    )

    return _error_response(request, exc.status_code, exc.message, debug_id)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled errors with debug_id tracking.

    Logs full exception with traceback, returns generic 500 to client.
    """
    debug_id = str(uuid.uuid4())

    logger.error(
        "unhandled_exception",
        debug_id=debug_id,
        correlation_id=get_correlation_id(),
        path=request.url.path,
        method=request.method,
        user_id=getattr(request.state, "user_id", None),
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )

    # Return generic 500 (no internal details leaked)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "debug_id": debug_id},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Portfolio site with an admin CMS",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Registered first so it runs inside the correlation middleware
    setup_admin_gate(app)

    # Correlation ID middleware (runs first on incoming requests)
    setup_correlation_middleware(app)

    # Exception handlers
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(AlteranError)(alteran_error_handler)
    app.exception_handler(Exception)(generic_exception_handler)

    app.include_router(api_router, prefix="/api")
    app.include_router(admin.router)
    app.include_router(pages.router)

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "alteran.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
