"""
FastAPI Application Entry Point

MenuCup - Multi-tenant Digital Menu Builder
Supports both Mock services (development) and Real APIs (production).

Endpoints:
    - GET  /: Marketing landing page (+ POST /contact, GET /locale/{code})
    - GET  /login, POST /login, POST /logout: Cookie session
    - GET  /dashboard/menu-builder: Menu builder UI (+ /dashboard/api/...)
    - /api/restaurants/...: Restaurant, category and item JSON API
    - GET  /storage/{bucket}/{path}: Mock object storage (development)
    - GET  /health: System health check
    - GET  /{restaurant}, /{restaurant}/{category}: Public menus

Author: Khalil Bannouri
Version: 1.0.0
"""

import asyncio
import sys
import logging
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Internal imports
from menucup.core.config import get_settings, setup_logging
from menucup.database import get_db, init_db, engine
from menucup.dependencies import get_storage
from menucup.errors import MenuCupError
from menucup.i18n import resolve_locale
from menucup.routers import api, auth, dashboard, landing, public
from menucup.schemas import HealthResponse
from menucup.services.auth import get_auth_provider
from menucup.services.email import get_email_service
from menucup.services.storage import BaseStorageService, MockStorageService, get_storage_service

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info(f"   Reorder persistence: {settings.reorder_persist_mode.value}")
    logger.info("=" * 60)

    # Initialize database
    await init_db()
    logger.info("✅ Database initialized")

    # Log service configuration
    logger.info(f"✅ Auth Provider: {get_auth_provider().provider_name}")
    logger.info(f"✅ Storage Service: {get_storage_service().provider_name}")
    logger.info(f"✅ Email Service: {get_email_service().provider_name}")

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Multi-tenant digital menu builder. Owners curate categories and items, "
        "guests browse themed public menus."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def locale_middleware(request: Request, call_next):
    """Resolve the visitor's locale from the cookie and echo it in a header."""
    locale = resolve_locale(request.cookies.get(settings.locale_cookie_name))
    request.state.locale = locale
    response = await call_next(request)
    response.headers["x-menucup-locale"] = locale
    return response


# =============================================================================
# HEALTH & STORAGE ENDPOINTS
# =============================================================================

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    db: AsyncSession = Depends(get_db)
) -> HealthResponse:
    """Verify all system components are operational."""

    # Check database
    db_status = "healthy"
    try:
        await db.execute(select(func.now()))
    except Exception as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    auth_status = "healthy" if await get_auth_provider().health_check() else "unhealthy"
    storage_status = "healthy" if await get_storage_service().health_check() else "unhealthy"
    email_status = "healthy" if await get_email_service().health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [db_status, auth_status, storage_status, email_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        database=db_status,
        auth_service=auth_status,
        storage_service=storage_status,
        email_service=email_status,
        timestamp=datetime.now(),
    )


@app.get("/storage/{bucket}/{object_name:path}", include_in_schema=False)
async def serve_mock_object(
    bucket: str,
    object_name: str,
    storage: BaseStorageService = Depends(get_storage),
) -> Response:
    """Serve objects held by the mock storage service (development only)."""
    if not settings.is_development or not isinstance(storage, MockStorageService):
        return JSONResponse(status_code=404, content={"error": "Not found"})

    stored = storage.get_object(bucket, object_name)
    if stored is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    content, content_type = stored
    return Response(content=content, media_type=content_type)


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(api.router)
app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(landing.router)
# Catch-all public pages go last
app.include_router(public.router)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(MenuCupError)
async def menucup_exception_handler(request: Request, exc: MenuCupError) -> JSONResponse:
    """Render application errors as {"error": message}."""
    if exc.status_code >= 500:
        logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed payloads are a plain 400."""
    logger.debug(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "menucup.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
