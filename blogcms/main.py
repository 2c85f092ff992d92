# blogcms/main.py

"""Blog CMS Backend - posts, categories and subcategories over FastAPI."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from blogcms.configs import settings
from blogcms.db import ping_db
from blogcms.errors import (
    AdminAuthenticationError,
    DatabaseError,
    NotAuthorError,
    UploadError,
    ValidationError,
    app_validation_exception_handler,
    auth_exception_handler,
    database_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from blogcms.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blogcms.monitoring import get_logger
from blogcms.routes import category_router, post_router
from blogcms.schemas import HealthCheckResponse
from blogcms.utils.helpers import today_str

logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog CMS Backend API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)

routes = [
    post_router,
    category_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (DatabaseError, database_exception_handler),
    (UploadError, upload_exception_handler),
    (ValidationError, app_validation_exception_handler),
    (AdminAuthenticationError, auth_exception_handler),
    (NotAuthorError, auth_exception_handler),
    (RequestValidationError, validation_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

if settings.STORAGE_PROVIDER == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
        name="uploads",
    )


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2026-01-01 00:00:00",
                        "database": "connected",
                        "storage": "cloudinary",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint.

    Returns
    -------
    HealthCheckResponse
        Version, overall status and database connectivity.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"version": "1.0.0", "status": "ok", "timestamp": "...", "database": "connected", "storage": "local"}
    """
    try:
        await ping_db()
        database = "connected"
    except (SQLAlchemyError, OSError):
        logger.exception("Database health check failed")
        database = "unavailable"

    return HealthCheckResponse(
        version=app.version,
        status="ok" if database == "connected" else "degraded",
        timestamp=today_str(),
        database=database,
        storage=settings.STORAGE_PROVIDER,
    )
