# main.py
import logging
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config.database import DatabaseManager, get_database_manager, lifespan
from .config.settings import get_settings
from .core.errors import OrderServiceError
from .routes import routers
from .schemas.common import (
    ErrorResponse,
    HealthCheckResponse,
    RootResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)

settings = get_settings()

# Setup logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

for router in routers:
    app.include_router(router, prefix=settings.api_v1_prefix)


# Exception handlers

@app.exception_handler(OrderServiceError)
async def order_service_error_handler(request: Request, exc: OrderServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}: {exc.message}")
    body = ErrorResponse(
        error=exc.error,
        message=exc.message,
        detail=exc.detail,
        timestamp=datetime.utcnow(),
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        ValidationErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ())),
            message=error.get("msg", ""),
            input_value=error.get("input"),
        )
        for error in exc.errors()
    ]
    body = ValidationErrorResponse(
        error="BadRequest",
        message="Request validation failed",
        details=details,
    )
    return JSONResponse(status_code=400, content=body.model_dump(mode="json"))


# Routes

@app.get("/", response_model=RootResponse, tags=["Root"])
async def root():
    """Root endpoint - Always accessible"""
    return RootResponse(
        message=f"Welcome to {settings.app_name}",
        version=settings.app_version,
        docs="/docs",
        health="/health",
        status="running",
        timestamp=datetime.utcnow().isoformat(),
    )


@app.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health(manager: DatabaseManager = Depends(get_database_manager)):
    """Health check endpoint - Always accessible"""
    try:
        if manager.is_connected():
            await manager.get_database().command('ping')
            db_status = "connected"
        else:
            db_status = "disconnected"
    except Exception as e:
        logger.warning(f"Health check ping failed: {e}")
        db_status = "error"

    return HealthCheckResponse(
        status="healthy",
        database=db_status,
        timestamp=datetime.utcnow().isoformat(),
        version=settings.app_version,
    )
