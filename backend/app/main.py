# backend/app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routers.analytics import router as analytics_router
from app.api.routers.backups import router as backups_router
from app.api.routers.board_settings import router as board_settings_router
from app.api.routers.photos import router as photos_router
from app.api.routers.reminders import router as reminders_router
from app.api.routers.shares import router as shares_router
from app.api.routers.tiles import router as tiles_router
from app.core.config import settings

# Import all models to ensure they are registered in the registry
from app.db import base  # noqa: F401
from app.db.session import get_async_session, get_db_session, lifespan_db_manager
from app.exceptions import (
    InvalidFormatError,
    PersistenceError,
    PhotoNotFoundError,
    TileNotFoundError,
    TileValidationError,
)
from app.services import board_service
from app.tasks.maintenance import run_maintenance

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# --- Lifespan Management ---
@asynccontextmanager
async def lifespan(_app_instance: FastAPI):
    logger.info(f"Starting up {settings.APP_NAME} v{settings.APP_VERSION}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    try:
        await lifespan_db_manager(_app_instance, "startup")
        logger.info("LIFESPAN_HOOK: Database resources initialized via lifespan_db_manager.")
    except Exception as e:
        logger.critical(
            f"LIFESPAN_HOOK: CRITICAL - Failed to initialize database resources: {e}", exc_info=True
        )
        raise

    async with get_db_session() as session:
        if await board_service.seed_defaults_if_empty(session):
            logger.info("LIFESPAN_HOOK: Empty board seeded with the default tiles.")

    if settings.MAINTENANCE_ON_STARTUP:
        summary = await run_maintenance()
        logger.info(f"LIFESPAN_HOOK: Startup maintenance finished: {summary}")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    try:
        await lifespan_db_manager(_app_instance, "shutdown")
        logger.info("LIFESPAN_HOOK: Database resources disposed via lifespan_db_manager.")
    except Exception as e:
        logger.error(f"LIFESPAN_HOOK: Error during database resource disposal: {e}", exc_info=True)


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    lifespan=lifespan,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
)

# --- Middleware ---
if settings.BACKEND_CORS_ORIGINS:
    origins = [
        str(origin).strip("/") for origin in settings.BACKEND_CORS_ORIGINS if str(origin).strip("/")
    ]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.info(f"CORS enabled for origins: {origins}")
    else:
        logger.warning("BACKEND_CORS_ORIGINS configured but resulted in an empty list.")
else:
    logger.info("CORS disabled (BACKEND_CORS_ORIGINS not configured).")


# --- Exception Handlers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error_details = exc.errors()
    logger.warning(
        f"Request validation error: {request.method} {request.url.path} - Errors: {error_details}"
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(error_details)},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler_custom(request: Request, exc: HTTPException):
    log_message = f"HTTPException: Status={exc.status_code}, Detail='{exc.detail}' for {request.method} {request.url.path}"
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(log_message, exc_info=True)
    else:
        logger.warning(log_message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(TileValidationError)
async def tile_validation_exception_handler(request: Request, exc: TileValidationError):
    logger.warning(f"Tile validation failed for {request.method} {request.url.path}: {exc.errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.errors}
    )


@app.exception_handler(InvalidFormatError)
async def invalid_format_exception_handler(request: Request, exc: InvalidFormatError):
    logger.warning(f"Rejected payload for {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(TileNotFoundError)
@app.exception_handler(PhotoNotFoundError)
async def not_found_exception_handler(request: Request, exc: LookupError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError):
    logger.error(f"Persistence failure during {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "The storage backend is unavailable."},
    )


@app.exception_handler(Exception)
async def generic_exception_handler_custom(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception during request: {request.method} {request.url.path}", exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected internal server error occurred."},
    )


# --- API v1 Router Definition and Inclusions ---
api_v1_router = APIRouter()
api_v1_router.include_router(tiles_router, prefix="/tiles", tags=["Tiles"])
api_v1_router.include_router(shares_router, tags=["Tiles - Sharing"])
api_v1_router.include_router(photos_router, prefix="/photos", tags=["Photos"])
api_v1_router.include_router(board_settings_router, prefix="/settings", tags=["Settings"])
api_v1_router.include_router(backups_router, prefix="/backup", tags=["Backup"])
api_v1_router.include_router(reminders_router, prefix="/reminders", tags=["Reminders"])
api_v1_router.include_router(analytics_router, prefix="/analytics", tags=["Analytics"])


@api_v1_router.get("/", tags=["API Root"], summary="API v1 Root Endpoint")
async def api_v1_root_endpoint():
    return {
        "message": f"Welcome to {settings.APP_NAME} - API Version 1",
        "version": settings.APP_VERSION,
        "documentation_url": app.docs_url,
    }


@api_v1_router.get(
    "/healthz",
    tags=["Health Checks"],
    summary="Detailed API and Dependencies Health Check",
    status_code=status.HTTP_200_OK,
)
async def health_check_api_v1_detailed(db: AsyncSession = Depends(get_async_session)):
    db_status = "unavailable"
    try:
        await db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error(
            f"Health check (detailed): Database connection failed. Error: {e}",
            exc_info=settings.DEBUG,
        )
    dependencies_status = {"database": db_status}
    overall_status = (
        "ok"
        if all(status == "connected" for status in dependencies_status.values())
        else "degraded"
    )
    if overall_status == "ok":
        return {"status": overall_status, "dependencies": dependencies_status}
    logger.error(
        f"API health check (detailed) failed. Status: {overall_status}, Dependencies: {dependencies_status}"
    )
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail={"status": overall_status, "dependencies": dependencies_status},
    )


app.include_router(api_v1_router, prefix=settings.API_V1_STR)


# --- Health Check Endpoint (at app root) ---
@app.get(
    "/health",
    tags=["System Health"],
    summary="Basic System Liveness Check",
    status_code=status.HTTP_200_OK,
    include_in_schema=False,
)
async def health_check_basic_system():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting Uvicorn server directly for {settings.APP_NAME} (local debugging)...")
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
