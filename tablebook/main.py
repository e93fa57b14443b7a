from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from tablebook.core.config import get_settings
from tablebook.core.errors import ConflictError, NotFoundError, SettingsError, ValidationError
from tablebook.routers.auth import router as auth_router
from tablebook.routers.health import router as health_router
from tablebook.routers.menu import router as menu_router
from tablebook.routers.orders import router as orders_router
from tablebook.routers.reservations import router as reservations_router
from tablebook.routers.settings import router as settings_router
from tablebook.routers.tables import router as tables_router

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Restaurant reservations API - Table availability, conflict-free booking, orders and the kitchen queue.",
    version="0.1.0",
    debug=settings.DEBUG,
)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": exc.message,
            "fields": exc.fields,
        }
    )


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    logger.info(f"Booking conflict on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "conflict",
            "message": exc.message,
            "window_start": exc.window_start,
            "window_end": exc.window_end,
        }
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", "message": exc.message}
    )


@app.exception_handler(SettingsError)
async def settings_error_handler(request: Request, exc: SettingsError):
    logger.error(f"Restaurant settings are broken: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "settings_error", "message": exc.message}
    )


# Global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected server errors with structured response."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": request.headers.get("X-Request-ID"),
        }
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(auth_router, prefix="/api")
app.include_router(tables_router, prefix="/api")
app.include_router(reservations_router, prefix="/api")
app.include_router(orders_router, prefix="/api")
app.include_router(menu_router, prefix="/api")
app.include_router(settings_router, prefix="/api")


@app.get("/")
def read_root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "docs": "/docs",
        "health": "/health"
    }
