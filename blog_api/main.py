"""
FastAPI Application Entry Point

This module initializes the FastAPI application with:
- CORS configuration
- Route registration
- Health check endpoints
- Exception handlers that render every error as the response envelope
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.core.config import settings
from blog_api.core.exceptions import BlogAPIError, OperationFailedError, format_validation_error
from blog_api.core.middleware import APIKeyMiddleware
from blog_api.core.response_codes import ResponseCode
from blog_api.core.responses import envelope
from blog_api.db.database import check_db_connection, engine, init_models
from blog_api.api.deps import get_api_key
from blog_api.api.v1.router import api_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Framework errors keep their HTTP status; the envelope code follows it
HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ResponseCode.VALIDATION_FAILED,
    status.HTTP_401_UNAUTHORIZED: ResponseCode.UNAUTHORIZED,
    status.HTTP_404_NOT_FOUND: ResponseCode.NO_DATA_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ResponseCode.OPERATION_NOT_ALLOWED,
}


# ============================================================
# Application Lifespan Events
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Startup:
    - Check database connection
    - Create missing tables when AUTO_CREATE_TABLES is set

    Shutdown:
    - Dispose of the connection pool
    """
    # ========== STARTUP ==========
    logger.info(f"Starting {settings.PROJECT_NAME}...")
    logger.info(f"Debug mode: {settings.DEBUG}")

    try:
        db_healthy = await check_db_connection()
        if db_healthy:
            logger.info("Database connection established successfully")
        else:
            logger.warning("Database connection check failed")

        if settings.AUTO_CREATE_TABLES:
            await init_models()
            logger.info("Database tables created")
    except Exception as e:
        logger.error(f"Database error on startup: {e}")

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    logger.info(f"Shutting down {settings.PROJECT_NAME}...")
    await engine.dispose()
    logger.info("Shutdown complete")


# ============================================================
# Create FastAPI Application
# ============================================================
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Blog Platform API

    Features:
    - User registration, login and profile management (JWT)
    - Posts with categories, soft and hard delete
    - Comments on posts
    """,
    version="1.0.0",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ----------------------------------------------------
# Middleware Configuration
# ----------------------------------------------------
# CORSMiddleware stays outermost so rejected requests still get CORS headers
app.add_middleware(
    APIKeyMiddleware,
    key_provider=get_api_key,
    prefix=settings.API_V1_PREFIX,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# ----------------------------------------------------
# Health Check Endpoints
# ----------------------------------------------------
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.PROJECT_NAME,
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.DEBUG else "disabled"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for monitoring.
    """
    db_healthy = await check_db_connection()
    if not db_healthy:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "disconnected"}
        )
    return {"status": "healthy", "database": "connected"}


# ============================================================
# Include API Router
# ============================================================
app.include_router(
    api_router,
    prefix=settings.API_V1_PREFIX
)


# ----------------------------------------------------
# Exception Handlers
# ----------------------------------------------------
@app.exception_handler(BlogAPIError)
async def blog_api_error_handler(request: Request, exc: BlogAPIError):
    """Render application errors raised by services and dependencies."""
    return envelope(code=exc.code, message=exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report the first failed validation rule as a 400."""
    return envelope(
        code=ResponseCode.VALIDATION_FAILED,
        message=format_validation_error(exc.errors()),
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes, wrong methods and other framework errors."""
    code = HTTP_STATUS_CODES.get(exc.status_code, ResponseCode.OPERATION_FAILED)
    return envelope(code=code, message=str(exc.detail), status_code=exc.status_code)


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    """Handle anything unexpected. Details stay in the server log."""
    logger.exception(f"Internal server error on {request.method} {request.url.path}")
    return await blog_api_error_handler(request, OperationFailedError())
