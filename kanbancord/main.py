"""
FastAPI Main Application
KanbanCord API Service
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
from contextlib import asynccontextmanager

from kanbancord.core.config import settings
from kanbancord.core.database import close_database, init_database
from kanbancord.core.exceptions import KanbanCordError
from kanbancord.core.logging import setup_logging
from kanbancord.api.v1.router import api_router
from kanbancord.middleware.logging import LoggingMiddleware
from kanbancord.middleware.security import SecurityHeadersMiddleware

# Setup structured logging
setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting KanbanCord API Service", version="1.0.0", environment=settings.ENVIRONMENT)
    if not settings.JWT_SECRET_KEY:
        logger.warning("JWT_SECRET_KEY is not set; logins will fail until it is configured")

    await init_database()

    yield

    logger.info("Shutting down KanbanCord API Service")
    await close_database()


app = FastAPI(
    title="KanbanCord API",
    description="Kanban boards for Discord guilds, with guild-derived permissions",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan
)

logger.info("Configuring CORS", environment=settings.ENVIRONMENT, origins=settings.CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    expose_headers=["Authorization"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Liveness endpoint for containers and load balancers"""
    return {"status": "healthy", "service": "kanbancord-api", "version": "1.0.0"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "KanbanCord API Service",
        "version": "1.0.0",
        "docs": "/docs" if settings.ENVIRONMENT == "development" else "disabled",
        "health": "/health"
    }


@app.exception_handler(KanbanCordError)
async def kanbancord_exception_handler(request: Request, exc: KanbanCordError):
    """Render domain errors with their own status code"""
    logger.info(
        "Request rejected",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "kanbancord.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )
