"""Main FastAPI application entry point."""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sessionauth.config import get_settings
from sessionauth.database import close_database, get_database
from sessionauth.responses import ApiError, api_error_handler, err

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting session service...")
    logger.info(f"Public URL: {settings.public_url}")
    logger.info(f"Database: {settings.database_path}")

    await get_database()
    logger.info("Database initialized")

    try:
        from sessionauth.jobs.scheduler import setup_scheduler
        setup_scheduler()
    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}")

    yield

    logger.info("Shutting down...")

    try:
        from sessionauth.jobs.scheduler import shutdown_scheduler
        shutdown_scheduler()
    except Exception as e:
        logger.error(f"Error stopping scheduler: {e}")

    await close_database()
    logger.info("Shutdown complete")


app = FastAPI(
    title="Session Auth",
    description="Session-based login, logout, registration and admin gate",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_exception_handler(ApiError, api_error_handler)

settings = get_settings()
allowed_origins = [settings.public_url]
if settings.public_url.startswith("http://localhost") or settings.public_url.startswith("https://localhost"):
    allowed_origins.extend([
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    try:
        db = await get_database()
        await db.execute("SELECT 1")
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "error": str(e)},
        )


from sessionauth.auth.routes import router as auth_router

app.include_router(auth_router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return err("Error interno del servidor.", status.HTTP_500_INTERNAL_SERVER_ERROR)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "sessionauth.main:app",
        host="0.0.0.0",
        port=8080,
        log_level=settings.log_level.lower(),
        reload=False,
    )
