from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
import logging

import uvicorn

from app.config import get_settings
from app.database import get_store
from app.api import products, stats, health
from app.api.errors import register_exception_handlers

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    store = get_store()
    store.initialize()
    logger.info(f"Products data file: {store.path}")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    A small inventory backend storing products in a JSON file:

    - **Product Management**: list, search, create, update and delete products
    - **Statistics**: stock totals, stock value, categories and low-stock count

    ## Storage
    The whole product collection lives in one JSON document that is reloaded
    and rewritten on every request. Writes replace the file atomically and
    are serialized within the process.

    ## Responses
    Every response uses the envelope `{"success": bool, "data": ..., "message": ...}`.
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(health.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(stats.router, prefix="/api")


@app.get("/api", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "success": True,
        "data": {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/api/health"
        }
    }


# Client assets share the listener; mounted last so API routes win
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")


def run():
    """Start the server on the configured host and port."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
