"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the link store and registry (injected into routes)
- Registers API routes
- No business logic should be written here
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import partial
import time
from typing import Optional

from app.core.config import settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.db.link_store import InMemoryLinkStore, LinkStore
from app.db.mongo import connect_to_mongo, close_mongo_connection, check_database_health, get_links_collection
from app.db.mongo_link_store import MongoLinkStore
from app.db.indexes import create_indexes
from app.services.link_registry import LinkRegistry
from app.api import docs, links, redirect
from app.api.deps import get_optional_registry
from utils.sms_utils import generate_short_id

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


async def build_link_store() -> LinkStore:
    """
    Creates the configured link store.
    The mongo store needs a live connection and its indexes in place.
    """
    if settings.STORE_BACKEND == "memory":
        logger.warning("Using in-memory link store; links are lost on restart")
        return InMemoryLinkStore()

    logger.info("Connecting to MongoDB...")
    await connect_to_mongo()
    logger.info("✅ MongoDB connected")

    logger.info("Creating database indexes...")
    await create_indexes()
    logger.info("✅ Database indexes created")

    return MongoLinkStore(get_links_collection(), timeout_ms=settings.STORE_TIMEOUT_MS)


def build_registry(store: LinkStore) -> LinkRegistry:
    return LinkRegistry(
        store,
        min_phone_digits=settings.MIN_PHONE_DIGITS,
        max_attempts=settings.MAX_ID_ATTEMPTS,
        id_generator=partial(generate_short_id, settings.SHORT_ID_BYTES),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("🚀 Starting SMS Deep Link API...")

    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        store = await build_link_store()
        app.state.registry = build_registry(store)

        logger.info("🎉 SMS Deep Link API started successfully!")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Store backend: {settings.STORE_BACKEND}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    # Shutdown
    logger.info("🛑 Shutting down SMS Deep Link API...")

    try:
        await close_mongo_connection()
        logger.info("👋 SMS Deep Link API shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


# Create FastAPI app with lifespan
app = FastAPI(
    title="SMS Deep Link API",
    description="Generate SMS deep links with analytics tracking",
    version=docs.API_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log slow requests
    if process_time > 5.0:  # More than 5 seconds
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


# Register API routes
app.include_router(links.router, prefix="/api/sms", tags=["SMS Links"])
app.include_router(redirect.router, tags=["Redirect"])
app.include_router(docs.router, tags=["Docs"])


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check(registry: Optional[LinkRegistry] = Depends(get_optional_registry)):
    """
    Service status with link store connectivity and total link count.
    Always 200: store problems are reported in the body.
    """
    health_status = {
        "success": True,
        "message": "SMS Deep Link API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
        "database": {}
    }

    if registry is None:
        health_status["database"] = {"status": "error", "error": "Link registry not initialized"}
        return health_status

    try:
        total_links = await registry.count_links()
        health_status["database"] = {"status": "connected", "totalLinks": total_links}
    except Exception as e:
        logger.error(f"Link store health check failed: {str(e)}")
        health_status["database"] = {"status": "error", "error": str(e)}

    return health_status


# Readiness probe (for Kubernetes/orchestration)
@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    if getattr(app.state, "registry", None) is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "registry_not_initialized"}
        )

    if settings.STORE_BACKEND == "mongo" and not await check_database_health():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "database_unavailable"}
        )

    return {"status": "ready"}


# Liveness probe (for Kubernetes/orchestration)
@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
