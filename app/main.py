"""Voyage CMS - FastAPI Application Entry Point.

Content backend for the travel site: trips, destinations, certificates,
written reviews and visitor enquiries.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import init_db, test_connection
from app.api.errors import register_error_handlers
from app.api.resource_routes import build_resource_router
from app.api.enquiry_routes import router as enquiry_router
from app.api.upload_routes import router as upload_router
from app.assets.store import get_asset_store
from app.repository.registry import CONTENT_MAPPINGS
from app.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 Voyage CMS starting up...")
    db_ok = test_connection()
    if db_ok:
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected, endpoints will fail")
    if not get_asset_store().is_available():
        logger.warning("⚠️  Asset store not configured, uploads will be rejected")
    yield
    logger.info("Voyage CMS shut down")


app = FastAPI(
    title="Voyage CMS",
    description="Content management backend for trips, destinations, certificates, reviews and enquiries.",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routers
for mapping in CONTENT_MAPPINGS:
    app.include_router(build_resource_router(mapping))
app.include_router(enquiry_router)
app.include_router(upload_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "voyage-cms",
        "version": VERSION,
        "database": test_connection(),
    }
