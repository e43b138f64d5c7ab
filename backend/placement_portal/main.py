"""
FastAPI application entry point for the Placement Portal.

Mounts the auth, profile, job, targeting, application, interview, student
and dashboard routers under /api, and serves uploaded resumes, avatars and
logos from the /storage mount.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from placement_portal.config import settings
from placement_portal.database import engine
from placement_portal.services import storage
# Import API routers
from placement_portal.api import (
    auth,
    colleges,
    profile,
    jobs,
    targets,
    applications,
    interviews,
    students,
    dashboard,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    On startup: make sure the storage buckets exist
    On shutdown: Close database connections gracefully
    """
    # Startup
    logger.info("🚀 Starting Placement Portal API...")
    logger.info(f"📊 Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"🔧 Debug mode: {settings.debug}")

    storage.ensure_buckets()
    logger.info(f"📁 Storage: {storage.STORAGE_ROOT}")

    yield

    # Shutdown
    logger.info("👋 Shutting down Placement Portal API...")
    await engine.dispose()


# Initialize FastAPI app
app = FastAPI(
    title="Placement Portal API",
    description="Campus recruitment: colleges, companies, students, applications and interviews",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [
    "http://localhost:3000",  # Local development
]

if settings.allowed_origins:
    allowed_origins.extend(origin.strip() for origin in settings.allowed_origins.split(',') if origin.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": "Placement Portal API",
        "version": "1.0.0",
    }


# Root endpoint
@app.get("/")
async def root():
    """API root with basic info."""
    return {
        "message": "Placement Portal API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(colleges.router, prefix="/api/colleges", tags=["colleges"])
app.include_router(profile.router, prefix="/api", tags=["profile"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(targets.router, prefix="/api/targets", tags=["targets"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(interviews.router, prefix="/api/interviews", tags=["interviews"])
app.include_router(students.router, prefix="/api/students", tags=["students"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])

# Uploaded resumes, avatars and logos
app.mount(
    settings.storage_public_url,
    StaticFiles(directory=settings.storage_dir, check_dir=False),
    name="storage",
)
