"""FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from formcraft.config import get_settings
from formcraft.database import init_db
from formcraft.logging_config import setup_logging
from formcraft.routers import analytics, auth, field_types, files, forms, public, templates
from formcraft.services.rate_limit import limiter, rate_limit_exceeded_handler

settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        init_db()
        logger.info("Database tables ensured")
    os.makedirs(settings.upload_dir, exist_ok=True)
    yield


app = FastAPI(
    title="FormCraft",
    description="Schema-driven form builder: configurable fields, public submissions and analytics",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Rate limiting for the public routes
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(field_types.router, prefix="/api/field-types", tags=["Field Types"])
app.include_router(templates.router, prefix="/api/templates", tags=["Templates"])
app.include_router(forms.router, prefix="/api/forms", tags=["Forms"])
app.include_router(analytics.router, prefix="/api", tags=["Analytics"])
app.include_router(public.router, prefix="/api/public", tags=["Public Forms"])
app.include_router(files.router, prefix="/api/files", tags=["Files"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.service_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "FormCraft API",
        "docs": "/docs",
        "health": "/health",
    }
