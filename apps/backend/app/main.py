"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.auth.routes import router as auth_router
from app.api.customers.import_routes import router as customer_import_router
from app.api.customers.routes import router as customers_router
from app.core.config import get_settings
from app.core.errors import register_exception_handlers
from app.core.logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(level=settings.log_level, format_type=settings.log_format)
    logger.info(f"{settings.app_name} starting ({settings.environment})")
    yield
    # Shutdown
    logger.info(f"{settings.app_name} shutting down")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Customer records management with bulk spreadsheet import",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/healthz")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "environment": settings.environment}


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(customer_import_router, prefix="/api/customers", tags=["Customer Import"])
app.include_router(customers_router, prefix="/api/customers", tags=["Customers"])
