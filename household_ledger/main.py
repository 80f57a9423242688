# household_ledger/main.py
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from household_ledger.config.settings import settings
from household_ledger.config.database import init_db
from household_ledger.core.logging_config import setup_logging
from household_ledger.core.middleware import setup_middleware
from household_ledger.core.exceptions import setup_exception_handlers
from household_ledger.api.v1.router import api_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"{settings.app_name} starting - version {settings.version}")
    logger.info(f"Environment: {'Development' if settings.debug else 'Production'}")
    logger.info(f"Database: {settings.database_label}")

    if settings.auto_create_tables:
        init_db()

    yield

    # Shutdown
    logger.info(f"{settings.app_name} shutting down")

setup_logging(settings.log_level)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Gastos compartidos de pisos: registro, reparto y pagos",
    lifespan=lifespan
)

# Setup middleware and error handlers
setup_middleware(app)
setup_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "Household Ledger API",
        "version": settings.version,
        "status": "running",
        "environment": "production" if not settings.debug else "development",
        "docs": "/docs",
        "api": "/api/v1"
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": settings.version,
        "app": settings.app_name
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "household_ledger.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
