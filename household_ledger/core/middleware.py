from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import time
import logging

from household_ledger.config.settings import settings

logger = logging.getLogger("household_ledger.requests")

def setup_middleware(app: FastAPI):
    """Configure all middleware for the application"""

    # CORS - orígenes separados por comas en CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {elapsed:.4f}s"
        )

        return response
