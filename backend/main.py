"""
FastAPI main application entry point.

Architecture (single port):
  Browser → http://localhost:3456/             → serves the static front-end (public/)
  Browser → http://localhost:3456/api/config   → provider status + models catalogue
  Browser → http://localhost:3456/api/run      → SSE stream of one prompt fanned out to N models
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import get_settings, PUBLIC_DIR
from routers import config as config_router
from routers import run as run_router

# ============================================================
# Logging Configuration
# ============================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Per-request httpx logging drowns out the arena's own lines
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


# ============================================================
# Application Lifespan (startup/shutdown)
# ============================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info("Starting up model arena...")

    _settings = get_settings()
    configured = [k for k, v in _settings.provider_credentials().items() if v]
    logger.info(f"Configured provider keys: {', '.join(configured) or 'none'}")
    logger.info(f"Models catalogue: {_settings.models_catalog_path}")

    if PUBLIC_DIR.is_dir():
        logger.info(f"Serving frontend from {PUBLIC_DIR}")
    else:
        logger.info("No frontend found, API-only mode")

    yield  # Application runs here

    logger.info("Shutting down model arena...")


# ============================================================
# Create FastAPI Application
# ============================================================
app = FastAPI(
    title="Model Arena API",
    description="Stream one prompt to several LLM providers side by side with latency and cost metrics",
    version="1.0.0",
    lifespan=lifespan,
    # Move API docs under /api so they don't clash with frontend routes
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


# ============================================================
# API Routes (all mounted under /api prefix)
# ============================================================
app.include_router(config_router.router, prefix="/api", tags=["Config"])
app.include_router(run_router.router, prefix="/api", tags=["Run"])


@app.get("/api/health")
async def health_check() -> dict:
    """Liveness probe: confirms the process is running."""
    return {"status": "healthy", "version": "1.0.0"}


# ============================================================
# Static Frontend Serving
# ============================================================
# Mounted last so /api routes take precedence over the catch-all mount.
if PUBLIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=str(PUBLIC_DIR), html=True), name="public")


# ============================================================
# Run with Uvicorn (for development)
# ============================================================
if __name__ == "__main__":
    import uvicorn

    logger.info(f"Arena running at http://localhost:{settings.port}")
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
