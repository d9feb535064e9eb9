"""
Swipe AI Service - FastAPI Application

Captures a competitor landing page, analyzes it next to a product brief and
streams back a new conversion-optimized HTML page.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from swipe_ai import __version__
from swipe_ai.config import settings, log_settings_summary
from swipe_ai.agents.swipe_agent import SwipeAgent
from swipe_ai.services.browser import BrowserHandle
from swipe_ai.services.page_snapshotter import PageSnapshotter, SnapshotOptions
from swipe_ai.api.routes import health, swipe

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    1. Log effective configuration
    2. Create the shared browser handle (Chromium launches on first capture)
    3. Wire the Swipe Agent

    Shutdown:
    - Dispose the browser
    """
    logger.info("=" * 60)
    logger.info("Starting Swipe AI Service")
    logger.info("=" * 60)

    log_settings_summary()

    browser = BrowserHandle(headless=settings.BROWSER_HEADLESS)
    snapshotter = PageSnapshotter(browser, SnapshotOptions.from_settings(settings))

    logger.info("Initializing Swipe Agent...")
    app.state.browser = browser
    app.state.swipe_agent = SwipeAgent.from_settings(snapshotter, settings)

    logger.info("=" * 60)
    logger.info(f"Service ready on port {settings.SERVICE_PORT}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await browser.dispose()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Swipe AI Service",
    description="""
Agentic landing page swipe: competitor page + product brief -> new landing page.

## Pipeline

| Phase | Stage | Model |
|-------|-------|-------|
| 1 | Product Analyzer | Claude (text) |
| 1 | Page capture + Landing Analyzer | Playwright + Gemini (vision) |
| 2 | CRO Architect | Claude (text) |
| 3 | HTML Builder | Claude (text) |

Phase 1 stages run in parallel; progress streams over Server-Sent Events.
""",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api"

app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(swipe.router, prefix=API_PREFIX, tags=["Swipe"])


# Root health check (for direct container health checks)
@app.get("/health")
async def root_health():
    """Root health check for container/load balancer"""
    return {"status": "UP", "service": settings.SERVICE_NAME}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "Swipe AI Service",
        "version": __version__,
        "port": settings.SERVICE_PORT,
        "endpoints": {
            "health": "/api/health",
            "swipe": "/api/swipe",
            "swipe_sync": "/api/swipe/sync",
            "docs": "/docs",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "swipe_ai.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
        reload=True
    )
