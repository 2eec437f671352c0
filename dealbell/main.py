"""
Deal Bell - Main Application Entry Point

Watches the closed-won Slack channel for CRM announcements and rings the
deal bell once per unique deal. Built on FastAPI, httpx and APScheduler.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dealbell.api.trigger_webhook import router as trigger_router
from dealbell.config.settings import get_settings
from dealbell.infrastructure.scheduler import start_scheduler, stop_scheduler, get_scheduler
from dealbell.usecases.closed_won_pipeline import build_pipeline

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Deal Bell...")
    logger.info(f"Environment: {settings.environment}")

    # In development the handler runs once immediately
    if settings.should_run_on_startup:
        logger.info("Running closed-won pipeline on startup...")
        outcome = await build_pipeline(settings).run()
        logger.info(f"Startup run finished: {outcome.state.value}")

    await start_scheduler()

    logger.info("Application startup complete!")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await stop_scheduler()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Deal Bell",
    description="Rings a bell when a deal is closed-won in the CRM",
    version="1.0.0",
    lifespan=lifespan
)

# Register routers
app.include_router(trigger_router, tags=["Trigger"])


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Deal Bell",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.environment,
        "endpoints": {
            "trigger": "/webhook/trigger",
            "health": "/health"
        }
    }


@app.get("/scheduler/status")
async def scheduler_status():
    """Get scheduler status and pending jobs."""
    scheduler = get_scheduler()

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run": str(job.next_run_time) if job.next_run_time else None
        })

    return {
        "running": scheduler.running,
        "jobs_count": len(jobs),
        "jobs": jobs
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dealbell.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
