from fastapi import FastAPI, HTTPException, Header, Response
from fastapi.responses import JSONResponse
from config import settings
from engines.reminder_engine import run_reminders, RunResponse
from schedulers.reminder_scheduler import start_scheduler, stop_scheduler
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Reminder Dispatcher",
    version="0.1.0",
    description="Sends 24h and 72h push reminders for upcoming calendar events"
)

scheduler = None


def to_http_response(result: RunResponse) -> Response:
    """Map a run result to an HTTP response (204 carries no body)"""
    if result.body is None:
        return Response(status_code=result.status_code)
    return JSONResponse(status_code=result.status_code, content=result.body)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "service": "Event Reminder Dispatcher"
    }


def require_api_key(x_api_key: str):
    """Reject callers that don't present the shared CRON_API_KEY"""
    if x_api_key != settings.CRON_API_KEY:
        logger.warning(f"Unauthorized trigger attempt with key: {x_api_key[:8] if x_api_key else 'None'}...")
        raise HTTPException(status_code=401, detail="Unauthorized")


@app.post("/run")
def trigger_run(x_api_key: str = Header(None, alias="X-API-Key")):
    """Manually run the reminder dispatcher once

    Requires API key authentication via X-API-Key header.

    Returns:
        204 when no event is due a reminder,
        200 with {message, processedEvents, notifications},
        500 with {error} when the run could not complete
    """
    require_api_key(x_api_key)

    logger.info("Manual reminder run triggered via API")
    return to_http_response(run_reminders())


@app.post("/trigger")
def trigger_scheduled_run(x_api_key: str = Header(None, alias="X-API-Key")):
    """Run the reminder dispatcher from an external scheduler (e.g. cron)

    Requires API key authentication via X-API-Key header.
    """
    require_api_key(x_api_key)

    logger.info("External trigger for reminder run received")
    return to_http_response(run_reminders())


@app.on_event("startup")
async def startup_event():
    """Start the in-process scheduler when enabled"""
    global scheduler
    logger.info("Starting Event Reminder Dispatcher")

    if settings.ENABLE_SCHEDULER:
        scheduler = start_scheduler(interval_minutes=settings.REMINDER_INTERVAL_MINUTES)
    else:
        logger.info("Scheduler disabled - use /trigger from an external scheduler or /run manually")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on server shutdown"""
    global scheduler
    logger.info("Shutting down Event Reminder Dispatcher")

    if scheduler is not None:
        stop_scheduler(scheduler)
        scheduler = None


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
