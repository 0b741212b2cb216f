import logging
import atexit
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from . import routers
from .database import init_db, check_db_connection
from .utils.background_tasks import start_background_tasks, stop_background_tasks

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Kid Party RSVP API",
    description="Birthday party invitations, RSVPs and reminders",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup_event():
    """Create tables and start the optional background scheduler"""
    logger.info("🚀 Starting Kid Party RSVP API...")
    init_db()
    start_background_tasks()


@app.on_event("shutdown")
async def shutdown_event():
    """Stop background tasks when app shuts down"""
    logger.info("⏹️ Stopping background tasks...")
    stop_background_tasks()


# Include routers
app.include_router(routers.children.router, prefix="/api/children", tags=["children"])
app.include_router(routers.parties.router, prefix="/api/parties", tags=["parties"])
app.include_router(routers.rsvp.router, prefix="/api/rsvp", tags=["rsvp"])
app.include_router(
    routers.reminders.router, prefix="/api/reminders", tags=["reminders"]
)
app.include_router(
    routers.notifications.router, prefix="/api/notifications", tags=["notifications"]
)

atexit.register(stop_background_tasks)


@app.get("/")
async def root():
    return {"message": "Welcome to Kid Party RSVP API", "status": "running"}


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "kidparty-api",
        "version": "1.0.0",
        "database": check_db_connection(),
    }


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
