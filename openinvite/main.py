from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import atexit

from . import routers
from .config import settings
from .database import check_db_connection, init_db
from .persistence import PersistenceError, SqlAlchemyPersistence
from .seed_data import seed_if_empty
from .store import get_store, init_store
from .utils.background_tasks import start_background_tasks, stop_background_tasks

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="OpenInvite API",
    description="Social plan coordination: plans, RSVPs, recurrence and discovery",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def bootstrap_store():
    """Create tables, load persisted state and seed a fresh install"""

    init_db()
    store = init_store(SqlAlchemyPersistence())
    try:
        store.load()
    except PersistenceError as e:
        logger.warning(f"Could not load persisted data, starting empty: {str(e)}")

    if settings.SEED_MOCK_DATA:
        seed_if_empty(store)
    return store


@app.on_event("startup")
async def startup_event():
    logger.info("Starting OpenInvite API...")
    store = bootstrap_store()
    if settings.ENABLE_BACKGROUND_TASKS:
        start_background_tasks(store)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Stopping background tasks...")
    stop_background_tasks()


# Include routers
app.include_router(routers.plans.router, prefix="/api/plans", tags=["plans"])
app.include_router(routers.discover.router, prefix="/api/discover", tags=["discover"])
app.include_router(routers.social.router, prefix="/api/social", tags=["social"])
app.include_router(
    routers.notifications.router, prefix="/api/notifications", tags=["notifications"]
)

atexit.register(stop_background_tasks)


@app.get("/")
async def root():
    return {"message": "Welcome to OpenInvite API", "status": "running"}


@app.get("/health")
async def health_check():
    store = get_store()
    with store.read():
        plan_count = len(store.plans)
    return {
        "status": "healthy",
        "service": "openinvite-api",
        "version": "1.0.0",
        "database": check_db_connection(),
        "plans": plan_count,
    }


if __name__ == "__main__":
    uvicorn.run("openinvite.main:app", host="0.0.0.0", port=8000, reload=True)
