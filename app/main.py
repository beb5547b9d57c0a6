
import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.settings import settings
from app.core.logging import setup_logging
from app.api.endpoints import health as health_ep
from app.api.endpoints import photos as photos_ep
from app.api.endpoints import search_history as search_history_ep

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    from app.core.database import engine, create_tables
    from app.core.scheduler import start_scheduler, shutdown_scheduler
    from app.services.history_store import reset_search_history

    if not settings.flickr_api_key or not settings.flickr_api_secret:
        logger.error("Flickr API key or secret is missing. Set FLICKR_API_KEY and FLICKR_API_SECRET.")

    logger.info("Creating database tables...")
    await create_tables()
    logger.info("Database tables created.")

    if settings.reset_history_on_startup:
        await reset_search_history()

    start_scheduler()

    yield

    await shutdown_scheduler()
    await engine.dispose()

app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.include_router(health_ep.router)
app.include_router(photos_ep.router)
app.include_router(search_history_ep.router)
