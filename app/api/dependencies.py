from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.services.flickr_client import FlickrClient
from app.services.history_store import SearchHistoryStore
from app.services.search_service import PhotoClient, PhotoSearchService


def get_photo_client() -> PhotoClient:
    return FlickrClient.from_settings()


def get_history_store(db: AsyncSession = Depends(get_db)) -> SearchHistoryStore:
    return SearchHistoryStore(db)


def get_search_service(
    photo_client: PhotoClient = Depends(get_photo_client),
    history: SearchHistoryStore = Depends(get_history_store),
) -> PhotoSearchService:
    return PhotoSearchService(photo_client=photo_client, history=history)
