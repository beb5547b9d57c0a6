
from fastapi import APIRouter, Query, Depends
from typing import List
from app.api.dependencies import get_search_service
from app.api.responses import UTF8JSONResponse, sentinel_error_response
from app.core.errors import PhotoSearchError
from app.schemas.photo import RECENT_SENTINEL, PhotoRecord, SortOrder
from app.services.search_service import PhotoSearchService
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/photos", tags=["photos"])

@router.get(
    "/search",
    response_model=List[PhotoRecord],
    response_class=UTF8JSONResponse,
    responses={502: {"description": "Photo provider failure, sentinel-wrapped text body"}},
)
async def search_photos_endpoint(
    search_term: str = Query(default=RECENT_SENTINEL, alias="searchTerm", description="Search text; NULL or blank returns recent photos"),
    page: int = Query(default=1, ge=1, description="1-based page number"),
    sort: str = Query(default=SortOrder.RELEVANT.value, description="Relevant, DateUploaded, DateTaken or Interesting"),
    service: PhotoSearchService = Depends(get_search_service),
):
    try:
        return await service.search(search_term, page, SortOrder.parse(sort))
    except PhotoSearchError as e:
        logger.error(f"Search request failed: {e.message}", extra={"error_kind": e.kind})
        return sentinel_error_response(e)
