
from fastapi import APIRouter, Depends
from typing import List
from app.api.dependencies import get_history_store
from app.api.responses import UTF8JSONResponse
from app.schemas.photo import SearchQueryOut
from app.services.history_store import SearchHistoryStore

router = APIRouter(prefix="/api/searchHistory", tags=["history"])

@router.get("/show", response_model=List[SearchQueryOut], response_class=UTF8JSONResponse)
async def show_search_history(store: SearchHistoryStore = Depends(get_history_store)) -> List[SearchQueryOut]:
    rows = await store.list_all()
    return [SearchQueryOut.from_row(row) for row in rows]
