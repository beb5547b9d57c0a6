"""Endless-scroll fetch loop for the photo gallery.

Drives ``/api/photos/search`` on behalf of one browsing session: a search
submit or sort change starts over at page 1 with an empty gallery, and a
scroll near the bottom fetches the next page. Only one request is in flight
at a time; triggers that arrive while loading are dropped. Every request has
an absolute timeout, after which the session is re-armed and anything the
abandoned request still produces is discarded.

A submitted search also refreshes the list of past search terms. Recent mode
switches the sort to date uploaded.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, List, Optional

import httpx

from app.core.errors import unwrap_error_message
from app.schemas.photo import RECENT_SENTINEL, PhotoRecord, SortOrder

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/photos/search"
HISTORY_PATH = "/api/searchHistory/show"
DEFAULT_TIMEOUT = 10.0
TIMEOUT_MESSAGE = "Request timed out. Please try again later."
RECENT_NOTE = "NB: Entering a whitespace or no search term will return the most recent photos from Flickr!"


class FetchState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    RENDERED = "rendered"
    TIMED_OUT = "timed_out"
    FAILED = "failed"


@dataclass
class FetchSession:
    search_term: str = ""
    sort: SortOrder = SortOrder.RELEVANT
    page: int = 1
    loading: bool = False
    state: FetchState = FetchState.IDLE
    last_outcome: Optional[FetchState] = None
    gallery: List[PhotoRecord] = field(default_factory=list)
    history: List[str] = field(default_factory=list)
    message: Optional[str] = None
    note: Optional[str] = None
    # bumped per request and on timeout; responses from older generations are dropped
    generation: int = 0

    @property
    def recent_mode(self) -> bool:
        return not self.search_term.strip()


class PhotoFetchLoop:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[FetchSession] = None,
        refresh_history: bool = True,
    ):
        self.http_client = http_client
        self.timeout = timeout
        self.session = session or FetchSession()
        self.refresh_history = refresh_history

    async def submit_search(self, term: Optional[str], sort: Optional[SortOrder | str] = None) -> Optional[FetchState]:
        if self.session.loading:
            return None
        self.session.search_term = term or ""
        if sort is not None:
            self.session.sort = SortOrder.parse(sort)
        self._start_over()
        outcome = await self._fetch()
        if self.refresh_history:
            self.session.history = await self.load_history()
        return outcome

    async def change_sort(self, sort: SortOrder | str) -> Optional[FetchState]:
        if self.session.loading:
            return None
        self.session.sort = SortOrder.parse(sort)
        self._start_over()
        return await self._fetch()

    async def scroll_near_bottom(self) -> Optional[FetchState]:
        if self.session.loading:
            return None
        self.session.page += 1
        return await self._fetch()

    async def load_history(self) -> List[str]:
        """Past search terms, most recent first; empty when the history is unavailable."""
        try:
            response = await asyncio.wait_for(self.http_client.get(HISTORY_PATH), self.timeout)
            response.raise_for_status()
            return [entry["queryText"] for entry in response.json()]
        except (asyncio.TimeoutError, httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Could not load search history: {e!r}")
            return []

    def _start_over(self) -> None:
        self.session.page = 1
        self.session.gallery.clear()

    def _search_params(self) -> Dict[str, Any]:
        s = self.session
        return {
            "searchTerm": RECENT_SENTINEL if s.recent_mode else s.search_term,
            "page": s.page,
            "sort": s.sort.value,
        }

    async def _fetch(self) -> FetchState:
        s = self.session
        s.generation += 1
        generation = s.generation
        s.loading = True
        s.state = FetchState.LOADING
        s.message = None
        s.note = None
        if s.recent_mode:
            # recent photos are always newest first
            s.sort = SortOrder.DATE_UPLOADED
            s.note = RECENT_NOTE

        params = self._search_params()
        logger.debug(f"Fetching photos {params}")

        request = asyncio.ensure_future(self.http_client.get(SEARCH_PATH, params=params))
        timer = asyncio.get_running_loop().call_later(self.timeout, self._expire, generation, request)
        try:
            await asyncio.wait({request})
        except asyncio.CancelledError:
            request.cancel()
            if generation == s.generation:
                s.loading = False
                s.state = FetchState.IDLE
            raise
        finally:
            timer.cancel()

        if generation != s.generation:
            late_error = None if request.cancelled() else request.exception()
            logger.debug(f"Discarding late response for page {params['page']} (error={late_error!r})")
            return FetchState.TIMED_OUT

        if request.cancelled():
            return self._finish(FetchState.FAILED, "Request was cancelled.")

        error = request.exception()
        if error is not None:
            return self._finish(FetchState.FAILED, f"Request failed: {error}")

        response = request.result()
        if not response.is_success:
            return self._finish(FetchState.FAILED, unwrap_error_message(response.text))

        try:
            data = response.json()
            if not isinstance(data, list):
                raise ValueError("expected a JSON array of photos")
            photos = [PhotoRecord.model_validate(item) for item in data]
        except ValueError as e:
            return self._finish(FetchState.FAILED, f"Unreadable response: {e}")

        s.gallery.extend(photos)
        return self._finish(FetchState.RENDERED)

    def _expire(self, generation: int, request: asyncio.Future) -> None:
        s = self.session
        if generation != s.generation or not s.loading:
            return
        s.generation += 1
        request.cancel()
        self._finish(FetchState.TIMED_OUT, TIMEOUT_MESSAGE)

    def _finish(self, outcome: FetchState, message: Optional[str] = None) -> FetchState:
        s = self.session
        s.last_outcome = outcome
        s.message = message
        s.loading = False
        s.state = FetchState.IDLE
        if message:
            logger.info(f"Fetch ended {outcome.value}: {message}")
        return outcome
