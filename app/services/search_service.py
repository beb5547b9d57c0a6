from typing import List, Optional, Protocol
from app.core.errors import (
    PhotoProviderError,
    PhotoSearchError,
    ProviderApplicationError,
    ProviderStatusError,
    ProviderTimeoutError,
    ProviderTransportError,
    MalformedPayloadError,
)
from app.schemas.photo import RECENT_SENTINEL, PhotoRecord, SortOrder
from app.services.history_store import SearchHistoryStore
import logging

logger = logging.getLogger(__name__)


class PhotoClient(Protocol):
    async def search_photos(self, term: str, page: int, sort: SortOrder) -> List[PhotoRecord]: ...

    async def get_recent_photos(self, page: int, sort: SortOrder) -> List[PhotoRecord]: ...


def normalize_search_term(raw: Optional[str]) -> Optional[str]:
    """Trimmed term, or ``None`` when the request asks for recent photos."""
    if raw is None:
        return None
    term = raw.strip()
    if not term or term == RECENT_SENTINEL:
        return None
    return term


def describe_provider_error(error: PhotoProviderError) -> str:
    if isinstance(error, ProviderApplicationError):
        prefix = f"Flickr API error {error.code}" if error.code is not None else "Flickr API error"
        return f"{prefix}: {error.message}"
    if isinstance(error, ProviderTimeoutError):
        return "The photo service did not respond in time. Please try again later."
    if isinstance(error, ProviderTransportError):
        return "The photo service could not be reached. Please try again later."
    if isinstance(error, ProviderStatusError):
        return f"The photo service responded with HTTP {error.status_code}."
    if isinstance(error, MalformedPayloadError):
        return "The photo service returned a response that could not be read."
    return f"The photo service failed: {error}"


class PhotoSearchService:
    def __init__(self, photo_client: PhotoClient, history: SearchHistoryStore):
        self.photo_client = photo_client
        self.history = history

    async def search(self, search_term: Optional[str], page: int, sort: SortOrder | str) -> List[PhotoRecord]:
        """Record the term, then fetch one page of photos from the provider.

        Blank terms and the ``NULL`` sentinel select recent mode and are never
        recorded. History is written before the provider call and regardless
        of its outcome; a failed write is logged and does not fail the search.
        Provider failures are raised as a single ``PhotoSearchError``.
        """
        term = normalize_search_term(search_term)
        sort = SortOrder.parse(sort)

        if term is not None:
            await self._record(term)

        try:
            if term is None:
                return await self.photo_client.get_recent_photos(page, sort)
            return await self.photo_client.search_photos(term, page, sort)
        except PhotoProviderError as e:
            logger.error(f"Failed to search photos with term {term!r} and page {page}: {e}")
            raise PhotoSearchError(describe_provider_error(e), kind=e.kind) from e
        except Exception as e:
            logger.exception(f"Unexpected error searching photos with term {term!r} and page {page}")
            raise PhotoSearchError(f"Unexpected error while searching photos: {e}") from e

    async def _record(self, term: str) -> None:
        try:
            await self.history.append(term)
        except Exception as e:
            # includes driver errors SQLAlchemy does not wrap, e.g. a refused connection
            logger.error(f"Failed to record search term {term!r}: {e!r}", extra={"error_kind": "storage"})
