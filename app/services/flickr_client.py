
import httpx
import logging
from typing import Any, Dict, List, Optional
from .utils import backoff_client, limited_get, transport_retry
from app.core.errors import (
    MalformedPayloadError,
    PhotoProviderError,
    ProviderApplicationError,
    ProviderStatusError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from app.core.settings import settings
from app.schemas.photo import PhotoRecord, SortOrder

logger = logging.getLogger(__name__)

BASE = "https://api.flickr.com/services/rest/"


class FlickrClient:
    """Stateless adapter over the Flickr REST API.

    ``search_photos`` maps to ``flickr.photos.search`` and ``get_recent_photos``
    to ``flickr.photos.getRecent``. Both return ``PhotoRecord`` lists and raise
    subclasses of ``PhotoProviderError``. Only transport failures are retried.

    The API secret is held for signed calls; the public read methods used here
    are unsigned, so only the key goes on the wire.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str = "",
        base_url: str = BASE,
        per_page: int = 20,
        timeout: float = 20.0,
        retry_attempts: int = 3,
        retry_min_wait: float = 1.0,
        retry_max_wait: float = 8.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url
        self.per_page = per_page
        self.timeout = timeout
        self._transport = transport
        self._get_payload = transport_retry(retry_attempts, retry_min_wait, retry_max_wait)(self._get_payload_once)

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "FlickrClient":
        return cls(
            api_key=settings.flickr_api_key,
            api_secret=settings.flickr_api_secret,
            base_url=settings.flickr_base_url,
            per_page=settings.flickr_per_page,
            timeout=settings.flickr_timeout,
            retry_attempts=settings.flickr_retry_attempts,
            retry_min_wait=settings.flickr_retry_min_wait,
            retry_max_wait=settings.flickr_retry_max_wait,
            transport=transport,
        )

    async def search_photos(self, term: str, page: int, sort: SortOrder | str) -> List[PhotoRecord]:
        params = self._params("flickr.photos.search", page, sort)
        params["text"] = term
        return await self._fetch_photos(params)

    async def get_recent_photos(self, page: int, sort: SortOrder | str) -> List[PhotoRecord]:
        # getRecent ignores sort; it is sent anyway so both modes build the same request
        params = self._params("flickr.photos.getRecent", page, sort)
        return await self._fetch_photos(params)

    def _params(self, method: str, page: int, sort: SortOrder | str) -> Dict[str, Any]:
        return {
            "method": method,
            "api_key": self.api_key,
            "page": page,
            "per_page": self.per_page,
            "sort": SortOrder.parse(sort).provider_token,
            "format": "json",
            "nojsoncallback": 1,
        }

    async def _fetch_photos(self, params: Dict[str, Any]) -> List[PhotoRecord]:
        method = params["method"]
        logger.debug(f"Calling {method} page={params['page']} sort={params['sort']}")
        try:
            data = await self._get_payload(params)
        except PhotoProviderError as e:
            logger.error(f"{method} failed: {e}", extra={"error_kind": e.kind})
            raise
        return self._map_photos(data)

    async def _get_payload_once(self, params: Dict[str, Any]) -> Dict[str, Any]:
        async with backoff_client(self._transport, self.timeout) as client:
            try:
                response = await limited_get(client, self.base_url, params=params)
            except httpx.TimeoutException as e:
                raise ProviderTimeoutError(f"Timed out waiting for the photo provider: {e}") from e
            except httpx.RequestError as e:
                raise ProviderTransportError(f"Could not reach the photo provider: {e}") from e

        if not response.is_success:
            raise ProviderStatusError(response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedPayloadError(f"Provider response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedPayloadError("Provider response is not a JSON object")

        if data.get("stat") == "fail":
            raise ProviderApplicationError(data.get("code"), str(data.get("message") or "Unknown provider error"))

        return data

    @staticmethod
    def _map_photos(data: Dict[str, Any]) -> List[PhotoRecord]:
        photos = data.get("photos")
        if not isinstance(photos, dict):
            raise MalformedPayloadError("Provider response has no 'photos' object")

        items = photos.get("photo") or []
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise MalformedPayloadError("Provider 'photo' field is not a list of objects")

        return [PhotoRecord.from_provider(item) for item in items]
