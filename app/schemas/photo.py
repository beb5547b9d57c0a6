import logging
import re
from datetime import datetime
from enum import StrEnum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

logger = logging.getLogger(__name__)

# Wire-level stand-in for "no search term"
RECENT_SENTINEL = "NULL"

IMAGE_URL_TEMPLATE = "https://farm{farm}.staticflickr.com/{server}/{id}_{secret}.jpg"


class SortOrder(StrEnum):
    RELEVANT = "Relevant"
    DATE_UPLOADED = "DateUploaded"
    DATE_TAKEN = "DateTaken"
    INTERESTING = "Interesting"

    @property
    def provider_token(self) -> str:
        return {
            SortOrder.RELEVANT: "relevance",
            SortOrder.DATE_UPLOADED: "date-posted-desc",
            SortOrder.DATE_TAKEN: "date-taken-desc",
            SortOrder.INTERESTING: "interestingness-desc",
        }[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        """Parse a sort token leniently; unknown tokens fall back to ``Relevant``.

        Matching ignores case, whitespace, underscores and hyphens, so both
        ``DateUploaded`` and ``"Date uploaded"`` resolve to the same order.
        """
        if isinstance(value, cls):
            return value
        key = re.sub(r"[\s_\-]", "", value or "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        if key:
            logger.warning(f"Unknown sort token {value!r}, defaulting to {cls.RELEVANT.value}")
        return cls.RELEVANT


def image_url(server: str, photo_id: str, secret: str, farm: int) -> str:
    return IMAGE_URL_TEMPLATE.format(farm=farm, server=server, id=photo_id, secret=secret)


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class PhotoRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    owner: str = ""
    secret: str = ""
    server: str = ""
    farm: int = 0
    title: str = ""
    # provider tri-state flags, kept as ints
    is_public: int = Field(default=0, alias="isPublic")
    is_friend: int = Field(default=0, alias="isFriend")
    is_family: int = Field(default=0, alias="isFamily")

    @computed_field(alias="imageUrl")
    @property
    def image_url(self) -> str:
        return image_url(self.server, self.id, self.secret, self.farm)

    @classmethod
    def from_provider(cls, item: Dict[str, Any]) -> "PhotoRecord":
        return cls(
            id=_as_str(item.get("id")),
            owner=_as_str(item.get("owner")),
            secret=_as_str(item.get("secret")),
            server=_as_str(item.get("server")),
            farm=_as_int(item.get("farm")),
            title=_as_str(item.get("title")),
            is_public=_as_int(item.get("ispublic")),
            is_friend=_as_int(item.get("isfriend")),
            is_family=_as_int(item.get("isfamily")),
        )


class SearchQueryOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    query_text: str = Field(alias="queryText")
    search_time: datetime = Field(alias="searchTime")

    @classmethod
    def from_row(cls, row) -> "SearchQueryOut":
        return cls(id=row.id, query_text=row.query_text, search_time=row.search_time)
