from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import async_session_maker
from app.models.search_query import SearchQuery
import logging

logger = logging.getLogger(__name__)


def query_key(term: str) -> str:
    return term.strip().lower()


class SearchHistoryStore:
    """Append-only log of distinct search terms.

    Uniqueness is enforced by the unique index on ``query_key``; ``append``
    is a single insert that loses cleanly to a concurrent writer instead of a
    separate existence check followed by an insert.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, term: str) -> bool:
        key = query_key(term)
        if not key:
            return False
        result = await self.session.execute(
            select(func.count(SearchQuery.id)).where(SearchQuery.query_key == key)
        )
        return result.scalar() > 0

    async def append(self, term: str, timestamp: Optional[datetime] = None) -> bool:
        text = term.strip()
        if not text:
            raise ValueError("Cannot record an empty search term")

        self.session.add(SearchQuery(
            query_text=text,
            query_key=query_key(text),
            search_time=timestamp or datetime.now(timezone.utc),
        ))
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.debug(f"Search term already recorded: {text!r}")
            return False
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        logger.info(f"Recorded new search term: {text!r}")
        return True

    async def list_all(self) -> List[SearchQuery]:
        result = await self.session.execute(
            select(SearchQuery).order_by(SearchQuery.search_time.desc(), SearchQuery.id.asc())
        )
        return list(result.scalars().all())

    async def clear(self) -> int:
        result = await self.session.execute(delete(SearchQuery))
        await self.session.commit()
        return result.rowcount or 0


async def reset_search_history():
    logger.info("Resetting search history...")

    async with async_session_maker() as session:
        try:
            removed = await SearchHistoryStore(session).clear()
        except Exception as e:
            logger.error(f"Error resetting search history: {e}")
            await session.rollback()
            raise

    logger.info(f"Search history reset, removed {removed} entries")
