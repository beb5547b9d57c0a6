from sqlalchemy import Column, BigInteger, Integer, Text, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base

class SearchQuery(Base):
    __tablename__ = "search_queries"

    # sqlite only autoincrements INTEGER PRIMARY KEY
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    query_text = Column(Text, nullable=False)
    query_key = Column(Text, nullable=False)
    search_time = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    __table_args__ = (
        UniqueConstraint('query_key', name='uq_search_queries_query_key'),
    )

    def __repr__(self) -> str:
        return f"<SearchQuery id={self.id} query_text={self.query_text!r}>"
