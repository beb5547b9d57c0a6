from app.models.search_query import SearchQuery

__all__ = ["SearchQuery"]
