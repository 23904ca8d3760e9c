from app.db.models.search_result import SearchResultORM

__all__ = [
    "SearchResultORM",
]
