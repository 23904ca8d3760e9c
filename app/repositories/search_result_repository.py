import logging
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.db.models.search_result import SearchResultORM
from app.models import Company, SearchQuery, SearchRecord, SearchRunResult

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10


def _to_record(orm: SearchResultORM) -> SearchRecord:
    return SearchRecord(
        id=orm.id,
        query=SearchQuery.model_validate(orm.search_params or {}),
        entities=[Company.model_validate(c) for c in (orm.companies or [])],
        total_results=orm.total_results,
        created_at=orm.created_at,
    )


class SearchResultRepository:
    def __init__(self, db: Session):
        self.db = db

    def save(self, query: SearchQuery, result: SearchRunResult) -> SearchRecord:
        orm = SearchResultORM(
            id=uuid4().hex,
            location=query.location_text,
            # snake_case keys, read back with populate_by_name
            search_params=query.model_dump(mode="json", by_alias=False),
            companies=[c.model_dump(mode="json", by_alias=False) for c in result.entities],
            total_results=len(result.entities),
        )
        self.db.add(orm)
        self.db.commit()
        self.db.refresh(orm)
        return _to_record(orm)

    def load(self, limit: int = DEFAULT_HISTORY_LIMIT, location: str | None = None) -> list[SearchRecord]:
        """Stored runs, newest first, optionally filtered by location substring."""
        q = self.db.query(SearchResultORM)
        if location:
            q = q.filter(SearchResultORM.location.ilike(f"%{location}%"))
        rows = q.order_by(SearchResultORM.created_at.desc()).limit(limit).all()
        return [_to_record(r) for r in rows]

    def get(self, record_id: str) -> SearchRecord | None:
        orm = self.db.get(SearchResultORM, record_id)
        return _to_record(orm) if orm else None

    def delete(self, record_id: str) -> bool:
        orm = self.db.get(SearchResultORM, record_id)
        if not orm:
            return False
        self.db.delete(orm)
        self.db.commit()
        return True


def save_search_in_background(
    session_factory: sessionmaker,
    query: SearchQuery,
    result: SearchRunResult,
) -> None:
    """Persist a search run; failures are logged and never re-raised."""
    db = session_factory()
    try:
        record = SearchResultRepository(db).save(query, result)
        logger.info(f"Saved search {record.id} with {record.total_results} results")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to save search for {query.location_text!r}")
    finally:
        db.close()
