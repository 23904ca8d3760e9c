from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String

from app.db.base import Base


class SearchResultORM(Base):
    __tablename__ = "search_results"

    id = Column(String, primary_key=True)
    location = Column(String, nullable=False, index=True)

    # Query and entities are stored as opaque JSON blobs
    search_params = Column(JSON, nullable=False, default=dict)
    companies = Column(JSON, nullable=False, default=list)

    total_results = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), index=True)
