"""
Process cache model.

Cache entries are append-only key/value records tied to a process, a job
and a machine. Keys are not unique: every write adds a row.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index

from process_cache.db.base import Base
from process_cache.utils.timestamps import utc_now


class ProcessCache(Base):
    """Immutable key/value record."""

    __tablename__ = "process_cache"

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_id = Column("process", Integer, ForeignKey("processes.id"), nullable=False)
    job_id = Column("job", Integer, ForeignKey("process_jobs.id"), nullable=False)
    machine = Column(String(255), nullable=False, default="")
    key = Column(String(255), nullable=False, default="")
    value = Column(Text, nullable=False)
    created_at = Column("createdAt", DateTime, default=utc_now, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("idx_process_cache_scope_key", "process", "job", "machine", "key"),
    )

    def __repr__(self):
        return f"<ProcessCache(id={self.id}, key='{self.key}')>"
