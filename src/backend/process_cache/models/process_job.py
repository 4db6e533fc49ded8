"""
Process job model.

A job is a named sub-unit of a process. The pair (process, name) is unique.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Index

from process_cache.db.base import Base
from process_cache.utils.timestamps import utc_now


class ProcessJob(Base):
    """Named job owned by exactly one process."""

    __tablename__ = "process_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_id = Column("process", Integer, ForeignKey("processes.id"), nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column("createdAt", DateTime, default=utc_now, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("process", "name", name="uq_process_jobs_process_name"),
        Index("idx_process_jobs_process", "process"),
        Index("idx_process_jobs_name", "name"),
    )

    def __repr__(self):
        return f"<ProcessJob(id={self.id}, process={self.process_id}, name='{self.name}')>"
