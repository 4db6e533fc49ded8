"""
Process job log model.

Log entries are append-only and tied to a process, a job and a machine.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index

from process_cache.db.base import Base
from process_cache.models.enums import ProcessLogType
from process_cache.utils.timestamps import utc_now


class ProcessJobLog(Base):
    """Immutable diagnostic record with a severity type."""

    __tablename__ = "process_job_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    process_id = Column("process", Integer, ForeignKey("processes.id"), nullable=False)
    job_id = Column("job", Integer, ForeignKey("process_jobs.id"), nullable=False)
    machine = Column(String(255), nullable=False, default="")
    type = Column(String(32), nullable=False, default=ProcessLogType.GENERIC.value)
    message = Column(Text, nullable=False)
    created_at = Column("createdAt", DateTime, default=utc_now, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utc_now, nullable=False)

    __table_args__ = (
        Index("idx_process_job_logs_process_machine", "process", "machine", "createdAt"),
        Index("idx_process_job_logs_job_machine", "job", "machine", "createdAt"),
    )

    def __repr__(self):
        return f"<ProcessJobLog(id={self.id}, job={self.job_id}, type='{self.type}')>"
