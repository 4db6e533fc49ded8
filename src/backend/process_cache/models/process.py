"""
Process model.

A process is the root of the hierarchy, e.g. an application or script
identity. Its name is stored normalized and is unique.
"""
from sqlalchemy import Column, Integer, String, DateTime

from process_cache.db.base import Base
from process_cache.utils.timestamps import utc_now


class Process(Base):
    """Top-level named unit of work."""

    __tablename__ = "processes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column("createdAt", DateTime, default=utc_now, nullable=False)
    updated_at = Column("updatedAt", DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        return f"<Process(id={self.id}, name='{self.name}')>"
