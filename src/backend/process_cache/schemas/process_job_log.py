from typing import Optional

from pydantic import BaseModel, Field

from process_cache.models.enums import ProcessLogType


class JobLogFilters(BaseModel):
    """Optional filters for process and job log listings. The defaults restrict nothing."""
    offset: Optional[int] = Field(None, ge=0, description="Number of entries to skip")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of entries to return")
    type: Optional[ProcessLogType] = Field(None, description="Only return entries of this log type")


DEFAULT_JOB_LOG_FILTERS = JobLogFilters()
