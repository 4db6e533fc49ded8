from process_cache.models.enums import ProcessLogType
from process_cache.models.process import Process
from process_cache.models.process_job import ProcessJob
from process_cache.models.process_job_log import ProcessJobLog
from process_cache.models.process_cache import ProcessCache

__all__ = [
    "ProcessLogType",
    "Process",
    "ProcessJob",
    "ProcessJobLog",
    "ProcessCache",
]
