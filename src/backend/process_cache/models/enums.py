from enum import Enum


class ProcessLogType(str, Enum):
    """Severity of a process job log entry."""
    GENERIC = "GENERIC"
    WARNING = "WARNING"
    ERROR = "ERROR"
