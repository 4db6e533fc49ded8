"""
Exceptions raised by the process cache services.
"""


class NotLoadedError(RuntimeError):
    """Raised when a service is used before its load() has completed."""


class JobNotLoadedError(NotLoadedError):
    """Raised when a JobService is used before load() has completed."""
