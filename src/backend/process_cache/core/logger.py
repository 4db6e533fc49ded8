"""
Centralized logging for the process cache.

LoggerManager is a singleton holding one logger per domain. Every domain
writes to its own rotating file in the log directory; the chatty domains
also echo to the console.
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from process_cache.config.settings import get_settings


# Domains that also log to the console
CONSOLE_DOMAINS = ("system", "process", "cache")

DOMAINS = ("system", "process", "cache", "database")

MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

# backend/logs, next to the process_cache package
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent.parent / "logs"


class LoggerManager:
    """Singleton manager for domain loggers."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._log_dir: Optional[Path] = None
        self._loggers: Dict[str, Optional[logging.Logger]] = {domain: None for domain in DOMAINS}
        self._initialized = True

    @classmethod
    def get_instance(cls, log_dir: Optional[str] = None) -> "LoggerManager":
        """
        Get the singleton instance, initializing it with ``log_dir`` if given.

        Args:
            log_dir: Optional directory for the log files

        Returns:
            The LoggerManager singleton
        """
        instance = cls()
        if log_dir:
            instance.initialize(log_dir)
        return instance

    def initialize(self, log_dir: Optional[str] = None) -> None:
        """
        Create the log directory and configure every domain logger.

        The directory is resolved from ``log_dir``, then the LOG_DIR
        setting, then ``logs`` in the backend directory holding the package.
        """
        settings = get_settings()
        if log_dir:
            self._log_dir = Path(log_dir)
        elif settings.LOG_DIR:
            self._log_dir = Path(settings.LOG_DIR)
        else:
            self._log_dir = DEFAULT_LOG_DIR

        self._log_dir.mkdir(parents=True, exist_ok=True)

        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        for domain in DOMAINS:
            self._loggers[domain] = self._create_logger(domain, level)

    def _create_logger(self, domain: str, level: int) -> logging.Logger:
        logger = logging.getLogger(f"process_cache.{domain}")
        logger.setLevel(level)
        logger.propagate = False

        # Re-initialization replaces handlers instead of stacking them
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        formatter = logging.Formatter(
            f"[{domain.upper()}] %(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        file_handler = RotatingFileHandler(
            self._log_dir / f"{domain}.log",
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

        if domain in CONSOLE_DOMAINS:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            console_handler.setLevel(level)
            logger.addHandler(console_handler)

        return logger

    def _get(self, domain: str) -> logging.Logger:
        if self._loggers[domain] is None:
            self.initialize()
        return self._loggers[domain]

    @property
    def system(self) -> logging.Logger:
        return self._get("system")

    @property
    def process(self) -> logging.Logger:
        return self._get("process")

    @property
    def cache(self) -> logging.Logger:
        return self._get("cache")

    @property
    def database(self) -> logging.Logger:
        return self._get("database")
