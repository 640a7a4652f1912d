"""
Centralized loguru setup for release-check.

Modules call ``get_logger(__name__)`` at import time and log with keyword
arguments; the CLI calls ``configure_logging`` once it knows the verbosity.
Until then loguru's default stderr sink is in effect.
"""

import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level>"
)
PLAIN_CONSOLE_FORMAT = "<level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | {message}"
)


class LoggingManager:
    """Owns the loguru sinks for one process."""

    def __init__(self, service_name: str = "package-release-check"):
        self.service_name = service_name
        self._configured = False

    @property
    def configured(self) -> bool:
        """Whether sinks have been installed."""
        return self._configured

    def configure_logging(
        self,
        level: str = "INFO",
        enable_file_logging: bool = False,
        log_file_path: Path | None = None,
        structured_format: bool = True,
        force: bool = False,
    ) -> None:
        """
        Install the stderr sink and, optionally, a rotating file sink.

        Args:
            level: Minimum level for every sink
            enable_file_logging: Also write to ``log_file_path``
            log_file_path: Defaults to ``logs/<service_name>.log`` in the cwd
            structured_format: Timestamped console lines and JSON file records
            force: Replace sinks from an earlier call
        """
        if self._configured and not force:
            return

        logger.remove()
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT if structured_format else PLAIN_CONSOLE_FORMAT,
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

        if enable_file_logging:
            log_file_path = log_file_path or (
                Path.cwd() / "logs" / f"{self.service_name}.log"
            )
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                str(log_file_path),
                format=FILE_FORMAT,
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="gz",
                diagnose=False,
                serialize=structured_format,
            )

        # Default for records logged through the bare logger
        logger.configure(
            extra={"service_name": self.service_name, "component": self.service_name}
        )
        self._configured = True
        logger.debug(
            "Logging configured at {level}",
            level=level,
            file_logging=enable_file_logging,
        )

    def get_logger(self, name: str) -> Any:
        """Return the logger bound to a component name."""
        return logger.bind(component=name)

    def log_operation_start(self, operation: str, **kwargs) -> None:
        """Log the start of a run-level operation."""
        self.get_logger(self.service_name).info(
            "{operation} started", operation=operation, **kwargs
        )

    def log_operation_complete(self, operation: str, duration: float, **kwargs) -> None:
        """Log the end of a run-level operation with its duration."""
        self.get_logger(self.service_name).info(
            "{operation} completed in {duration_seconds:.1f}s",
            operation=operation,
            duration_seconds=duration,
            **kwargs,
        )

    def log_api_request(
        self, method: str, url: str, status_code: int, duration: float
    ) -> None:
        """Log one registry request; server errors are raised to WARNING."""
        self.get_logger(self.service_name).log(
            "WARNING" if status_code >= 500 else "DEBUG",
            "{method} {url} -> {status_code}",
            method=method,
            url=url,
            status_code=status_code,
            duration_seconds=round(duration, 3),
        )


_logging_manager: LoggingManager | None = None


def get_logging_manager() -> LoggingManager:
    """Get or create the process-wide LoggingManager."""
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def configure_logging(
    level: str | None = None,
    structured: bool = True,
    enable_file_logging: bool | None = None,
    force: bool = False,
) -> None:
    """
    Configure logging from arguments, falling back to the environment.

    Args:
        level: Logging level, defaults to ``LOG_LEVEL`` or INFO
        structured: Include timestamp and component in console lines
        enable_file_logging: Defaults to ``ENABLE_FILE_LOGGING=true``
        force: Reconfigure even if already configured
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    if enable_file_logging is None:
        enable_file_logging = (
            os.getenv("ENABLE_FILE_LOGGING", "false").lower() == "true"
        )

    get_logging_manager().configure_logging(
        level=level,
        structured_format=structured,
        enable_file_logging=enable_file_logging,
        force=force,
    )


def get_logger(name: str) -> Any:
    """Bound logger for a component, usually ``get_logger(__name__)``."""
    return get_logging_manager().get_logger(name)
