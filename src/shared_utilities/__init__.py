"""
Logging, tracing, throttling and report-writing helpers used by release_check.
"""

from .base_output_formatter import BaseOutputFormatter, OutputFormat, TableFormatter
from .filename_generator import (
    apply_format_extension,
    ensure_output_directory,
    generate_unique_path,
)
from .logging_config import configure_logging, get_logger, get_logging_manager
from .rate_limit_manager import RateLimitManager, RateLimitStatus
from .telemetry import get_telemetry_manager, trace_function, trace_operation

__all__ = [
    "BaseOutputFormatter",
    "OutputFormat",
    "TableFormatter",
    "apply_format_extension",
    "ensure_output_directory",
    "generate_unique_path",
    "configure_logging",
    "get_logger",
    "get_logging_manager",
    "RateLimitManager",
    "RateLimitStatus",
    "get_telemetry_manager",
    "trace_function",
    "trace_operation",
]
