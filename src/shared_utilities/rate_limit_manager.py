"""
Centralized request throttling for public registry APIs.

Registries such as npm, Packagist and PyPI do not publish quota headers the way
GitHub does, so throttling is based on a minimum interval between requests and
on ``Retry-After`` hints returned with HTTP 429/503 responses.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from email.utils import parsedate_to_datetime

import requests
from loguru import logger

#: Upper bound for any single wait, in seconds.
MAX_WAIT_SECONDS = 300.0


@dataclass
class RateLimitStatus:
    """Throttling state derived from the last response seen."""

    status_code: int
    retry_after: float | None = None  # Seconds the server asked us to wait

    @property
    def throttled(self) -> bool:
        """Whether the server rejected the request for rate limiting reasons."""
        return self.status_code in (429, 503)


class RateLimitManager:
    """
    Spaces out registry requests and honors server back-off hints.

    Safe to share between worker threads; a single instance is used for every
    registry so the configured delay applies to the whole run.
    """

    def __init__(self, min_interval: float = 0.0, max_wait: float = MAX_WAIT_SECONDS):
        """
        Initialize rate limit manager.

        Args:
            min_interval: Minimum delay between two requests (seconds)
            max_wait: Cap for a single wait, including Retry-After hints
        """
        self.min_interval = max(0.0, min_interval)
        self.max_wait = max_wait
        self.last_status: RateLimitStatus | None = None
        self.last_request_time = 0.0
        self._not_before = 0.0
        self._lock = threading.Lock()

    def extract_rate_limit_status(
        self, response: requests.Response
    ) -> RateLimitStatus:
        """
        Extract throttling information from a registry response.

        Args:
            response: requests.Response object from a registry

        Returns:
            RateLimitStatus for the response
        """
        retry_after = parse_retry_after(response.headers.get("Retry-After"))
        status = RateLimitStatus(
            status_code=response.status_code, retry_after=retry_after
        )
        self.last_status = status
        return status

    def record_response(
        self, response: requests.Response, tool_name: str = "unknown"
    ) -> None:
        """
        Remember any back-off the server requested so the next request waits.

        Args:
            response: Registry response
            tool_name: Name of the caller for better logging
        """
        status = self.extract_rate_limit_status(response)
        if not status.throttled:
            return

        if status.retry_after is not None:
            wait = min(status.retry_after, self.max_wait)
        else:
            wait = min(self.min_interval or 1.0, self.max_wait)
        with self._lock:
            self._not_before = max(self._not_before, time.time() + wait)
        logger.warning(
            "[{tool_name}] Registry throttled request (HTTP {status_code}), "
            "delaying next request by {wait:.1f}s",
            tool_name=tool_name,
            status_code=status.status_code,
            wait=wait,
        )

    def calculate_delay(self, now: float | None = None) -> float:
        """
        Calculate the delay needed before the next request may start.

        Args:
            now: Current time, defaults to time.time()

        Returns:
            Delay in seconds (0 when a request may start immediately)
        """
        if now is None:
            now = time.time()
        interval_ready = self.last_request_time + self.min_interval
        delay = max(interval_ready, self._not_before) - now
        return min(max(0.0, delay), self.max_wait)

    def wait_if_needed(self, tool_name: str = "unknown") -> None:
        """
        Block until the next request is allowed, then reserve the slot.

        Args:
            tool_name: Name of tool making the request for better logging
        """
        with self._lock:
            delay = self.calculate_delay()
            if delay > 0:
                logger.debug(
                    "[{tool_name}] Rate limiting: waiting {delay:.1f}s",
                    tool_name=tool_name,
                    delay=delay,
                )
                time.sleep(delay)
            self.last_request_time = time.time()

    def make_rate_limited_request(
        self, request_func: Callable, tool_name: str = "unknown", *args, **kwargs
    ) -> requests.Response:
        """
        Make a throttled registry request.

        Args:
            request_func: Function that makes the HTTP request (e.g., session.get)
            tool_name: Name of tool making the request for logging
            *args, **kwargs: Arguments passed to request_func

        Returns:
            requests.Response object
        """
        self.wait_if_needed(tool_name=tool_name)
        response = request_func(*args, **kwargs)
        self.record_response(response, tool_name)
        return response


def parse_retry_after(value: str | None) -> float | None:
    """
    Parse a Retry-After header given either as seconds or as an HTTP date.

    Args:
        value: Raw header value

    Returns:
        Seconds to wait, or None if the header is absent or unparsable
    """
    if not value:
        return None

    value = value.strip()
    if value.isdigit():
        return float(value)

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    return max(0.0, retry_at.timestamp() - time.time())
