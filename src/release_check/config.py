"""
Configuration for the release check tool.
"""

import os
from dataclasses import dataclass, field

DEFAULT_INPUT_PATH = "input.csv"
DEFAULT_OUTPUT_PATH = "output/npm_release_dates.csv"
DEFAULT_TIMEOUT = 30.0
DEFAULT_REQUEST_DELAY = 0.0
DEFAULT_USER_AGENT = "package-release-check/1.0 (+https://pypi.org/project/package-release-check/)"

#: Prefix for environment variables that back CLI options.
ENV_PREFIX = "RELEASE_CHECK"

#: Metadata endpoints, keyed by registry name. ``{package}`` is URL-encoded.
REGISTRY_ENDPOINTS = {
    "npm": "https://registry.npmjs.org/{package}",
    "packagist": "https://repo.packagist.org/p2/{package}.json",
    "pypi": "https://pypi.org/pypi/{package}/json",
}

#: Lookup order used by the resolver.
REGISTRY_ORDER = ("npm", "packagist", "pypi")


@dataclass
class ReleaseCheckConfig:
    """Runtime settings shared by the registry adapters and the resolver."""

    timeout: float = DEFAULT_TIMEOUT
    request_delay: float = DEFAULT_REQUEST_DELAY
    workers: int = 1
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            f"{ENV_PREFIX}_USER_AGENT", DEFAULT_USER_AGENT
        )
    )
    endpoints: dict[str, str] = field(
        default_factory=lambda: dict(REGISTRY_ENDPOINTS)
    )

    def __post_init__(self):
        """Validate numeric settings."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.request_delay < 0:
            raise ValueError("request_delay must not be negative")
        if self.workers < 1:
            raise ValueError("workers must be at least 1")
