"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import Mock

import pytest
import requests

from src.release_check.config import ReleaseCheckConfig
from src.shared_utilities import RateLimitManager


def make_response(payload=None, status_code=200, headers=None, json_error=None):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error"
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def response_factory():
    """Factory for mock registry responses."""
    return make_response


@pytest.fixture
def config():
    """Config without delays."""
    return ReleaseCheckConfig(timeout=5, request_delay=0)


@pytest.fixture
def rate_limiter():
    """Throttle that never waits."""
    return RateLimitManager(min_interval=0)


@pytest.fixture
def mock_session():
    """Session whose get() returns whatever the test configures."""
    return Mock(spec=requests.Session)


@pytest.fixture
def npm_payload():
    """Trimmed npm packument for left-pad."""
    return {
        "name": "left-pad",
        "dist-tags": {"latest": "1.3.0"},
        "versions": {
            "1.1.3": {"version": "1.1.3"},
            "1.3.0": {
                "version": "1.3.0",
                "deprecated": "use String.prototype.padStart()",
            },
        },
        "time": {
            "created": "2014-03-18T02:28:47.963Z",
            "1.1.3": "2016-11-01T01:36:52.389Z",
            "1.3.0": "2018-04-09T00:28:22.145Z",
        },
        "readme": "This package is deprecated, use String.prototype.padStart().",
    }


@pytest.fixture
def packagist_payload():
    """Minified Composer 2 metadata for monolog/monolog."""
    return {
        "minified": "composer/2.0",
        "packages": {
            "monolog/monolog": [
                {
                    "name": "monolog/monolog",
                    "description": "Sends your logs to files, sockets and databases",
                    "version": "3.5.0",
                    "version_normalized": "3.5.0.0",
                    "time": "2023-10-27T15:32:31+00:00",
                },
                {
                    "version": "3.5.0-RC1",
                    "version_normalized": "3.5.0.0-RC1",
                    "time": "2023-10-20T10:00:00+00:00",
                },
                {
                    "version": "2.9.1",
                    "version_normalized": "2.9.1.0",
                    "time": "2023-02-06T13:44:46+00:00",
                },
            ]
        },
    }


@pytest.fixture
def pypi_payload():
    """Trimmed PyPI JSON API document for requests."""
    return {
        "info": {
            "name": "requests",
            "version": "2.31.0",
            "description": "Python HTTP for Humans.",
            "yanked": False,
        },
        "releases": {
            "2.30.0": [
                {
                    "filename": "requests-2.30.0.tar.gz",
                    "upload_time": "2023-05-03T15:30:00",
                    "upload_time_iso_8601": "2023-05-03T15:30:00.123456Z",
                    "yanked": False,
                },
                {
                    "filename": "requests-2.30.0-py3-none-any.whl",
                    "upload_time": "2023-05-03T15:29:58",
                    "upload_time_iso_8601": "2023-05-03T15:29:58.000000Z",
                    "yanked": False,
                },
            ],
            "2.31.0": [
                {
                    "filename": "requests-2.31.0.tar.gz",
                    "upload_time": "2023-05-22T15:12:44",
                    "upload_time_iso_8601": "2023-05-22T15:12:44.175803Z",
                    "yanked": False,
                }
            ],
        },
    }
