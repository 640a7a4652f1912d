"""
Normalization helpers shared by all registry adapters.

Registries report timestamps and deprecation hints in different shapes; these
helpers turn them into the report's plain-text markers.
"""

import re
from datetime import datetime, timezone
from typing import Any

from .data_models import INVALID_DATE, NOT_FOUND, POSSIBLE_DEPRECATION

#: Phrases in a readme/description that suggest the package is deprecated.
#: Matched anywhere in the text; only "eol" must start a word ("geolocation").
DEPRECATION_PATTERN = re.compile(
    r"deprecated"
    r"|no\s+longer\s+maintained"
    r"|end[\s-]+of[\s-]+life"
    r"|\beol"
    r"|unmaintained"
    r"|dropped"
    r"|removed",
    re.IGNORECASE,
)


def parse_release_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 registry timestamp into an aware UTC datetime.

    Accepts a trailing ``Z``, explicit offsets, date-only values and naive
    timestamps (PyPI's ``upload_time``), which are taken to be UTC.

    Args:
        value: Raw value from a registry payload

    Returns:
        The parsed datetime, or None if the value is missing or unparsable
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as ``YYYY/M/D`` without zero padding."""
    return f"{moment.year}/{moment.month}/{moment.day}"


def format_release_date(value: Any) -> str:
    """
    Format a registry timestamp as ``YYYY/M/D`` (UTC, no zero padding).

    Args:
        value: ISO-8601 date or timestamp string from a registry

    Returns:
        The formatted date, NOT_FOUND for a missing value or INVALID_DATE
        when the value cannot be parsed

    Examples:
        >>> format_release_date("2020-01-05T00:00:00.000Z")
        '2020/1/5'
        >>> format_release_date(None)
        'Not found'
        >>> format_release_date("yesterday")
        'Invalid date'
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return NOT_FOUND

    parsed = parse_release_timestamp(value)
    if parsed is None:
        return INVALID_DATE
    return format_timestamp(parsed)


def detect_readme_deprecation(text: Any) -> str:
    """
    Apply the deprecation heuristic to free-form readme/description text.

    Args:
        text: Readme or description; non-string values count as empty

    Returns:
        POSSIBLE_DEPRECATION if a trigger phrase is present, else ""
    """
    if not isinstance(text, str) or not text:
        return ""
    return POSSIBLE_DEPRECATION if DEPRECATION_PATTERN.search(text) else ""


def strip_version_prefix(version: str) -> str:
    """Drop a leading ``v``/``V`` so ``v1.2.0`` and ``1.2.0`` compare equal."""
    return version[1:] if version[:1] in ("v", "V") else version
