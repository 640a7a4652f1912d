"""
Registry adapters for npm, Packagist and PyPI.

Each adapter fetches a package's metadata document and normalizes it into a
ReleaseRecord. Any failure is raised as a RegistryLookupError subclass so the
resolver can move on to the next registry.
"""

import re
import time
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

import requests

from ..shared_utilities import (
    RateLimitManager,
    get_logger,
    get_logging_manager,
    trace_function,
)
from .config import ReleaseCheckConfig
from .data_models import (
    DEPRECATED_YES,
    INVALID_DATE,
    NOT_FOUND,
    PackageRequest,
    ReleaseRecord,
)
from .errors import (
    RegistryFetchError,
    RegistryLookupError,
    RegistryResponseError,
    VersionNotFoundError,
)
from .normalization import (
    detect_readme_deprecation,
    format_release_date,
    format_timestamp,
    parse_release_timestamp,
    strip_version_prefix,
)

logger = get_logger(__name__)


def build_session(config: ReleaseCheckConfig) -> requests.Session:
    """Create the HTTP session shared by all adapters."""
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
    )
    return session


class RegistryAdapter(ABC):
    """
    Base class for a single package registry.

    Subclasses set ``name`` (also used as the record's ``source``), the
    characters left unescaped in package names, and implement ``normalize``.
    """

    name: str = ""
    safe_name_chars: str = ""

    def __init__(
        self,
        session: requests.Session | None = None,
        config: ReleaseCheckConfig | None = None,
        rate_limit_manager: RateLimitManager | None = None,
    ):
        """
        Initialize the adapter.

        Args:
            session: HTTP session, created from config if omitted
            config: Timeouts, endpoints and headers
            rate_limit_manager: Throttle shared across adapters
        """
        self.config = config or ReleaseCheckConfig()
        self.session = session or build_session(self.config)
        self.rate_limit_manager = rate_limit_manager or RateLimitManager(
            self.config.request_delay
        )

    def lookup(self, request: PackageRequest) -> ReleaseRecord:
        """
        Look up one package version in this registry.

        Args:
            request: Library and current version from the input file

        Returns:
            Normalized record with ``source`` set to this registry's name

        Raises:
            RegistryLookupError: If the registry cannot answer for the request
        """
        if not request.library or not request.current_version:
            raise RegistryLookupError(
                self.name, request.library, "library and version are required"
            )

        payload = self.fetch(request.library)
        try:
            return self.normalize(request, payload)
        except RegistryLookupError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise RegistryResponseError(
                self.name, request.library, f"unexpected response shape: {e}"
            ) from e

    def build_url(self, library: str) -> str:
        """Return the metadata URL for a package."""
        template = self.config.endpoints[self.name]
        return template.format(package=quote(library, safe=self.safe_name_chars))

    @trace_function("registry_fetch")
    def fetch(self, library: str) -> dict[str, Any]:
        """
        Fetch and decode the metadata document for a package.

        Args:
            library: Package name as given in the input file

        Returns:
            Decoded JSON object

        Raises:
            RegistryFetchError: On network errors or non-successful status
            RegistryResponseError: If the body is not a JSON object
        """
        url = self.build_url(library)
        started = time.time()

        try:
            response = self.rate_limit_manager.make_rate_limited_request(
                self.session.get, self.name, url, timeout=self.config.timeout
            )
        except requests.RequestException as e:
            raise RegistryFetchError(self.name, library, f"request failed: {e}") from e

        get_logging_manager().log_api_request(
            "GET", url, response.status_code, time.time() - started
        )

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise RegistryFetchError(
                self.name, library, f"HTTP {response.status_code} from {url}"
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise RegistryResponseError(
                self.name, library, "response is not valid JSON"
            ) from e

        if not isinstance(payload, dict):
            raise RegistryResponseError(
                self.name, library, "response is not a JSON object"
            )
        return payload

    @abstractmethod
    def normalize(
        self, request: PackageRequest, payload: dict[str, Any]
    ) -> ReleaseRecord:
        """Convert a registry payload into a ReleaseRecord."""
        pass

    def _not_found(self, request: PackageRequest) -> VersionNotFoundError:
        return VersionNotFoundError(
            self.name,
            request.library,
            f"version {request.current_version} not found for {request.library}",
        )


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class NpmAdapter(RegistryAdapter):
    """npm registry (``registry.npmjs.org``)."""

    name = "npm"
    # Scoped packages are requested as @scope%2Fname
    safe_name_chars = "@"

    def normalize(
        self, request: PackageRequest, payload: dict[str, Any]
    ) -> ReleaseRecord:
        versions = payload.get("versions")
        if not isinstance(versions, dict) or request.current_version not in versions:
            raise self._not_found(request)

        times = _as_dict(payload.get("time"))
        latest = _as_dict(payload.get("dist-tags")).get("latest")

        if isinstance(latest, str) and latest:
            latest_version = latest
            latest_date = format_release_date(times.get(latest))
        else:
            latest_version = NOT_FOUND
            latest_date = NOT_FOUND

        deprecated = any(
            _as_dict(versions.get(version)).get("deprecated")
            for version in (request.current_version, latest)
            if isinstance(version, str)
        )

        return ReleaseRecord(
            library=request.library,
            current_version=request.current_version,
            current_version_date=format_release_date(
                times.get(request.current_version)
            ),
            latest_version=latest_version,
            latest_version_date=latest_date,
            deprecated=DEPRECATED_YES if deprecated else "",
            readme_flag=detect_readme_deprecation(payload.get("readme")),
            source=self.name,
        )


#: Value Composer uses in minified metadata to drop an inherited field.
_UNSET = "__unset"
_UNSTABLE_VERSION = re.compile(
    r"(?:^dev-|-dev$|[-_.]?(?:alpha|beta|rc)[-_.]?\d*$)", re.IGNORECASE
)
_VERSION_PATTERN = re.compile(
    r"^v?(?P<release>\d+(?:\.\d+)*)"
    r"(?:[-_.]?(?P<stage>alpha|beta|rc|a|b|patch|pl|p)[-_.]?(?P<stage_number>\d*))?$",
    re.IGNORECASE,
)
_STAGE_RANK = {
    "alpha": 0,
    "a": 0,
    "beta": 1,
    "b": 1,
    "rc": 2,
    "patch": 4,
    "pl": 4,
    "p": 4,
}
_STABLE_RANK = 3


def expand_minified_versions(entries: list[Any]) -> list[dict[str, Any]]:
    """
    Expand Composer 2 minified version metadata.

    In minified payloads each entry only lists the fields that differ from the
    previous entry; ``"__unset"`` removes an inherited field.

    Args:
        entries: Version entries as served by the p2 endpoint

    Returns:
        Fully populated version entries, in the original order
    """
    expanded: list[dict[str, Any]] = []
    previous: dict[str, Any] = {}

    for entry in entries:
        if not isinstance(entry, dict):
            raise TypeError("version entry is not an object")

        current = dict(previous)
        for key, value in entry.items():
            if value == _UNSET:
                current.pop(key, None)
            else:
                current[key] = value

        expanded.append(current)
        previous = current

    return expanded


def is_stable_version(version: str) -> bool:
    """Whether a Composer version string denotes a stable release."""
    return not _UNSTABLE_VERSION.search(version)


def version_sort_key(entry: dict[str, Any]) -> tuple | None:
    """
    Ordering key for a Composer version entry.

    ``version_normalized`` is preferred, falling back to ``version``. Numeric
    parts are padded to four, then pre-release stages rank alpha < beta < RC
    < stable < patch.

    Args:
        entry: Expanded version entry

    Returns:
        A comparable tuple, or None for development branches and versions
        that are not numeric
    """
    raw = entry.get("version_normalized") or entry.get("version")
    if not isinstance(raw, str):
        return None

    match = _VERSION_PATTERN.match(raw.strip())
    if match is None:
        return None

    release = [int(part) for part in match.group("release").split(".")]
    release += [0] * (4 - len(release))
    stage = (match.group("stage") or "").lower()
    stage_number = int(match.group("stage_number") or 0)
    return (tuple(release), _STAGE_RANK.get(stage, _STABLE_RANK), stage_number)


def select_latest_entry(entries: list[dict[str, Any]]) -> dict[str, Any] | None:
    """
    Pick the highest version, preferring stable releases.

    The p2 list order is not relied upon; entries are compared with
    ``version_sort_key``. Development branches are ignored.

    Args:
        entries: Expanded version entries

    Returns:
        The highest entry, or None if no entry has a comparable version
    """
    candidates = []
    for entry in entries:
        version = entry.get("version")
        key = version_sort_key(entry)
        if not isinstance(version, str) or key is None:
            continue
        candidates.append((key, version, entry))

    stable = [c for c in candidates if is_stable_version(c[1])]
    pool = stable or candidates
    if not pool:
        return None

    # First entry wins on equal versions
    return max(pool, key=lambda candidate: candidate[0])[2]


class PackagistAdapter(RegistryAdapter):
    """Packagist (``repo.packagist.org``) Composer v2 metadata."""

    name = "packagist"
    safe_name_chars = "/"

    def normalize(
        self, request: PackageRequest, payload: dict[str, Any]
    ) -> ReleaseRecord:
        packages = payload.get("packages")
        if not isinstance(packages, dict):
            raise RegistryResponseError(
                self.name, request.library, "response has no 'packages' object"
            )

        entries = packages.get(request.library, packages.get(request.library.lower()))
        if not isinstance(entries, list):
            raise RegistryResponseError(
                self.name, request.library, "package missing from response"
            )
        if payload.get("minified"):
            entries = expand_minified_versions(entries)

        wanted = strip_version_prefix(request.current_version)
        current = next(
            (
                entry
                for entry in entries
                if isinstance(entry, dict)
                and strip_version_prefix(str(entry.get("version", ""))) == wanted
            ),
            None,
        )
        if current is None:
            raise self._not_found(request)

        latest = select_latest_entry(entries)
        if latest is None:
            logger.debug(
                "No Packagist release of {library} has a comparable version",
                library=request.library,
            )
            latest_version = NOT_FOUND
            latest_date = NOT_FOUND
            describing = current
        else:
            latest_version = str(latest["version"])
            latest_date = format_release_date(latest.get("time"))
            describing = latest

        abandoned = bool(current.get("abandoned")) or bool(
            latest and latest.get("abandoned")
        )

        return ReleaseRecord(
            library=request.library,
            current_version=request.current_version,
            current_version_date=format_release_date(current.get("time")),
            latest_version=latest_version,
            latest_version_date=latest_date,
            deprecated=DEPRECATED_YES if abandoned else "",
            readme_flag=detect_readme_deprecation(describing.get("description")),
            source=self.name,
        )


def release_upload_date(files: Any) -> str:
    """
    Date of a PyPI release, taken from its earliest uploaded file.

    Args:
        files: The release's file list from the ``releases`` mapping

    Returns:
        Formatted date, NOT_FOUND if no file carries an upload time, or
        INVALID_DATE if none of the upload times can be parsed
    """
    if not isinstance(files, list):
        return NOT_FOUND

    stamps = [
        file_info.get("upload_time_iso_8601") or file_info.get("upload_time")
        for file_info in files
        if isinstance(file_info, dict)
    ]
    stamps = [stamp for stamp in stamps if stamp]
    if not stamps:
        return NOT_FOUND

    parsed = [parse_release_timestamp(stamp) for stamp in stamps]
    valid = [moment for moment in parsed if moment is not None]
    if not valid:
        return INVALID_DATE
    return format_timestamp(min(valid))


class PyPIAdapter(RegistryAdapter):
    """Python Package Index JSON API (``pypi.org/pypi``)."""

    name = "pypi"

    def normalize(
        self, request: PackageRequest, payload: dict[str, Any]
    ) -> ReleaseRecord:
        info = payload.get("info")
        releases = payload.get("releases")
        if not isinstance(info, dict) or not isinstance(releases, dict):
            raise RegistryResponseError(
                self.name, request.library, "response lacks 'info' or 'releases'"
            )

        if request.current_version not in releases:
            raise self._not_found(request)

        current_files = releases[request.current_version]
        latest = info.get("version")
        if isinstance(latest, str) and latest:
            latest_version = latest
            latest_date = (
                release_upload_date(releases[latest])
                if latest in releases
                else NOT_FOUND
            )
        else:
            latest_version = NOT_FOUND
            latest_date = NOT_FOUND

        yanked = bool(info.get("yanked")) or any(
            isinstance(file_info, dict) and file_info.get("yanked")
            for file_info in (current_files if isinstance(current_files, list) else [])
        )

        return ReleaseRecord(
            library=request.library,
            current_version=request.current_version,
            current_version_date=release_upload_date(current_files),
            latest_version=latest_version,
            latest_version_date=latest_date,
            deprecated=DEPRECATED_YES if yanked else "",
            readme_flag=detect_readme_deprecation(info.get("description")),
            source=self.name,
        )


def default_adapters(
    config: ReleaseCheckConfig | None = None,
    session: requests.Session | None = None,
    rate_limit_manager: RateLimitManager | None = None,
) -> list[RegistryAdapter]:
    """
    Build the adapters in lookup order, sharing one session and throttle.

    Args:
        config: Runtime settings
        session: HTTP session to share, created if omitted
        rate_limit_manager: Throttle to share, created if omitted

    Returns:
        npm, Packagist and PyPI adapters, in that order
    """
    config = config or ReleaseCheckConfig()
    session = session or build_session(config)
    rate_limit_manager = rate_limit_manager or RateLimitManager(config.request_delay)

    return [
        adapter_cls(
            session=session, config=config, rate_limit_manager=rate_limit_manager
        )
        for adapter_cls in (NpmAdapter, PackagistAdapter, PyPIAdapter)
    ]
