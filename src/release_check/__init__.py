"""
Package release check toolkit.

Looks up release dates and deprecation status for (library, version) pairs on
npm, Packagist and PyPI and writes an enriched report.
"""

from .config import ReleaseCheckConfig
from .data_models import PackageRequest, ReleaseRecord, ResolutionSummary
from .errors import (
    InputFileError,
    RegistryFetchError,
    RegistryLookupError,
    RegistryResponseError,
    ReleaseCheckError,
    VersionNotFoundError,
)
from .input_loader import load_package_requests
from .output_formatter import ReleaseReportFormatter
from .registries import NpmAdapter, PackagistAdapter, PyPIAdapter, RegistryAdapter
from .resolver import RegistryResolver

__all__ = [
    "ReleaseCheckConfig",
    "PackageRequest",
    "ReleaseRecord",
    "ResolutionSummary",
    "ReleaseCheckError",
    "InputFileError",
    "RegistryLookupError",
    "RegistryFetchError",
    "VersionNotFoundError",
    "RegistryResponseError",
    "load_package_requests",
    "ReleaseReportFormatter",
    "RegistryAdapter",
    "NpmAdapter",
    "PackagistAdapter",
    "PyPIAdapter",
    "RegistryResolver",
]
