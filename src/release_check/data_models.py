"""
Data models for package release lookups.
"""

from dataclasses import dataclass, field

ERROR_MARKER = "ERROR"
NOT_FOUND = "Not found"
INVALID_DATE = "Invalid date"
DEPRECATED_YES = "Yes"
POSSIBLE_DEPRECATION = "Possible deprecation"

#: Report columns, in output order, mapped to ReleaseRecord attributes.
REPORT_COLUMNS = {
    "lib": "library",
    "cur_ver": "current_version",
    "cur_ver_date": "current_version_date",
    "latest_ver": "latest_version",
    "latest_ver_date": "latest_version_date",
    "deprecated": "deprecated",
    "readme_flag": "readme_flag",
    "src": "source",
}


@dataclass(frozen=True)
class PackageRequest:
    """One input row: a library and the version currently in use."""

    library: str
    current_version: str


@dataclass(frozen=True)
class ReleaseRecord:
    """Normalized release information for one PackageRequest."""

    library: str
    current_version: str
    current_version_date: str
    latest_version: str
    latest_version_date: str
    deprecated: str = ""  # "Yes", "" or ERROR_MARKER
    readme_flag: str = ""  # POSSIBLE_DEPRECATION, "" or ERROR_MARKER
    source: str = ""  # Registry that answered, "" for error records

    @classmethod
    def error(cls, request: PackageRequest) -> "ReleaseRecord":
        """Build the record emitted when no registry could answer."""
        return cls(
            library=request.library,
            current_version=request.current_version,
            current_version_date=ERROR_MARKER,
            latest_version=ERROR_MARKER,
            latest_version_date=ERROR_MARKER,
            deprecated=ERROR_MARKER,
            readme_flag=ERROR_MARKER,
            source="",
        )

    @property
    def is_error(self) -> bool:
        """Whether every registry failed for this package."""
        return self.latest_version == ERROR_MARKER and not self.source

    def to_row(self) -> dict[str, str]:
        """Return the record keyed by report column name."""
        return {
            column: getattr(self, attribute)
            for column, attribute in REPORT_COLUMNS.items()
        }


@dataclass
class ResolutionSummary:
    """Counts of records per answering registry."""

    total: int = 0
    errors: int = 0
    by_source: dict[str, int] = field(default_factory=dict)

    @property
    def resolved(self) -> int:
        """Records answered by some registry."""
        return self.total - self.errors

    def describe(self) -> str:
        """One-line human readable summary."""
        parts = [f"{source}: {count}" for source, count in self.by_source.items()]
        parts.append(f"errors: {self.errors}")
        return f"{self.resolved}/{self.total} resolved ({', '.join(parts)})"
