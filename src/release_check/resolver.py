"""
Multi-registry resolution of package release information.

For each request the registries are tried in priority order (npm, Packagist,
PyPI); the first one that answers wins. When every registry fails the request
still produces a record, filled with ERROR markers, so one bad package never
stops a batch.
"""

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace

from ..shared_utilities import get_logger, trace_operation
from .config import ReleaseCheckConfig
from .data_models import PackageRequest, ReleaseRecord, ResolutionSummary
from .errors import RegistryLookupError
from .registries import RegistryAdapter, default_adapters

#: Called after each finished lookup with (completed, total, request).
ProgressCallback = Callable[[int, int, PackageRequest], None]


class RegistryResolver:
    """Resolves package requests against an ordered list of registries."""

    def __init__(
        self,
        adapters: Iterable[RegistryAdapter] | None = None,
        config: ReleaseCheckConfig | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            adapters: Registries in priority order, defaults to npm, Packagist, PyPI
            config: Runtime settings used to build default adapters
        """
        self.logger = get_logger(__name__)
        self.config = config or ReleaseCheckConfig()
        if adapters is None:
            self.adapters = default_adapters(self.config)
        else:
            self.adapters = list(adapters)

    @property
    def source_names(self) -> list[str]:
        """Registry names in lookup order."""
        return [adapter.name for adapter in self.adapters]

    def resolve(self, request: PackageRequest) -> ReleaseRecord:
        """
        Return the first successful record for a request.

        Args:
            request: Library and current version

        Returns:
            The record from the first registry that answered, or an error
            record if none did
        """
        with trace_operation(
            "resolve_package",
            {"library": request.library, "version": request.current_version},
        ):
            for adapter in self.adapters:
                self.logger.debug(
                    "Trying {source} for {library}",
                    source=adapter.name,
                    library=request.library,
                )
                try:
                    record = adapter.lookup(request)
                except RegistryLookupError as e:
                    self.logger.debug(
                        "Failed to get info from {source}: {reason}",
                        source=adapter.name,
                        library=request.library,
                        reason=str(e),
                    )
                    continue
                except Exception as e:
                    self.logger.warning(
                        "Unexpected {error_type} from {source} for {library}: {reason}",
                        error_type=type(e).__name__,
                        source=adapter.name,
                        library=request.library,
                        reason=str(e),
                    )
                    continue

                if record.source != adapter.name:
                    record = replace(record, source=adapter.name)

                self.logger.debug(
                    "Found {library} {version} on {source}",
                    library=request.library,
                    version=request.current_version,
                    source=adapter.name,
                )
                return record

        self.logger.warning(
            "No registry has {library} {version}",
            library=request.library,
            version=request.current_version,
        )
        return ReleaseRecord.error(request)

    def resolve_all(
        self,
        package_requests: Iterable[PackageRequest],
        workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> list[ReleaseRecord]:
        """
        Resolve a batch of requests, keeping input order in the result.

        Args:
            package_requests: Requests in input order
            workers: Concurrent lookups, defaults to the configured value
            progress_callback: Optional callback invoked after each lookup

        Returns:
            One record per request, in the same order
        """
        package_requests = list(package_requests)
        total = len(package_requests)
        workers = workers or self.config.workers
        results: list[ReleaseRecord | None] = [None] * total

        if workers <= 1 or total <= 1:
            for index, request in enumerate(package_requests):
                results[index] = self.resolve(request)
                if progress_callback:
                    progress_callback(index + 1, total, request)
        else:
            with ThreadPoolExecutor(max_workers=min(workers, total)) as executor:
                future_to_index = {
                    executor.submit(self.resolve, request): index
                    for index, request in enumerate(package_requests)
                }
                for completed, future in enumerate(
                    as_completed(future_to_index), start=1
                ):
                    index = future_to_index[future]
                    results[index] = future.result()
                    if progress_callback:
                        progress_callback(completed, total, package_requests[index])

        return [record for record in results if record is not None]

    def summarize(self, records: Iterable[ReleaseRecord]) -> ResolutionSummary:
        """
        Count records per answering registry.

        Args:
            records: Records produced by this resolver

        Returns:
            Summary with sources listed in lookup order
        """
        summary = ResolutionSummary()
        counts = {name: 0 for name in self.source_names}

        for record in records:
            summary.total += 1
            if record.is_error:
                summary.errors += 1
            else:
                counts[record.source] = counts.get(record.source, 0) + 1

        summary.by_source = {name: count for name, count in counts.items() if count}
        return summary
