"""
Tests for multi-registry resolution.
"""

import threading
import time
from unittest.mock import Mock

import pytest

from src.release_check.data_models import ERROR_MARKER, PackageRequest, ReleaseRecord
from src.release_check.errors import RegistryFetchError, VersionNotFoundError
from src.release_check.registries import RegistryAdapter
from src.release_check.resolver import RegistryResolver


def make_adapter(source, lookup):
    """Adapter double named ``source`` whose lookup is ``lookup``."""
    adapter = Mock(spec=RegistryAdapter)
    adapter.name = source
    adapter.lookup.side_effect = lookup
    return adapter


def record_for(request, source):
    return ReleaseRecord(
        library=request.library,
        current_version=request.current_version,
        current_version_date="2020/1/1",
        latest_version="2.0.0",
        latest_version_date="2021/1/1",
        source=source,
    )


def not_found(source):
    def lookup(request):
        raise VersionNotFoundError(source, request.library, "missing")

    return lookup


def found(source):
    def lookup(request):
        return record_for(request, source)

    return lookup


class TestResolve:
    """Test RegistryResolver.resolve."""

    def test_first_registry_wins(self, config):
        npm = make_adapter("npm", found("npm"))
        pypi = make_adapter("pypi", found("pypi"))
        resolver = RegistryResolver([npm, pypi], config=config)

        record = resolver.resolve(PackageRequest("left-pad", "1.1.3"))

        assert record.source == "npm"
        pypi.lookup.assert_not_called()

    def test_falls_through_to_later_registry(self, config):
        npm = make_adapter("npm", not_found("npm"))
        packagist = make_adapter(
            "packagist", RegistryFetchError("packagist", "requests", "HTTP 404")
        )
        pypi = make_adapter("pypi", found("pypi"))
        resolver = RegistryResolver([npm, packagist, pypi], config=config)

        record = resolver.resolve(PackageRequest("requests", "2.31.0"))

        assert record.source == "pypi"
        npm.lookup.assert_called_once()
        packagist.lookup.assert_called_once()

    def test_unexpected_exception_does_not_stop_fallback(self, config):
        npm = make_adapter("npm", RuntimeError("boom"))
        pypi = make_adapter("pypi", found("pypi"))
        resolver = RegistryResolver([npm, pypi], config=config)

        record = resolver.resolve(PackageRequest("requests", "2.31.0"))

        assert record.source == "pypi"

    def test_all_registries_fail(self, config):
        adapters = [make_adapter(name, not_found(name)) for name in ("npm", "pypi")]
        resolver = RegistryResolver(adapters, config=config)

        record = resolver.resolve(PackageRequest("ghost", "0.0.0"))

        assert record.library == "ghost"
        assert record.current_version == "0.0.0"
        assert record.current_version_date == ERROR_MARKER
        assert record.latest_version == ERROR_MARKER
        assert record.latest_version_date == ERROR_MARKER
        assert record.deprecated == ERROR_MARKER
        assert record.readme_flag == ERROR_MARKER
        assert record.source == ""
        assert record.is_error

    def test_source_forced_to_adapter_name(self, config):
        npm = make_adapter("npm", found("somewhere-else"))
        resolver = RegistryResolver([npm], config=config)

        record = resolver.resolve(PackageRequest("left-pad", "1.1.3"))

        assert record.source == "npm"

    def test_default_adapter_order(self, config):
        resolver = RegistryResolver(config=config)
        assert resolver.source_names == ["npm", "packagist", "pypi"]


class TestResolveAll:
    """Test batch resolution."""

    @pytest.fixture
    def requests_batch(self):
        return [
            PackageRequest("left-pad", "1.1.3"),
            PackageRequest("ghost", "0.0.0"),
            PackageRequest("requests", "2.31.0"),
        ]

    def lookup_known(self, request):
        if request.library == "ghost":
            raise VersionNotFoundError("npm", request.library, "missing")
        return record_for(request, "npm")

    def test_sequential_keeps_order_and_reports_progress(self, config, requests_batch):
        resolver = RegistryResolver([make_adapter("npm", self.lookup_known)], config=config)
        progress = []

        records = resolver.resolve_all(
            requests_batch,
            progress_callback=lambda done, total, request: progress.append(
                (done, total, request.library)
            ),
        )

        assert [r.library for r in records] == ["left-pad", "ghost", "requests"]
        assert records[1].is_error
        assert progress == [
            (1, 3, "left-pad"),
            (2, 3, "ghost"),
            (3, 3, "requests"),
        ]

    def test_concurrent_keeps_input_order(self, config):
        batch = [PackageRequest(f"pkg-{i}", "1.0.0") for i in range(8)]
        thread_names = set()
        lock = threading.Lock()

        def slow_first(request):
            with lock:
                thread_names.add(threading.current_thread().name)
            # Earlier packages finish last
            index = int(request.library.split("-")[1])
            time.sleep((8 - index) * 0.01)
            return record_for(request, "npm")

        resolver = RegistryResolver([make_adapter("npm", slow_first)], config=config)
        completed = []

        records = resolver.resolve_all(
            batch,
            workers=4,
            progress_callback=lambda done, total, request: completed.append(done),
        )

        assert [r.library for r in records] == [r.library for r in batch]
        assert completed == list(range(1, 9))
        assert len(thread_names) > 1

    def test_empty_batch(self, config):
        resolver = RegistryResolver([make_adapter("npm", found("npm"))], config=config)
        assert resolver.resolve_all([], workers=4) == []


def test_summarize_counts_by_source(config):
    resolver = RegistryResolver(
        [make_adapter("npm", found("npm")), make_adapter("pypi", found("pypi"))],
        config=config,
    )
    records = [
        record_for(PackageRequest("a", "1"), "pypi"),
        record_for(PackageRequest("b", "1"), "npm"),
        record_for(PackageRequest("c", "1"), "npm"),
        ReleaseRecord.error(PackageRequest("d", "1")),
    ]

    summary = resolver.summarize(records)

    assert summary.total == 4
    assert summary.errors == 1
    assert summary.resolved == 3
    assert list(summary.by_source) == ["npm", "pypi"]
    assert summary.describe() == "3/4 resolved (npm: 2, pypi: 1, errors: 1)"
