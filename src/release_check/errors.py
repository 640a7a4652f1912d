"""
Exceptions raised by the release check tool.
"""


class ReleaseCheckError(Exception):
    """Base exception for release check operations."""

    pass


class InputFileError(ReleaseCheckError):
    """The input CSV is missing or lacks the required columns."""

    pass


class RegistryLookupError(ReleaseCheckError):
    """A registry could not answer for a package; the next source is tried."""

    def __init__(self, source: str, library: str, message: str):
        self.source = source
        self.library = library
        super().__init__(f"{source}: {message}")


class RegistryFetchError(RegistryLookupError):
    """Network failure, timeout or non-successful HTTP status."""

    pass


class VersionNotFoundError(RegistryLookupError):
    """The registry knows the package but not the requested version."""

    pass


class RegistryResponseError(RegistryLookupError):
    """The registry payload is not JSON or does not have the expected shape."""

    pass
