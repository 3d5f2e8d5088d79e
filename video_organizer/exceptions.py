"""
Error types for the video organizer.

Every error here is fatal for the file being processed. Unless the run was
started with ``--keep-going`` it also aborts the whole run.
"""

from typing import Any, Optional


class OrganizerError(Exception):
    """Base class for all errors raised by the video organizer."""


class UsageError(OrganizerError):
    """Malformed command line invocation."""


class ConfigurationError(OrganizerError):
    """Invalid or missing configuration value."""


class TagExtractionError(OrganizerError):
    """The metadata extraction tool failed to read a file."""


class MissingDateError(OrganizerError):
    """No usable creation-date tag was found in a file's tag map."""

    def __init__(self, profile: str, tried: tuple):
        self.profile = profile
        self.tried = tuple(tried)
        super().__init__(
            f"No usable creation date for {profile} file (tried: {', '.join(self.tried)})"
        )


class GeocodeServiceError(OrganizerError):
    """
    The geocode service answered with something we cannot use.

    Attributes:
        response: The raw decoded response (or None for transport failures)
    """

    def __init__(self, message: str, response: Optional[Any] = None):
        self.response = response
        if response is not None:
            message = f"{message}; response: {response!r}"
        super().__init__(message)


class FilesystemError(OrganizerError):
    """A directory or copy operation failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)
