"""Error types raised while reading and indexing classpath entries."""

from __future__ import annotations


class ClasspathError(Exception):
    """Base class for classpath indexing failures."""

    def __init__(self, reason: str, path: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.reason = reason
        self.path = path


class EntryNotFoundError(ClasspathError):
    """Raised when a classpath entry path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__("Classpath entry does not exist", path)


class EntryUnreadableError(ClasspathError):
    """Raised when an entry is neither a readable directory nor a zip archive."""


class InvalidResourceNameError(ClasspathError):
    """Raised when a raw entry path cannot be turned into a resource name."""


class DependencyResolutionRequiredError(Exception):
    """Raised when a dependency has no local or repository file."""

    def __init__(self, coordinates: str) -> None:
        super().__init__(f"Could not resolve dependency: {coordinates}")
        self.coordinates = coordinates
