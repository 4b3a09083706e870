"""Package acquisition exceptions.

Raised by archive readers, downloaders and update checkers. The installer
converts them into typed results at its public boundary.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.
"""


class TemplatePackageError(Exception):
    """Base exception for package acquisition operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (package id, paths, feeds)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class DownloadError(TemplatePackageError):
    """Package bytes could not be staged (download failed or local copy collided)."""

    def __init__(self, package_identifier: str, package_version: str, source: str):
        super().__init__(
            f"Failed to download {package_identifier}::{package_version} from {source}",
            context={"package_identifier": package_identifier, "package_version": package_version, "source": source},
        )
        self.package_identifier = package_identifier
        self.package_version = package_version
        self.source = source


class PackageNotFoundError(TemplatePackageError):
    """Package (or requested version) does not exist on any of the feeds."""

    def __init__(self, package_identifier: str, feeds: list[str] | None = None):
        feeds = feeds or []
        where = ", ".join(feeds) if feeds else "configured feeds"
        super().__init__(
            f"{package_identifier} is not found in {where}",
            context={"package_identifier": package_identifier, "feeds": feeds},
        )
        self.package_identifier = package_identifier
        self.feeds = feeds


class InvalidFeedError(TemplatePackageError):
    """Feed is malformed or unreachable."""

    def __init__(self, feeds: list[str], message: str | None = None):
        super().__init__(
            message or f"Failed to load feed(s): {', '.join(feeds)}",
            context={"feeds": feeds},
        )
        self.feeds = feeds


class InvalidPackageError(TemplatePackageError):
    """Archive is unreadable or its metadata is malformed."""

    def __init__(self, package_location: str, reason: str | None = None):
        message = f"The package {package_location} is invalid"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, context={"package_location": package_location})
        self.package_location = package_location
