"""Protocols for the collaborators the installer consumes.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.

Apps provide feed access (downloader, update checker); archive reading and
file system access have defaults in this library but can be swapped.
"""

from datetime import datetime
from typing import BinaryIO
from typing import Protocol
from typing import runtime_checkable

from .schema import ArchiveMetadata
from .schema import PackageInfo


class ArchiveReader(Protocol):
    """Reads identity metadata out of a package archive."""

    def read(self, stream: BinaryIO, location: str) -> ArchiveMetadata:
        """Read package id, version and authors from an archive stream.

        Args:
            stream: Readable, seekable binary stream positioned at the archive start
            location: Where the stream comes from, used in error messages

        Returns:
            ArchiveMetadata of the package

        Raises:
            InvalidPackageError: If the archive or its manifest is malformed
        """
        ...


class PackageDownloader(Protocol):
    """Fetches a package from a feed and stages it in the install path."""

    async def download_package(
        self,
        install_path: str,
        identifier: str,
        version: str | None,
        feeds: list[str],
    ) -> PackageInfo:
        """Download and stage a package.

        Args:
            install_path: Directory to stage the package file into
            identifier: Feed package name
            version: Exact version, or None for the latest one
            feeds: Candidate feed URIs in preference order (empty: downloader defaults)

        Returns:
            PackageInfo with ``full_path`` pointing at the staged file

        Raises:
            DownloadError: If the package could not be fetched or staged
            PackageNotFoundError: If no feed has the package (version)
            InvalidFeedError: If a feed is malformed or unreachable
        """
        ...


class UpdateChecker(Protocol):
    """Looks up the latest available version of a package."""

    async def get_latest_version(
        self,
        identifier: str,
        version: str | None,
        feed: str | None,
    ) -> tuple[str, bool]:
        """Return ``(latest_version, is_current_latest)`` for a package.

        Raises:
            PackageNotFoundError: If no feed has the package
            InvalidFeedError: If a feed is malformed or unreachable
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Host file system primitives used for staging and removal."""

    def file_exists(self, path: str) -> bool: ...

    def open_read(self, path: str) -> BinaryIO: ...

    def copy_file(self, source: str, destination: str, overwrite: bool) -> None: ...

    def delete_file(self, path: str) -> None: ...

    def last_write_time(self, path: str) -> datetime: ...
