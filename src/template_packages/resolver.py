"""Source resolver - classify install requests as local or remote.

Two explicit steps instead of probing by parsing:
1. Does a file exist at the identifier? (no network access)
2. Only for existing files, read archive metadata and return it as a value.

Per AGENTS.md: Ruthless simplicity - direct file system checks, no caching.
"""

import logging
from dataclasses import dataclass

from .exceptions import InvalidPackageError
from .protocols import ArchiveReader
from .protocols import FileSystem
from .schema import ArchiveMetadata
from .schema import InstallRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalPackage:
    """Identifier is a readable package archive on the host."""

    path: str
    metadata: ArchiveMetadata


@dataclass(frozen=True)
class UnreadablePackage:
    """Identifier is an existing file that is not a valid package archive."""

    path: str
    error: InvalidPackageError


@dataclass(frozen=True)
class RemotePackage:
    """Identifier names a package on a feed."""

    identifier: str


ResolvedSource = LocalPackage | UnreadablePackage | RemotePackage


class SourceResolver:
    """
    Decide the acquisition path of an install request before any acquisition.

    Local files are copied into the install root without overwrite; remote
    identifiers are handed to the feed downloader.
    """

    def __init__(self, file_system: FileSystem, archive_reader: ArchiveReader):
        self.file_system = file_system
        self.archive_reader = archive_reader

    def is_local(self, identifier: str) -> bool:
        """True iff a file exists at ``identifier``."""
        return self.file_system.file_exists(identifier)

    def read_package(self, path: str) -> ArchiveMetadata:
        """Read archive metadata of an existing file.

        Raises:
            InvalidPackageError: If the file cannot be opened or is not a valid archive
        """
        try:
            with self.file_system.open_read(path) as stream:
                return self.archive_reader.read(stream, path)
        except InvalidPackageError:
            raise
        except Exception as e:
            raise InvalidPackageError(path, str(e)) from e

    def resolve(self, request: InstallRequest) -> ResolvedSource:
        """Classify ``request`` as a local archive, an unreadable file, or a feed package."""
        if not self.is_local(request.identifier):
            return RemotePackage(identifier=request.identifier)

        try:
            metadata = self.read_package(request.identifier)
        except InvalidPackageError as e:
            logger.debug(f"{request.identifier} exists but is not a readable package: {e.message}")
            return UnreadablePackage(path=request.identifier, error=e)

        return LocalPackage(path=request.identifier, metadata=metadata)
