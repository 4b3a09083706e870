"""template-packages - Lifecycle management of template packages.

Installs template packages from local ``.nupkg`` archives or remote feeds,
checks for and applies updates, and removes them cleanly.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy (install root, feed clients).
"""

from .archive import NupkgArchiveReader
from .config import InstallerSettings
from .exceptions import DownloadError
from .exceptions import InvalidFeedError
from .exceptions import InvalidPackageError
from .exceptions import PackageNotFoundError
from .exceptions import TemplatePackageError
from .filesystem import PhysicalFileSystem
from .installer import DEFAULT_INSTALLER_ID
from .installer import PackageInstaller
from .protocols import ArchiveReader
from .protocols import FileSystem
from .protocols import PackageDownloader
from .protocols import UpdateChecker
from .resolver import SourceResolver
from .results import CheckUpdateResult
from .results import InstallerErrorCode
from .results import InstallResult
from .results import UninstallResult
from .results import UpdateResult
from .schema import InstallRequest
from .schema import PackageInfo
from .schema import PersistedRecord
from .schema import UpdateRequest
from .sources import ForeignSource
from .sources import ManagedSource
from .sources import PackageSource
from .store import SourcesStore
from .versions import is_valid_package_id
from .versions import is_valid_version
from .versions import normalize_version

__all__ = [
    # Installation
    "PackageInstaller",
    "DEFAULT_INSTALLER_ID",
    "InstallerSettings",
    "SourceResolver",
    # Requests and records
    "InstallRequest",
    "UpdateRequest",
    "PackageInfo",
    "PersistedRecord",
    "ManagedSource",
    "PackageSource",
    "ForeignSource",
    "SourcesStore",
    # Results
    "InstallerErrorCode",
    "InstallResult",
    "UninstallResult",
    "UpdateResult",
    "CheckUpdateResult",
    # Collaborators
    "ArchiveReader",
    "FileSystem",
    "PackageDownloader",
    "UpdateChecker",
    "NupkgArchiveReader",
    "PhysicalFileSystem",
    # Exceptions
    "TemplatePackageError",
    "DownloadError",
    "PackageNotFoundError",
    "InvalidFeedError",
    "InvalidPackageError",
    # Versions
    "is_valid_package_id",
    "is_valid_version",
    "normalize_version",
]

__version__ = "0.1.0"
