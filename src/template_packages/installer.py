"""Package installer - lifecycle of template packages from local files or feeds.

Per KERNEL_PHILOSOPHY: Mechanism not policy - the library doesn't know HOW to
talk to feeds, apps provide PackageDownloader / UpdateChecker implementations.

Per IMPLEMENTATION_PHILOSOPHY:
- Protocol-based: Apps provide feed access, file system and archive reading are swappable
- Settings injection: Apps determine WHERE packages are staged
- Typed results: Failures are returned, not raised, at the public boundary

Every operation runs its steps strictly in order:
validate -> resolve source -> acquire -> stage -> record.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any
from uuid import NAMESPACE_URL
from uuid import UUID
from uuid import uuid5

from .archive import NupkgArchiveReader
from .config import InstallerSettings
from .exceptions import DownloadError
from .exceptions import InvalidFeedError
from .exceptions import InvalidPackageError
from .exceptions import PackageNotFoundError
from .filesystem import PhysicalFileSystem
from .protocols import ArchiveReader
from .protocols import FileSystem
from .protocols import PackageDownloader
from .protocols import UpdateChecker
from .resolver import LocalPackage
from .resolver import RemotePackage
from .resolver import SourceResolver
from .resolver import UnreadablePackage
from .results import CheckUpdateResult
from .results import InstallerErrorCode
from .results import InstallResult
from .results import UninstallResult
from .results import UpdateResult
from .schema import DEFAULT_CHANGE_TIME
from .schema import InstallRequest
from .schema import PackageInfo
from .schema import PersistedRecord
from .schema import UpdateRequest
from .sources import AUTHOR_KEY
from .sources import FEED_URI_KEY
from .sources import LOCAL_PACKAGE_KEY
from .sources import PACKAGE_ID_KEY
from .sources import PACKAGE_VERSION_KEY
from .sources import ManagedSource
from .sources import PackageSource
from .utils import split_feed_hint
from .utils import staged_package_path
from .versions import is_valid_package_id
from .versions import is_valid_version

logger = logging.getLogger(__name__)

DEFAULT_INSTALLER_ID = uuid5(NAMESPACE_URL, "template-packages:nupkg-installer")


class PackageInstaller:
    """
    Install, update and remove template packages (with injected collaborators).

    Example:
        >>> settings = InstallerSettings(install_path=Path.home() / ".templates" / "packages")
        >>> installer = PackageInstaller(settings, downloader=feed_client, update_checker=feed_client)
        >>> result = await installer.install(InstallRequest(identifier="Contoso.Templates", version="1.2.0"))
        >>> if result.success:
        ...     store.add(installer.serialize(result.source))
    """

    def __init__(
        self,
        settings: InstallerSettings,
        downloader: PackageDownloader,
        update_checker: UpdateChecker,
        *,
        installer_id: UUID = DEFAULT_INSTALLER_ID,
        provider: Any = None,
        archive_reader: ArchiveReader | None = None,
        file_system: FileSystem | None = None,
        diagnostics: logging.Logger | None = None,
    ):
        """Initialize installer with app-provided settings and collaborators.

        Args:
            settings: Install root and feed hint encoding (app policy)
            downloader: Fetches and stages feed packages
            update_checker: Looks up latest feed versions
            installer_id: Identity recorded on every source this installer produces
            provider: Owning provider reference attached to produced sources
            archive_reader: Package metadata reader (defaults to NupkgArchiveReader)
            file_system: Host file system (defaults to PhysicalFileSystem)
            diagnostics: Logger receiving diagnostic traces (defaults to this module's logger)
        """
        self.settings = settings
        self.installer_id = installer_id
        self.provider = provider
        self.downloader = downloader
        self.update_checker = update_checker
        self.file_system = file_system or PhysicalFileSystem()
        self.resolver = SourceResolver(self.file_system, archive_reader or NupkgArchiveReader())
        self.logger = diagnostics or logger

    @property
    def name(self) -> str:
        return self.settings.name

    def _owned(self, source: ManagedSource) -> PackageSource | None:
        """Return ``source`` if this installer produced it."""
        match source:
            case PackageSource(installer_id=installer_id) if installer_id == self.installer_id:
                return source
            case _:
                return None

    async def can_install(self, request: InstallRequest) -> bool:
        """
        Check whether ``request`` can be installed, without installing it.

        A readable local package archive is always installable; its version
        field is ignored because the archive describes itself. Anything else
        must be a valid feed package name with either no version or a valid one.

        Never raises: any failure means "not installable".
        """
        try:
            resolved = self.resolver.resolve(request)
        except Exception as e:
            self.logger.debug(f"Failed to resolve {request.identifier}: {e}")
            return False

        if isinstance(resolved, LocalPackage):
            self.logger.debug(f"{request.identifier} is identified as the local package.")
            return True

        self.logger.debug(f"{request.identifier} is not a local package.")
        valid_package_id = is_valid_package_id(request.identifier)
        has_valid_version = not (request.version and request.version.strip()) or is_valid_version(request.version)
        if not valid_package_id:
            self.logger.debug(f"{request.identifier} is not a valid package ID.")
        if not has_valid_version:
            self.logger.debug(f"{request.version} is not a valid package version.")
        if valid_package_id and has_valid_version:
            self.logger.debug(f"{request.display_name} is identified as the downloadable package.")
        return valid_package_id and has_valid_version

    async def install(self, request: InstallRequest) -> InstallResult:
        """
        Install a package from a local archive or a feed.

        Process:
        1. Re-check eligibility (UnsupportedRequest if not installable)
        2. Local archive: copy into the install root, never overwriting
        3. Feed package: download via the injected downloader, preferring the
           feeds listed in ``request.details[settings.feed_sources_key]``
        4. Record author, feed, id, version (and local flag) in the source details

        Returns:
            InstallResult with the new PackageSource, or a failure; partial
            progress never produces a success
        """
        if request is None:
            raise TypeError("request cannot be None")

        if not await self.can_install(request):
            return InstallResult.create_failure(
                request,
                InstallerErrorCode.UNSUPPORTED_REQUEST,
                f"The install request {request} cannot be processed by installer {self.name}",
            )

        try:
            details: dict[str, str] = {}
            match self.resolver.resolve(request):
                case LocalPackage() as local:
                    details[LOCAL_PACKAGE_KEY] = "True"
                    package = self._install_local_package(local)
                case UnreadablePackage(path=path, error=error):
                    self.logger.error(f"Failed to read content of package {path}.")
                    raise error
                case RemotePackage(identifier=identifier):
                    feeds = split_feed_hint(
                        request.details.get(self.settings.feed_sources_key),
                        self.settings.feed_sources_separator,
                    )
                    package = await self.downloader.download_package(
                        str(self.settings.install_path),
                        identifier,
                        request.version,
                        feeds,
                    )

            details[AUTHOR_KEY] = package.author
            details[FEED_URI_KEY] = package.feed_uri
            details[PACKAGE_ID_KEY] = package.package_identifier
            details[PACKAGE_VERSION_KEY] = package.package_version
            source = PackageSource(
                installer_id=self.installer_id,
                mount_point_uri=package.full_path,
                last_change_time=package.last_change_time or self.file_system.last_write_time(package.full_path),
                details=details,
                provider=self.provider,
            )
            self.logger.info(f"Installed {source.display_name} to {source.mount_point_uri}")
            return InstallResult.create_success(request, source)

        except DownloadError as e:
            return InstallResult.create_failure(request, InstallerErrorCode.DOWNLOAD_FAILED, e.message)
        except PackageNotFoundError as e:
            return InstallResult.create_failure(request, InstallerErrorCode.PACKAGE_NOT_FOUND, e.message)
        except InvalidFeedError as e:
            return InstallResult.create_failure(request, InstallerErrorCode.INVALID_SOURCE, e.message)
        except InvalidPackageError as e:
            return InstallResult.create_failure(request, InstallerErrorCode.INVALID_PACKAGE, e.message)
        except Exception as e:
            self.logger.debug(f"Installing {request.display_name} failed.", exc_info=True)
            return InstallResult.create_failure(
                request,
                InstallerErrorCode.GENERIC_ERROR,
                f"Failed to install the package {request.display_name}, reason: {e}",
            )

    def _install_local_package(self, local: LocalPackage) -> PackageInfo:
        """Stage a local archive in the install root.

        The exists check and the copy are separate steps: two concurrent
        installs of the same id+version can both pass the check. The copy
        itself refuses to overwrite, so the loser fails with DownloadError.

        Raises:
            InvalidPackageError: If the package id would place the file outside the install root
            DownloadError: If the staged file already exists or the copy fails
        """
        metadata = local.metadata
        target = staged_package_path(
            self.settings.install_path,
            metadata.package_identifier,
            metadata.package_version,
            self.settings.package_extension,
        )
        if Path(target).resolve().parent != Path(self.settings.install_path).resolve():
            self.logger.error(f"Package {metadata.package_identifier} resolves outside {self.settings.install_path}.")
            raise InvalidPackageError(
                local.path,
                f"package id '{metadata.package_identifier}' is not a valid file name",
            )
        if self.file_system.file_exists(target):
            self.logger.error(f"File {target} already exists.")
            raise DownloadError(metadata.package_identifier, metadata.package_version, local.path)

        try:
            self.file_system.copy_file(local.path, target, overwrite=False)
        except Exception as e:
            self.logger.error(f"Failed to copy package {local.path} to {target}.")
            self.logger.debug(f"Details: {e!r}", exc_info=True)
            raise DownloadError(metadata.package_identifier, metadata.package_version, local.path) from e

        try:
            last_change_time = self.file_system.last_write_time(target)
        except Exception as e:
            self.logger.error(f"Failed to read staged package {target}, removing it.")
            self.logger.debug(f"Details: {e!r}", exc_info=True)
            self.file_system.delete_file(target)
            raise DownloadError(metadata.package_identifier, metadata.package_version, local.path) from e

        return PackageInfo(
            full_path=target,
            package_identifier=metadata.package_identifier,
            package_version=metadata.package_version,
            author=metadata.author,
            last_change_time=last_change_time,
        )

    async def uninstall(self, source: ManagedSource) -> UninstallResult:
        """
        Remove an installed package by deleting its staged file.

        Sources produced by other installers fail with UnsupportedRequest.
        Deletion is not retried.
        """
        if source is None:
            raise TypeError("source cannot be None")

        owned = self._owned(source)
        if owned is None:
            return UninstallResult.create_failure(
                source,
                InstallerErrorCode.UNSUPPORTED_REQUEST,
                f"{source.identifier} is not supported by {self.name}",
            )

        try:
            self.file_system.delete_file(owned.mount_point_uri)
            self.logger.info(f"Uninstalled {owned.display_name} from {owned.mount_point_uri}")
            return UninstallResult.create_success(owned)
        except Exception as e:
            self.logger.debug(f"Uninstalling {owned.display_name} failed.", exc_info=True)
            return UninstallResult.create_failure(
                owned,
                InstallerErrorCode.GENERIC_ERROR,
                f"Failed to uninstall {owned.display_name}, reason: {e}",
            )

    async def update(self, request: UpdateRequest) -> UpdateResult:
        """
        Update an installed package: uninstall, then install the target version.

        If the uninstall fails, its error is returned and nothing is installed.
        If the uninstall succeeds but the install fails, the package stays
        uninstalled; the update is not transactional.

        Raises:
            TypeError: If ``request`` is None
        """
        if request is None:
            raise TypeError("request cannot be None")

        uninstall_result = await self.uninstall(request.source)
        if not uninstall_result.success:
            return UpdateResult.create_failure(request, uninstall_result.error, uninstall_result.error_message)

        details: dict[str, str] = {}
        match request.source:
            case PackageSource(feed_uri=feed_uri) if feed_uri and feed_uri.strip():
                details[self.settings.feed_sources_key] = feed_uri

        install_request = InstallRequest(
            identifier=request.source.identifier,
            version=request.version,
            details=details,
        )
        install_result = await self.install(install_request)
        if not install_result.success:
            self.logger.warning(
                f"{request.source.display_name} was uninstalled but {install_request.display_name} "
                f"could not be installed: {install_result.error_message}"
            )
        return UpdateResult.from_install_result(request, install_result)

    async def get_latest_version(self, sources: Iterable[ManagedSource]) -> list[CheckUpdateResult]:
        """
        Check all ``sources`` for newer versions concurrently.

        One lookup per source; results come back in input order. A failing
        lookup produces a failure result for its own source only, including a
        lookup that cancels itself. Cancelling the calling task cancels every
        lookup and propagates.
        """
        if sources is None:
            raise TypeError("sources cannot be None")

        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(self._check_update(source)) for source in sources]
        return [task.result() for task in tasks]

    async def _check_update(self, source: ManagedSource) -> CheckUpdateResult:
        owned = self._owned(source)
        if owned is None:
            return CheckUpdateResult.create_failure(
                source,
                InstallerErrorCode.UNSUPPORTED_REQUEST,
                f"source {source.identifier} is not supported by installer {self.name}",
            )

        try:
            latest_version, is_latest_version = await self.update_checker.get_latest_version(
                owned.identifier,
                owned.version,
                owned.feed_uri,
            )
            return CheckUpdateResult.create_success(owned, latest_version, is_latest_version)
        except PackageNotFoundError as e:
            return CheckUpdateResult.create_failure(owned, InstallerErrorCode.PACKAGE_NOT_FOUND, e.message)
        except InvalidFeedError as e:
            return CheckUpdateResult.create_failure(owned, InstallerErrorCode.INVALID_SOURCE, e.message)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            # The checker cancelled itself; siblings keep their results
            self.logger.debug(f"Retrieving latest version for package {owned.display_name} was cancelled.")
            return CheckUpdateResult.create_failure(
                owned,
                InstallerErrorCode.GENERIC_ERROR,
                f"Failed to check the update for the package {owned.identifier}, reason: lookup was cancelled",
            )
        except Exception as e:
            self.logger.debug(f"Retrieving latest version for package {owned.display_name} failed.", exc_info=True)
            return CheckUpdateResult.create_failure(
                owned,
                InstallerErrorCode.GENERIC_ERROR,
                f"Failed to check the update for the package {owned.identifier}, reason: {e}",
            )

    def serialize(self, source: ManagedSource) -> PersistedRecord:
        """Project a source into its persisted record.

        Sources of other installers still get a minimal record (mount point
        only, empty details, default change time).
        """
        if source is None:
            raise TypeError("source cannot be None")

        owned = self._owned(source)
        if owned is None:
            return PersistedRecord(
                installer_id=self.installer_id,
                mount_point_uri=source.mount_point_uri,
                last_change_time=DEFAULT_CHANGE_TIME,
            )

        return PersistedRecord(
            installer_id=self.installer_id,
            mount_point_uri=owned.mount_point_uri,
            last_change_time=owned.last_change_time,
            details=dict(owned.details),
        )

    def deserialize(self, provider: Any, record: PersistedRecord) -> PackageSource:
        """Rebuild a source from its persisted record. No I/O."""
        return PackageSource(
            installer_id=self.installer_id,
            mount_point_uri=record.mount_point_uri,
            last_change_time=record.last_change_time,
            details=dict(record.details),
            provider=provider,
        )
