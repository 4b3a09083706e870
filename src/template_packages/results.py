"""Typed operation results.

Every public installer operation returns one of these instead of raising:
a result is either a success carrying its payload, or a failure carrying an
InstallerErrorCode and a human-readable message.
"""

from dataclasses import dataclass
from enum import Enum

from .schema import InstallRequest
from .schema import UpdateRequest
from .sources import ManagedSource


class InstallerErrorCode(str, Enum):
    """Caller-facing failure kinds."""

    SUCCESS = "Success"
    UNSUPPORTED_REQUEST = "UnsupportedRequest"
    PACKAGE_NOT_FOUND = "PackageNotFound"
    INVALID_SOURCE = "InvalidSource"
    INVALID_PACKAGE = "InvalidPackage"
    DOWNLOAD_FAILED = "DownloadFailed"
    GENERIC_ERROR = "GenericError"


@dataclass(frozen=True)
class OperationResult:
    """Common shape of success/failure results."""

    error: InstallerErrorCode = InstallerErrorCode.SUCCESS
    error_message: str | None = None

    @property
    def success(self) -> bool:
        return self.error == InstallerErrorCode.SUCCESS


@dataclass(frozen=True)
class InstallResult(OperationResult):
    request: InstallRequest | None = None
    source: ManagedSource | None = None

    @classmethod
    def create_success(cls, request: InstallRequest, source: ManagedSource) -> "InstallResult":
        return cls(request=request, source=source)

    @classmethod
    def create_failure(cls, request: InstallRequest, error: InstallerErrorCode, message: str) -> "InstallResult":
        return cls(request=request, error=error, error_message=message)


@dataclass(frozen=True)
class UninstallResult(OperationResult):
    source: ManagedSource | None = None

    @classmethod
    def create_success(cls, source: ManagedSource) -> "UninstallResult":
        return cls(source=source)

    @classmethod
    def create_failure(cls, source: ManagedSource, error: InstallerErrorCode, message: str) -> "UninstallResult":
        return cls(source=source, error=error, error_message=message)


@dataclass(frozen=True)
class UpdateResult(OperationResult):
    request: UpdateRequest | None = None
    source: ManagedSource | None = None

    @classmethod
    def create_success(cls, request: UpdateRequest, source: ManagedSource) -> "UpdateResult":
        return cls(request=request, source=source)

    @classmethod
    def create_failure(cls, request: UpdateRequest, error: InstallerErrorCode, message: str | None) -> "UpdateResult":
        return cls(request=request, error=error, error_message=message)

    @classmethod
    def from_install_result(cls, request: UpdateRequest, install_result: InstallResult) -> "UpdateResult":
        """Wrap the reinstall step of an update as the update's outcome."""
        if install_result.success and install_result.source is not None:
            return cls.create_success(request, install_result.source)
        return cls.create_failure(request, install_result.error, install_result.error_message)


@dataclass(frozen=True)
class CheckUpdateResult(OperationResult):
    source: ManagedSource | None = None
    latest_version: str | None = None
    is_latest_version: bool = False

    @classmethod
    def create_success(cls, source: ManagedSource, latest_version: str, is_latest_version: bool) -> "CheckUpdateResult":
        return cls(source=source, latest_version=latest_version, is_latest_version=is_latest_version)

    @classmethod
    def create_failure(cls, source: ManagedSource, error: InstallerErrorCode, message: str) -> "CheckUpdateResult":
        return cls(source=source, error=error, error_message=message)
