"""Request and record schemas.

InstallRequest and PersistedRecord are pydantic models: the first is built
from caller input, the second is the durable on-disk contract, so both get
validation. Field aliases of PersistedRecord (``installerId``,
``mountPointUri``, ``lastChangeTime``, ``details``) are the stable names other
tooling reads.
"""

from dataclasses import dataclass
from datetime import UTC
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from .sources import ManagedSource
from .versions import is_valid_version

DEFAULT_CHANGE_TIME = datetime.min.replace(tzinfo=UTC)


class InstallRequest(BaseModel):
    """Request to install a package by local path or feed package name.

    ``version`` is deliberately not validated here: eligibility checks report
    an invalid version instead of failing construction.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(min_length=1)
    version: str | None = None
    details: dict[str, str] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return f"{self.identifier}::{self.version}" if self.version else self.identifier

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class UpdateRequest:
    """Request to move an installed source to another version."""

    source: ManagedSource
    version: str

    def __post_init__(self) -> None:
        if not self.version or not self.version.strip():
            raise ValueError("Version cannot be null or empty")
        if not is_valid_version(self.version):
            raise ValueError(f"'{self.version}' is not a valid package version")


class ArchiveMetadata(BaseModel):
    """Identity metadata read from a package archive manifest."""

    model_config = ConfigDict(frozen=True)

    package_identifier: str
    package_version: str
    author: str = ""


class PackageInfo(BaseModel):
    """Acquired package. ``full_path`` points at the staged file."""

    model_config = ConfigDict(frozen=True)

    full_path: str
    package_identifier: str
    package_version: str
    author: str = ""
    feed_uri: str = ""
    last_change_time: datetime | None = None


class PersistedRecord(BaseModel):
    """Durable projection of a managed source.

    Example:
        >>> record = PersistedRecord(installer_id=uuid4(), mount_point_uri="/pkgs/foo.1.0.0.nupkg")
        >>> record.model_dump(mode="json", by_alias=True)
        {'installerId': '...', 'mountPointUri': '/pkgs/foo.1.0.0.nupkg',
         'lastChangeTime': '0001-01-01T00:00:00Z', 'details': {}}
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    installer_id: UUID = Field(alias="installerId")
    mount_point_uri: str = Field(alias="mountPointUri")
    last_change_time: datetime = Field(default=DEFAULT_CHANGE_TIME, alias="lastChangeTime")
    details: dict[str, str] = Field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the JSON-ready wire shape."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict) -> "PersistedRecord":
        """Create from the wire shape."""
        return cls.model_validate(data)
