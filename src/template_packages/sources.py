"""Managed sources - records of installed template packages.

A managed source is a tagged union over who owns it:

- PackageSource: produced by a PackageInstaller (``kind == "package"``)
- ForeignSource: produced by any other installer (folders, other feeds, ...)

Installers check ownership by matching on the variant AND the
``installer_id`` discriminator, never by probing attributes.

Sources are frozen: an update yields a new source, the old one is discarded.
"""

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Any
from typing import Literal
from uuid import UUID

LOCAL_PACKAGE_KEY = "isLocalPackage"
AUTHOR_KEY = "author"
FEED_URI_KEY = "feedUri"
PACKAGE_ID_KEY = "packageIdentifier"
PACKAGE_VERSION_KEY = "packageVersion"


@dataclass(frozen=True)
class PackageSource:
    """Installed package staged in the install root by a PackageInstaller."""

    installer_id: UUID
    mount_point_uri: str
    last_change_time: datetime
    details: dict[str, str] = field(default_factory=dict)
    provider: Any = field(default=None, compare=False, repr=False)
    kind: Literal["package"] = "package"

    @property
    def identifier(self) -> str:
        return self.details.get(PACKAGE_ID_KEY, "")

    @property
    def version(self) -> str:
        return self.details.get(PACKAGE_VERSION_KEY, "")

    @property
    def author(self) -> str:
        return self.details.get(AUTHOR_KEY, "")

    @property
    def feed_uri(self) -> str:
        return self.details.get(FEED_URI_KEY, "")

    @property
    def is_local(self) -> bool:
        return self.details.get(LOCAL_PACKAGE_KEY, "").lower() == "true"

    @property
    def display_name(self) -> str:
        return f"{self.identifier}::{self.version}" if self.version else self.identifier


@dataclass(frozen=True)
class ForeignSource:
    """Managed source owned by another installer.

    Carried through so mixed source lists can be handled; this library never
    acts on it beyond reporting it as unsupported.
    """

    installer_id: UUID
    mount_point_uri: str
    identifier: str
    version: str | None = None
    last_change_time: datetime | None = None
    kind: Literal["foreign"] = "foreign"

    @property
    def display_name(self) -> str:
        return f"{self.identifier}::{self.version}" if self.version else self.identifier


ManagedSource = PackageSource | ForeignSource
