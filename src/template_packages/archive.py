"""Default archive reader for ``.nupkg`` packages.

A package is a zip container with a single ``.nuspec`` XML manifest at its
root. Only identity metadata (id, version, authors) is read; package content
is left to the engine that mounts the package.
"""

import logging
import zipfile
from typing import BinaryIO
from xml.etree import ElementTree

from .exceptions import InvalidPackageError
from .schema import ArchiveMetadata
from .versions import is_valid_package_id
from .versions import is_valid_version
from .versions import normalize_version

logger = logging.getLogger(__name__)

PACKAGE_EXTENSION = ".nupkg"
MANIFEST_EXTENSION = ".nuspec"


def _local_name(tag: str) -> str:
    """Strip the XML namespace: nuspec schemas differ between package versions."""
    return tag.rsplit("}", 1)[-1]


def _find_manifest(archive: zipfile.ZipFile) -> str | None:
    for name in archive.namelist():
        if "/" not in name and name.lower().endswith(MANIFEST_EXTENSION):
            return name
    return None


class NupkgArchiveReader:
    """Read package identity from a ``.nupkg`` stream."""

    def read(self, stream: BinaryIO, location: str = "<stream>") -> ArchiveMetadata:
        """Read id, normalized version and authors from the package manifest.

        Raises:
            InvalidPackageError: Not a zip, no manifest, unparsable manifest,
                or missing/invalid id or version
        """
        try:
            with zipfile.ZipFile(stream) as archive:
                manifest_name = _find_manifest(archive)
                if manifest_name is None:
                    raise InvalidPackageError(location, "no .nuspec manifest found")
                root = ElementTree.fromstring(archive.read(manifest_name))
        except zipfile.BadZipFile as e:
            raise InvalidPackageError(location, f"not a package archive ({e})") from e
        except ElementTree.ParseError as e:
            raise InvalidPackageError(location, f"malformed manifest ({e})") from e

        metadata = next((child for child in root if _local_name(child.tag) == "metadata"), None)
        if metadata is None:
            raise InvalidPackageError(location, "manifest has no <metadata> element")

        fields = {_local_name(child.tag): (child.text or "").strip() for child in metadata}
        package_id = fields.get("id", "")
        version = fields.get("version", "")
        if not package_id:
            raise InvalidPackageError(location, "manifest has no package id")
        if not is_valid_package_id(package_id):
            raise InvalidPackageError(location, f"manifest package id '{package_id}' is not valid")
        if not is_valid_version(version):
            raise InvalidPackageError(location, f"manifest version '{version}' is not valid")

        logger.debug(f"Read package {package_id}::{version} from {location}")
        return ArchiveMetadata(
            package_identifier=package_id,
            package_version=normalize_version(version),
            author=fields.get("authors", ""),
        )
