"""Package identifier and version rules for feed packages.

Identifiers follow feed naming rules: word characters separated by single
dots or dashes, at most 100 characters. Versions are semantic versions with
one to four numeric components, an optional dot-separated release label and
optional build metadata (e.g. ``1.2.3-preview.1+sha.abc``).
"""

import re

MAX_PACKAGE_ID_LENGTH = 100

_PACKAGE_ID_PATTERN = re.compile(r"^\w+([.-]\w+)*$")
_LABEL = r"[0-9A-Za-z-]+"
_VERSION_PATTERN = re.compile(
    rf"^(?P<numbers>\d+(\.\d+){{0,3}})"
    rf"(-(?P<release>{_LABEL}(\.{_LABEL})*))?"
    rf"(\+(?P<metadata>{_LABEL}(\.{_LABEL})*))?$",
    re.ASCII,
)


def is_valid_package_id(package_id: str | None) -> bool:
    """Check that ``package_id`` is a syntactically valid feed package name."""
    if not package_id or len(package_id) > MAX_PACKAGE_ID_LENGTH:
        return False
    return _PACKAGE_ID_PATTERN.match(package_id) is not None


def is_valid_version(version: str | None) -> bool:
    """Check that ``version`` parses as a package version.

    Surrounding whitespace is ignored; blank strings are not versions.
    """
    if version is None or not version.strip():
        return False
    return _VERSION_PATTERN.match(version.strip()) is not None


def normalize_version(version: str) -> str:
    """Return the normalized form of a package version.

    Numeric components lose leading zeros and are padded to three parts, a
    fourth component is kept only when non-zero, and build metadata is dropped.

    Raises:
        ValueError: If ``version`` is not a valid package version

    Example:
        >>> normalize_version("1.02")
        '1.2.0'
        >>> normalize_version("1.0.0.0-Beta+build.5")
        '1.0.0-Beta'
    """
    match = _VERSION_PATTERN.match(version.strip()) if version else None
    if match is None:
        raise ValueError(f"'{version}' is not a valid package version")

    numbers = [int(part) for part in match.group("numbers").split(".")]
    numbers += [0] * (3 - len(numbers))
    if len(numbers) == 4 and numbers[3] == 0:
        numbers = numbers[:3]

    normalized = ".".join(str(number) for number in numbers)
    release = match.group("release")
    if release:
        normalized = f"{normalized}-{release}"
    return normalized
