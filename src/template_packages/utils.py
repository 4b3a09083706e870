"""Helpers for feed hints and staged package names."""

import os


def split_feed_hint(value: str | None, separator: str = ";") -> list[str]:
    """Split a multi-feed hint into candidate feed URIs.

    Blank entries are dropped. An empty result lets the downloader fall back
    to its default feeds.

    Examples:
        >>> split_feed_hint("https://a/index.json;https://b/index.json")
        ['https://a/index.json', 'https://b/index.json']
        >>> split_feed_hint(None)
        []
    """
    if not value:
        return []
    return [feed.strip() for feed in value.split(separator) if feed.strip()]


def staged_package_path(install_path: str | os.PathLike, package_id: str, version: str, extension: str) -> str:
    """Deterministic staging location: ``{install_path}/{id}.{version}{extension}``."""
    return os.path.join(os.fspath(install_path), f"{package_id}.{version}{extension}")
