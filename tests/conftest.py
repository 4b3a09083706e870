"""Shared fixtures: package archives on disk and mock feed collaborators."""

import zipfile
from pathlib import Path

import pytest
from template_packages import InstallerSettings
from template_packages import PackageInfo
from template_packages import PackageInstaller

NUSPEC_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<package xmlns="http://schemas.microsoft.com/packaging/2013/05/nuspec.xsd">
  <metadata>
    <id>{package_id}</id>
    <version>{version}</version>
    <authors>{authors}</authors>
    <description>Test templates</description>
  </metadata>
</package>
"""

DEFAULT_FEED = "https://api.nuget.org/v3/index.json"


def write_package(
    directory: Path,
    package_id: str = "foo",
    version: str = "1.2.3",
    authors: str = "Contoso",
    file_name: str | None = None,
) -> Path:
    """Write a minimal .nupkg archive and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (file_name or f"{package_id}.{version}.nupkg")
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(
            f"{package_id}.nuspec",
            NUSPEC_TEMPLATE.format(package_id=package_id, version=version, authors=authors),
        )
        archive.writestr("content/.template.config/template.json", "{}")
    return path


class MockDownloader:
    """Mock feed downloader - stages a real archive in the install path."""

    def __init__(self, error: Exception | None = None, author: str = "Feed Author"):
        self.error = error
        self.author = author
        self.calls: list[dict] = []

    async def download_package(
        self,
        install_path: str,
        identifier: str,
        version: str | None,
        feeds: list[str],
    ) -> PackageInfo:
        self.calls.append({"install_path": install_path, "identifier": identifier, "version": version, "feeds": feeds})
        if self.error is not None:
            raise self.error

        resolved_version = version or "9.9.9"
        path = write_package(Path(install_path), identifier, resolved_version, self.author)
        return PackageInfo(
            full_path=str(path),
            package_identifier=identifier,
            package_version=resolved_version,
            author=self.author,
            feed_uri=feeds[0] if feeds else DEFAULT_FEED,
        )


class MockUpdateChecker:
    """Mock update checker - answers from a table, raises configured errors."""

    def __init__(self, answers: dict[str, tuple[str, bool] | BaseException] | None = None):
        self.answers = answers or {}
        self.calls: list[tuple[str, str | None, str | None]] = []

    async def get_latest_version(self, identifier: str, version: str | None, feed: str | None) -> tuple[str, bool]:
        self.calls.append((identifier, version, feed))
        answer = self.answers[identifier]
        if isinstance(answer, BaseException):
            raise answer
        return answer


@pytest.fixture
def package_factory():
    return write_package


@pytest.fixture
def install_path(tmp_path) -> Path:
    path = tmp_path / "packages"
    path.mkdir()
    return path


@pytest.fixture
def downloader() -> MockDownloader:
    return MockDownloader()


@pytest.fixture
def update_checker() -> MockUpdateChecker:
    return MockUpdateChecker()


@pytest.fixture
def installer(install_path, downloader, update_checker) -> PackageInstaller:
    settings = InstallerSettings(install_path=install_path)
    return PackageInstaller(settings, downloader=downloader, update_checker=update_checker, provider="global-settings")
