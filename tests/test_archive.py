"""Tests for the default .nupkg archive reader."""

import io
import zipfile

import pytest
from template_packages import InvalidPackageError
from template_packages import NupkgArchiveReader


def zip_bytes(files: dict[str, str]) -> io.BytesIO:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    buffer.seek(0)
    return buffer


def test_read_package_metadata(package_factory, tmp_path):
    package = package_factory(tmp_path, "Contoso.Templates", "1.0.0.0-beta+sha.1", authors="Contoso, Fabrikam")

    with open(package, "rb") as stream:
        metadata = NupkgArchiveReader().read(stream, str(package))

    assert metadata.package_identifier == "Contoso.Templates"
    assert metadata.package_version == "1.0.0-beta"
    assert metadata.author == "Contoso, Fabrikam"


def test_read_manifest_without_namespace():
    stream = zip_bytes({"foo.nuspec": "<package><metadata><id>foo</id><version>2.0</version></metadata></package>"})

    metadata = NupkgArchiveReader().read(stream)

    assert metadata.package_identifier == "foo"
    assert metadata.package_version == "2.0.0"
    assert metadata.author == ""


def test_read_ignores_nested_manifests():
    stream = zip_bytes({"content/foo.nuspec": "<package/>"})

    with pytest.raises(InvalidPackageError, match="no .nuspec manifest"):
        NupkgArchiveReader().read(stream, "foo.nupkg")


@pytest.mark.parametrize(
    "payload, reason",
    [
        (io.BytesIO(b"not a zip"), "not a package archive"),
        (zip_bytes({"foo.nuspec": "<package><metadata>"}), "malformed manifest"),
        (zip_bytes({"foo.nuspec": "<package/>"}), "no <metadata>"),
        (zip_bytes({"foo.nuspec": "<package><metadata><version>1.0</version></metadata></package>"}), "no package id"),
        (
            zip_bytes({"foo.nuspec": "<package><metadata><id>foo</id><version>x</version></metadata></package>"}),
            "not valid",
        ),
    ],
)
def test_read_invalid_packages(payload, reason):
    with pytest.raises(InvalidPackageError, match=reason) as excinfo:
        NupkgArchiveReader().read(payload, "foo.nupkg")

    assert excinfo.value.package_location == "foo.nupkg"


@pytest.mark.parametrize("package_id", ["../escaped", "/tmp/abs/pwn", "foo/bar", "foo..bar"])
def test_read_rejects_package_id_that_is_not_a_file_name(package_id):
    """Manifest ids must follow feed naming rules; they become staged file names."""
    stream = zip_bytes(
        {"foo.nuspec": f"<package><metadata><id>{package_id}</id><version>1.2.3</version></metadata></package>"}
    )

    with pytest.raises(InvalidPackageError, match="package id .* is not valid"):
        NupkgArchiveReader().read(stream, "foo.nupkg")
