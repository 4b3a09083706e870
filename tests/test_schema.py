"""Tests for requests, persisted records and serialize/deserialize."""

import uuid
from datetime import UTC
from datetime import datetime

import pytest
from pydantic import ValidationError
from template_packages import ForeignSource
from template_packages import InstallRequest
from template_packages import PackageSource
from template_packages import PersistedRecord


def test_install_request_requires_identifier():
    with pytest.raises(ValidationError):
        InstallRequest(identifier="")


def test_install_request_keeps_invalid_version():
    """Version validity is judged by the installer, not at construction."""
    request = InstallRequest(identifier="Contoso.Templates", version="garbage")

    assert request.version == "garbage"
    assert request.details == {}
    assert str(request) == "Contoso.Templates::garbage"


def test_install_request_is_immutable():
    request = InstallRequest(identifier="Contoso.Templates")

    with pytest.raises(ValidationError):
        request.version = "1.0.0"


def test_persisted_record_wire_names():
    """Persisted records use the stable camelCase field names."""
    installer_id = uuid.uuid4()
    record = PersistedRecord(
        installer_id=installer_id,
        mount_point_uri="/packages/foo.1.0.0.nupkg",
        last_change_time=datetime(2025, 10, 26, 12, 0, tzinfo=UTC),
        details={"packageIdentifier": "foo"},
    )

    data = record.to_dict()

    assert data == {
        "installerId": str(installer_id),
        "mountPointUri": "/packages/foo.1.0.0.nupkg",
        "lastChangeTime": "2025-10-26T12:00:00Z",
        "details": {"packageIdentifier": "foo"},
    }
    assert PersistedRecord.from_dict(data) == record


def test_persisted_record_defaults():
    record = PersistedRecord.from_dict({"installerId": str(uuid.uuid4()), "mountPointUri": "/x"})

    assert record.details == {}
    assert record.last_change_time.year == 1


@pytest.mark.asyncio
async def test_serialize_deserialize_round_trip(installer, package_factory, tmp_path):
    """Deserialize(Serialize(source)) reproduces the source."""
    package = package_factory(tmp_path / "downloads")
    source = (await installer.install(InstallRequest(identifier=str(package)))).source

    record = installer.serialize(source)
    restored = installer.deserialize("global-settings", PersistedRecord.from_dict(record.to_dict()))

    assert isinstance(restored, PackageSource)
    assert restored == source
    assert restored.mount_point_uri == source.mount_point_uri
    assert restored.details == source.details
    assert restored.last_change_time == source.last_change_time
    assert restored.provider == "global-settings"
    assert installer.serialize(restored) == record


def test_deserialize_does_no_io(installer):
    """Records of files that no longer exist still deserialize."""
    record = PersistedRecord(
        installer_id=installer.installer_id,
        mount_point_uri="/gone/foo.1.0.0.nupkg",
        details={"packageIdentifier": "foo", "packageVersion": "1.0.0"},
    )

    source = installer.deserialize(None, record)

    assert source.identifier == "foo"
    assert source.version == "1.0.0"
    assert source.installer_id == installer.installer_id


def test_serialize_foreign_source_gives_minimal_record(installer, tmp_path):
    foreign = ForeignSource(
        installer_id=uuid.uuid4(),
        mount_point_uri=str(tmp_path / "folder"),
        identifier="folder",
        last_change_time=datetime.now(UTC),
    )

    record = installer.serialize(foreign)

    assert record.installer_id == installer.installer_id
    assert record.mount_point_uri == str(tmp_path / "folder")
    assert record.details == {}
    assert record.last_change_time == datetime.min.replace(tzinfo=UTC)
