import asyncio

import pytest

from drivesync.api.exceptions import RemoteAccessFailed, RemoteDeleteFailed, RemoteUploadFailed
from drivesync.domain import LocationSpec
from drivesync.services.storage import LocalRemoteStorage, RemoteStorageFactory
from drivesync.services.storage.base import renamed_candidates


def test_renamed_candidates():
    candidates = renamed_candidates("report.pdf")
    assert [next(candidates) for _ in range(3)] == ["report.pdf", "report 1.pdf", "report 2.pdf"]

    candidates = renamed_candidates(".env")
    assert [next(candidates) for _ in range(2)] == [".env", ".env 1"]

    candidates = renamed_candidates("README")
    assert [next(candidates) for _ in range(2)] == ["README", "README 1"]


def test_upload_and_find(remote):
    record = asyncio.run(remote.upload_file("/crm/offers/2024", "AD1.pdf", b"%PDF", 4))
    assert record.remote_id == "crm/offers/2024/AD1.pdf"
    assert record.mime_type == "application/pdf"
    assert record.url.startswith("file://")

    found = asyncio.run(remote.find_file_by_location(LocationSpec("/crm/offers/2024", "AD1.pdf")))
    assert found == record.remote_id
    assert asyncio.run(remote.get_download_url(record.remote_id)) == record.url


def test_missing_file_lookups_return_none(remote):
    assert asyncio.run(remote.find_file_by_location(LocationSpec("/crm", "missing.pdf"))) is None
    assert asyncio.run(remote.get_download_url("crm/missing.pdf")) is None


def test_replace_conflict_behavior(drive_dir):
    remote = LocalRemoteStorage(base_dir=drive_dir, conflict_behavior="replace")
    asyncio.run(remote.upload_file("/exports", "ACT.csv", b"old", 3))
    record = asyncio.run(remote.upload_file("/exports", "ACT.csv", b"new", 3))
    assert record.name == "ACT.csv"
    assert (drive_dir / "exports/ACT.csv").read_bytes() == b"new"


def test_fail_conflict_behavior(drive_dir):
    remote = LocalRemoteStorage(base_dir=drive_dir, conflict_behavior="fail")
    asyncio.run(remote.upload_file("/exports", "ACT.csv", b"old", 3))
    with pytest.raises(RemoteUploadFailed):
        asyncio.run(remote.upload_file("/exports", "ACT.csv", b"new", 3))


def test_unknown_conflict_behavior(drive_dir):
    with pytest.raises(ValueError):
        LocalRemoteStorage(base_dir=drive_dir, conflict_behavior="merge")


def test_path_traversal_is_rejected(remote):
    with pytest.raises(RemoteUploadFailed):
        asyncio.run(remote.upload_file("/../outside", "a.txt", b"a", 1))


def test_delete(remote, drive_dir):
    record = asyncio.run(remote.upload_file("/a", "b.txt", b"b", 1))
    asyncio.run(remote.delete_file(record.remote_id))
    assert not (drive_dir / "a/b.txt").exists()

    with pytest.raises(RemoteDeleteFailed):
        asyncio.run(remote.delete_file(record.remote_id))


def test_factory_creates_configured_adapters(drive_dir):
    factory = RemoteStorageFactory("local", base_dir=str(drive_dir))
    storage = factory.for_session(None)
    assert isinstance(storage, LocalRemoteStorage)
    assert storage.base_dir == drive_dir

    with pytest.raises(ValueError):
        RemoteStorageFactory.create("graph", session=None, drive_id="drive")
    with pytest.raises(ValueError):
        RemoteStorageFactory.create("ftp")


def test_me_checks_drive_directory(remote, drive_dir):
    asyncio.run(remote.me())

    drive_dir.rmdir()
    with pytest.raises(RemoteAccessFailed):
        asyncio.run(remote.me())
