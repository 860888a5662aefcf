import asyncio

import pytest

from drivesync.api.exceptions import NoActiveSession, ResourceLookupFailed
from drivesync.domain import share_uri
from drivesync.services.drop_uploader import DroppedFileUploader
from drivesync.services.file_drop_handler import FileDropHandler
from drivesync.services.sessions import DatabaseSessionProvider
from drivesync.services.storage import RemoteStorageFactory

from conftest import FIXED_NOW


@pytest.fixture
def drop_dir(tmp_path):
    directory = tmp_path / "upload"
    directory.mkdir()
    return directory


@pytest.fixture
def uploader(store, orchestrator, drive_dir):
    return DroppedFileUploader(
        store,
        DatabaseSessionProvider(store, clock=lambda: FIXED_NOW),
        RemoteStorageFactory("local", base_dir=drive_dir),
        orchestrator
    )


def test_dropped_invoice_is_uploaded_for_its_creator(store, uploader, drop_dir, drive_dir):
    asyncio.run(store.register_dropped_file(
        "generated.pdf", "invoice", creator="user-1", context={"invoice_id": "invoice-1"}
    ))
    (drop_dir / "generated.pdf").write_bytes(b"%PDF-1.7")

    asyncio.run(uploader(drop_dir / "generated.pdf"))

    assert (drive_dir / "crm/invoices/2024/F0000042.pdf").read_bytes() == b"%PDF-1.7"
    assert asyncio.run(store.get_dropped_file(share_uri("generated.pdf"))) is None
    assert asyncio.run(store.get_local_id("crm/invoices/2024/F0000042.pdf")) is not None


def test_creator_without_active_session(store, uploader, drop_dir, drive_dir):
    asyncio.run(store.register_dropped_file(
        "generated.pdf", "invoice", creator="user-2", context={"invoice_id": "invoice-1"}
    ))
    (drop_dir / "generated.pdf").write_bytes(b"%PDF-1.7")

    with pytest.raises(NoActiveSession) as exc_info:
        asyncio.run(uploader(drop_dir / "generated.pdf"))

    assert "share://generated.pdf" in str(exc_info.value)
    assert not (drive_dir / "crm").exists()


def test_unregistered_file(uploader, drop_dir):
    (drop_dir / "stray.pdf").write_bytes(b"x")
    with pytest.raises(ResourceLookupFailed):
        asyncio.run(uploader(drop_dir / "stray.pdf"))


def test_handler_quarantines_file_without_session(store, uploader, drop_dir):
    asyncio.run(store.register_dropped_file("a.pdf", "invoice", creator="user-2", context={"invoice_id": "invoice-1"}))
    asyncio.run(store.register_dropped_file("b.pdf", "invoice", creator="user-1", context={"invoice_id": "invoice-1"}))
    (drop_dir / "a.pdf").write_bytes(b"a")
    (drop_dir / "b.pdf").write_bytes(b"b")

    handler = FileDropHandler(drop_dir, uploader)
    for name in handler.list_dropped_files():
        handler.add_to_queue(name)
    asyncio.run(handler.handle_next_file())

    assert (drop_dir / "failed" / "a.pdf").exists()
    assert not (drop_dir / "b.pdf").exists()
    assert handler.stats == {"uploaded": 1, "failed": 1}
