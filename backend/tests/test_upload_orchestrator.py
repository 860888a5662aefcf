import asyncio

import pytest

from drivesync.api.exceptions import RemoteUploadFailed, UnsupportedDocumentType
from drivesync.domain import CaseAttachmentContext, DocumentType, InvoiceContext, share_uri
from drivesync.services.storage import LocalRemoteStorage


class FailingCopiesStorage(LocalRemoteStorage):
    """Local storage refusing every upload except the first one."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.uploads = 0

    async def upload_file(self, path, name, content, size):
        self.uploads += 1
        if self.uploads > 1:
            raise RemoteUploadFailed(f"Upload of {path}/{name} failed")
        return await super().upload_file(path, name, content, size)


def test_upload_case_attachment(orchestrator, store, remote, drive_dir):
    entry = asyncio.run(orchestrator.upload(
        DocumentType.CASE_ATTACHMENT,
        CaseAttachmentContext("case-1", "notes.txt"),
        b"hello",
        5,
        remote,
        store
    ))

    assert (drive_dir / "crm/attachments/DOS-2024-001/notes.txt").read_bytes() == b"hello"
    assert entry.name == "notes.txt"
    assert entry.extension == "txt"
    assert entry.format == "text/plain"
    assert entry.size == 5
    assert entry.case_id == "case-1"
    assert entry.source_id is None

    assert asyncio.run(store.get_remote_id(entry.id)) == "crm/attachments/DOS-2024-001/notes.txt"
    assert asyncio.run(store.get_local_id(entry.remote_id)) == entry.id


def test_created_time_comes_from_remote(orchestrator, store, remote):
    entry = asyncio.run(orchestrator.upload(
        "invoice", {"invoice_id": "invoice-1"}, b"%PDF", 4, remote, store
    ))
    record = asyncio.run(store.get_file(entry.id))
    assert record.created == entry.created
    assert entry.created.tzinfo is not None


def test_document_derived_from_source(orchestrator, store, remote):
    entry = asyncio.run(orchestrator.upload(
        DocumentType.INVOICE, InvoiceContext("invoice-1"), b"%PDF", 4, remote, store
    ))
    assert entry.name == "F0000042.pdf"
    assert entry.source_id == "invoice-1"
    assert entry.case_id is None
    assert entry.document_type == DocumentType.INVOICE


def test_same_name_is_renamed_by_remote(orchestrator, store, remote):
    first = asyncio.run(orchestrator.upload(
        DocumentType.INVOICE, InvoiceContext("invoice-1"), b"one", 3, remote, store
    ))
    second = asyncio.run(orchestrator.upload(
        DocumentType.INVOICE, InvoiceContext("invoice-1"), b"two", 3, remote, store
    ))
    assert first.name == "F0000042.pdf"
    assert second.name == "F0000042 1.pdf"
    assert first.id != second.id


def test_accountancy_export_copy_is_uploaded_but_not_recorded(orchestrator, store, remote, drive_dir):
    entry = asyncio.run(orchestrator.upload(
        DocumentType.INVOICE_ACCOUNTANCY_EXPORT, {}, b"a;b", 3, remote, store
    ))

    assert entry.name == "ACT.csv"
    assert (drive_dir / "crm/winbooks/ACT.csv").exists()
    assert (drive_dir / "crm/winbooks/20240305140709-ACT.csv").exists()
    assert asyncio.run(store.get_local_id("crm/winbooks/20240305140709-ACT.csv")) is None


def test_repeated_accountancy_export_follows_conflict_behavior(orchestrator, store, remote, drive_dir):
    first = asyncio.run(orchestrator.upload(
        DocumentType.INVOICE_ACCOUNTANCY_EXPORT, {}, b"one", 3, remote, store
    ))
    second = asyncio.run(orchestrator.upload(
        DocumentType.INVOICE_ACCOUNTANCY_EXPORT, {}, b"two", 3, remote, store
    ))
    assert (first.name, second.name) == ("ACT.csv", "ACT 1.csv")

    replacing = LocalRemoteStorage(base_dir=drive_dir / "replace", conflict_behavior="replace")
    for content in (b"one", b"two"):
        entry = asyncio.run(orchestrator.upload(
            DocumentType.INVOICE_ACCOUNTANCY_EXPORT, {}, content, 3, replacing, store
        ))
        assert entry.name == "ACT.csv"
    assert (drive_dir / "replace/crm/winbooks/ACT.csv").read_bytes() == b"two"
    assert not (drive_dir / "replace/crm/winbooks/ACT 1.csv").exists()

def test_failing_copy_does_not_fail_upload(orchestrator, store, drive_dir):
    remote = FailingCopiesStorage(base_dir=drive_dir)
    entry = asyncio.run(orchestrator.upload(
        DocumentType.CUSTOMER_ACCOUNTANCY_EXPORT, {}, b"a;b", 3, remote, store
    ))
    assert entry.name == "CSF.csv"
    assert remote.uploads == 2
    assert asyncio.run(store.get_file(entry.id)) is not None


def test_failing_canonical_upload_records_nothing(orchestrator, store, drive_dir):
    remote = FailingCopiesStorage(base_dir=drive_dir)
    remote.uploads = 1
    with pytest.raises(RemoteUploadFailed):
        asyncio.run(orchestrator.upload(
            DocumentType.INVOICE, InvoiceContext("invoice-1"), b"%PDF", 4, remote, store
        ))
    assert store._data["files"] == {}


def test_unsupported_type_uploads_nothing(orchestrator, store, remote, drive_dir):
    with pytest.raises(UnsupportedDocumentType):
        asyncio.run(orchestrator.upload("brochure", {}, b"x", 1, remote, store))
    assert list(drive_dir.iterdir()) == []


def test_upload_of_dropped_file_reuses_registered_id(orchestrator, store, remote):
    dropped = asyncio.run(store.register_dropped_file(
        "invoice.pdf", "invoice", creator="user-1", context={"invoice_id": "invoice-1"}
    ))
    file_id = store._data["dropped_files"][dropped.uri]["file_id"]

    entry = asyncio.run(orchestrator.upload(
        dropped.document_type, dropped.context, b"%PDF", 4, remote, store,
        local_file_uri=share_uri("invoice.pdf")
    ))

    assert entry.id == file_id
    assert asyncio.run(store.get_dropped_file(dropped.uri)) is None
