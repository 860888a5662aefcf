import asyncio
from datetime import datetime, timezone

import pytest

from drivesync.domain import DocumentType, FileLinkage, RemoteId, UploadedFileRecord, share_uri
from drivesync.services.database import DatabaseFactory, JSONAdapter, MemoryAdapter

from conftest import seed


def make_record(remote_id="item-1", name="AD1234.pdf"):
    now = datetime(2024, 2, 15, 9, 30, tzinfo=timezone.utc)
    return UploadedFileRecord(
        remote_id=RemoteId(remote_id),
        name=name,
        url=f"https://drive.test/{remote_id}",
        size=10,
        mime_type="application/pdf",
        created_at=now,
        modified_at=now,
    )


def test_insert_and_lookup(store):
    entry = asyncio.run(store.insert_uploaded_file(
        make_record(), FileLinkage(document_type=DocumentType.ORDER, source_id="order-1")
    ))

    assert asyncio.run(store.get_remote_id(entry.id)) == "item-1"
    assert asyncio.run(store.get_local_id("item-1")) == entry.id
    stored = asyncio.run(store.get_file(entry.id))
    assert stored == entry
    assert stored.extension == "pdf"


def test_unknown_ids(store):
    assert asyncio.run(store.get_remote_id("nope")) is None
    assert asyncio.run(store.get_local_id("nope")) is None
    assert asyncio.run(store.get_file("nope")) is None
    assert asyncio.run(store.get_case_identifier("nope")) is None
    assert asyncio.run(store.get_invoice_info("nope")) is None


def test_delete_tolerates_missing_entry(store):
    entry = asyncio.run(store.insert_uploaded_file(make_record(), FileLinkage()))
    asyncio.run(store.delete_file(entry.id))
    asyncio.run(store.delete_file(entry.id))
    assert asyncio.run(store.get_remote_id(entry.id)) is None
    assert asyncio.run(store.get_local_id("item-1")) is None


def test_business_lookups(store):
    order = asyncio.run(store.get_order_info("order-1"))
    assert order.request_number == "1234"
    assert order.date.year == 2024
    assert order.customer_name == "Acme\nBuilders|BV"
    assert asyncio.run(store.get_case_identifier("case-1")) == "DOS-2024-001"


def test_dropped_file_registration(store):
    info = asyncio.run(store.register_dropped_file(
        "visit.pdf", DocumentType.VISIT_REPORT, creator="user-1", context={"request_id": "request-1"}
    ))
    assert info.uri == "share://visit.pdf"
    assert info.document_type == "visit-report"
    assert asyncio.run(store.get_file_creator(share_uri("visit.pdf"))) == "user-1"
    assert asyncio.run(store.get_file_creator(share_uri("other.pdf"))) is None


def test_json_adapter_persists_between_instances(tmp_path):
    db = JSONAdapter(data_dir=tmp_path)
    asyncio.run(db.initialize())
    asyncio.run(seed(db))
    entry = asyncio.run(db.insert_uploaded_file(
        make_record(), FileLinkage(document_type=DocumentType.CASE_ATTACHMENT, case_id="case-1")
    ))
    asyncio.run(db.close())

    assert (tmp_path / "files.json").exists()

    reopened = JSONAdapter(data_dir=tmp_path)
    asyncio.run(reopened.initialize())
    assert asyncio.run(reopened.get_file(entry.id)) == entry
    assert asyncio.run(reopened.get_local_id("item-1")) == entry.id
    assert asyncio.run(reopened.get_case_identifier("case-1")) == "DOS-2024-001"
    assert len(asyncio.run(reopened.get_sessions_for_user("user-1"))) == 1


def test_json_adapter_ignores_corrupt_collection(tmp_path):
    (tmp_path / "cases.json").write_text("{not json", encoding="utf-8")
    db = JSONAdapter(data_dir=tmp_path)
    asyncio.run(db.initialize())
    assert asyncio.run(db.get_case_identifier("case-1")) is None


def test_database_factory(tmp_path):
    assert isinstance(DatabaseFactory.create("memory"), MemoryAdapter)
    json_db = DatabaseFactory.create("json", data_dir=str(tmp_path))
    assert isinstance(json_db, JSONAdapter)
    assert json_db.data_dir == tmp_path
    with pytest.raises(ValueError):
        DatabaseFactory.create("postgres")
