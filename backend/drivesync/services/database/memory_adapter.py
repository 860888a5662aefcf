"""
In-memory adapter implementing MetadataStoreInterface.
Perfect for demos and testing - stores all data in memory using Python dicts.
Data is lost on restart (on-demand, no persistence).
"""
import copy
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import MetadataStoreInterface
from ...core.logging_config import get_logger
from ...domain import (
    DroppedFileInfo,
    FileLinkage,
    FileMetadataEntry,
    InvoiceInfo,
    LocalFileUri,
    OfferInfo,
    OrderInfo,
    RemoteId,
    RequestInfo,
    SessionHandle,
    UploadedFileRecord,
    share_uri,
)

logger = get_logger(__name__)

COLLECTIONS = ("files", "cases", "requests", "offers", "orders", "invoices", "dropped_files", "sessions")


class MemoryAdapter(MetadataStoreInterface):
    """
    In-memory metadata store using plain dictionaries.
    Records are kept JSON-serializable so the JSON adapter can persist them as-is.
    """

    def __init__(self):
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        # remote_id -> file_id
        self._remote_index: Dict[str, str] = {}

    async def initialize(self):
        """Initialize database (clears any existing data, useful for testing)."""
        for collection in self._data.values():
            collection.clear()
        self._remote_index.clear()

    async def close(self):
        """Close database connection (no-op for in-memory)."""
        pass

    def _rebuild_indexes(self):
        self._remote_index = {
            entry["remote_id"]: file_id for file_id, entry in self._data["files"].items()
        }

    async def _changed(self, collection: str):
        """Hook called after every write; persistent adapters save here."""
        pass

    # File metadata operations
    async def insert_uploaded_file(self, record: UploadedFileRecord, linkage: FileLinkage) -> FileMetadataEntry:
        file_id = None
        document_type = linkage.document_type
        if linkage.local_file_uri:
            dropped = self._data["dropped_files"].pop(linkage.local_file_uri, None)
            if dropped is None:
                logger.warning(f"No dropped file registered for {linkage.local_file_uri}, recording upload anyway")
            else:
                file_id = dropped.get("file_id")
                await self._changed("dropped_files")

        entry = FileMetadataEntry(
            id=file_id or str(uuid.uuid4()),
            name=record.name,
            format=record.mime_type,
            size=record.size,
            extension=record.extension,
            created=record.created_at,
            remote_id=record.remote_id,
            url=record.url,
            document_type=document_type,
            case_id=linkage.case_id,
            source_id=linkage.source_id
        )
        self._data["files"][entry.id] = entry.to_dict()
        self._remote_index[record.remote_id] = entry.id
        await self._changed("files")
        logger.debug(f"Recorded file {entry.id} for remote item {record.remote_id}")
        return entry

    async def get_file(self, file_id: str) -> Optional[FileMetadataEntry]:
        data = self._data["files"].get(file_id)
        return FileMetadataEntry.from_dict(data) if data else None

    async def get_remote_id(self, file_id: str) -> Optional[RemoteId]:
        data = self._data["files"].get(file_id)
        return RemoteId(data["remote_id"]) if data else None

    async def get_local_id(self, remote_id: RemoteId) -> Optional[str]:
        return self._remote_index.get(remote_id)

    async def delete_file(self, file_id: str) -> None:
        data = self._data["files"].pop(file_id, None)
        if data is None:
            logger.debug(f"No metadata for file {file_id}, nothing to delete")
            return
        self._remote_index.pop(data.get("remote_id"), None)
        await self._changed("files")

    # Business lookups
    async def get_case_identifier(self, case_id: str) -> Optional[str]:
        data = self._data["cases"].get(case_id)
        return data["identifier"] if data else None

    async def get_request_info(self, request_id: str) -> Optional[RequestInfo]:
        data = self._data["requests"].get(request_id)
        if not data:
            return None
        return RequestInfo(number=data["number"], date=datetime.fromisoformat(data["date"]))

    async def get_offer_info(self, offer_id: str) -> Optional[OfferInfo]:
        data = self._data["offers"].get(offer_id)
        if not data:
            return None
        return OfferInfo(
            request_number=data["request_number"],
            version=data["version"],
            date=datetime.fromisoformat(data["date"])
        )

    async def get_order_info(self, order_id: str) -> Optional[OrderInfo]:
        data = self._data["orders"].get(order_id)
        if not data:
            return None
        return OrderInfo(
            request_number=data["request_number"],
            date=datetime.fromisoformat(data["date"]),
            customer_name=data.get("customer_name", "")
        )

    async def get_invoice_info(self, invoice_id: str) -> Optional[InvoiceInfo]:
        data = self._data["invoices"].get(invoice_id)
        if not data:
            return None
        return InvoiceInfo(
            number=data["number"],
            date=datetime.fromisoformat(data["date"]),
            is_deposit_invoice=data.get("is_deposit_invoice", False)
        )

    # Dropped files and sessions
    async def get_dropped_file(self, uri: LocalFileUri) -> Optional[DroppedFileInfo]:
        data = self._data["dropped_files"].get(uri)
        if not data:
            return None
        return DroppedFileInfo(
            uri=LocalFileUri(uri),
            document_type=data["document_type"],
            creator=data.get("creator"),
            context=copy.deepcopy(data.get("context", {}))
        )

    async def get_file_creator(self, uri: LocalFileUri) -> Optional[str]:
        data = self._data["dropped_files"].get(uri)
        return data.get("creator") if data else None

    @staticmethod
    def _session(session_id: str, data: Dict[str, Any]) -> SessionHandle:
        return SessionHandle(
            session_id=session_id,
            access_token=data["access_token"],
            expires_at=datetime.fromisoformat(data["expires_at"])
        )

    async def get_sessions_for_user(self, user_id: str) -> List[SessionHandle]:
        return [
            self._session(session_id, data)
            for session_id, data in self._data["sessions"].items()
            if data["user_id"] == user_id
        ]

    async def get_session(self, session_id: str) -> Optional[SessionHandle]:
        data = self._data["sessions"].get(session_id)
        return self._session(session_id, data) if data else None

    # Registration of business data
    async def add_case(self, case_id: str, identifier: str) -> None:
        self._data["cases"][case_id] = {"identifier": identifier}
        await self._changed("cases")

    async def add_request(self, request_id: str, number: str, date: datetime) -> None:
        self._data["requests"][request_id] = {"number": str(number), "date": date.isoformat()}
        await self._changed("requests")

    async def add_offer(self, offer_id: str, request_number: str, version: str, date: datetime) -> None:
        self._data["offers"][offer_id] = {
            "request_number": str(request_number),
            "version": version,
            "date": date.isoformat()
        }
        await self._changed("offers")

    async def add_order(self, order_id: str, request_number: str, date: datetime, customer_name: str = "") -> None:
        self._data["orders"][order_id] = {
            "request_number": str(request_number),
            "date": date.isoformat(),
            "customer_name": customer_name
        }
        await self._changed("orders")

    async def add_invoice(self, invoice_id: str, number: str, date: datetime, is_deposit_invoice: bool = False) -> None:
        self._data["invoices"][invoice_id] = {
            "number": str(number),
            "date": date.isoformat(),
            "is_deposit_invoice": is_deposit_invoice
        }
        await self._changed("invoices")

    async def register_dropped_file(
        self,
        file_name: str,
        document_type: str,
        creator: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> DroppedFileInfo:
        uri = share_uri(file_name)
        self._data["dropped_files"][uri] = {
            "file_id": str(uuid.uuid4()),
            "document_type": str(getattr(document_type, "value", document_type)),
            "creator": creator,
            "context": dict(context or {})
        }
        await self._changed("dropped_files")
        return await self.get_dropped_file(uri)

    async def add_session(self, session_id: str, user_id: str, access_token: str, expires_at: datetime) -> SessionHandle:
        self._data["sessions"][session_id] = {
            "user_id": user_id,
            "access_token": access_token,
            "expires_at": expires_at.isoformat()
        }
        await self._changed("sessions")
        return self._session(session_id, self._data["sessions"][session_id])
