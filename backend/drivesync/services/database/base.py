"""
Abstract base class for metadata store adapters.
All metadata store implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

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
)


class MetadataStoreInterface(ABC):
    """
    Abstract interface for file metadata and the business data it links to.
    All adapters must implement these methods.
    This allows plug-and-play database support without changing business logic.

    Lookups return None when the resource cannot be found.
    """

    # File metadata operations
    @abstractmethod
    async def insert_uploaded_file(self, record: UploadedFileRecord, linkage: FileLinkage) -> FileMetadataEntry:
        """Record an uploaded file and link it to its case or source resource."""
        pass

    @abstractmethod
    async def get_file(self, file_id: str) -> Optional[FileMetadataEntry]:
        """Get a file metadata entry by its local ID."""
        pass

    @abstractmethod
    async def get_remote_id(self, file_id: str) -> Optional[RemoteId]:
        """Get the remote identity of a file by its local ID."""
        pass

    @abstractmethod
    async def get_local_id(self, remote_id: RemoteId) -> Optional[str]:
        """Get the local ID of a file by its remote identity."""
        pass

    @abstractmethod
    async def delete_file(self, file_id: str) -> None:
        """Remove a file's metadata and its links. Missing pieces are ignored."""
        pass

    # Business lookups used to resolve upload locations
    @abstractmethod
    async def get_case_identifier(self, case_id: str) -> Optional[str]:
        """Get the human readable identifier of a case."""
        pass

    @abstractmethod
    async def get_request_info(self, request_id: str) -> Optional[RequestInfo]:
        pass

    @abstractmethod
    async def get_offer_info(self, offer_id: str) -> Optional[OfferInfo]:
        pass

    @abstractmethod
    async def get_order_info(self, order_id: str) -> Optional[OrderInfo]:
        pass

    @abstractmethod
    async def get_invoice_info(self, invoice_id: str) -> Optional[InvoiceInfo]:
        pass

    # Dropped files and sessions
    @abstractmethod
    async def get_dropped_file(self, uri: LocalFileUri) -> Optional[DroppedFileInfo]:
        """Get the metadata registered for a file in the drop directory."""
        pass

    @abstractmethod
    async def get_file_creator(self, uri: LocalFileUri) -> Optional[str]:
        """Get the user who created a dropped file."""
        pass

    @abstractmethod
    async def get_sessions_for_user(self, user_id: str) -> List[SessionHandle]:
        pass

    @abstractmethod
    async def get_session(self, session_id: str) -> Optional[SessionHandle]:
        pass

    # Registration of business data
    @abstractmethod
    async def add_case(self, case_id: str, identifier: str) -> None:
        pass

    @abstractmethod
    async def add_request(self, request_id: str, number: str, date: datetime) -> None:
        pass

    @abstractmethod
    async def add_offer(self, offer_id: str, request_number: str, version: str, date: datetime) -> None:
        pass

    @abstractmethod
    async def add_order(self, order_id: str, request_number: str, date: datetime, customer_name: str = "") -> None:
        pass

    @abstractmethod
    async def add_invoice(self, invoice_id: str, number: str, date: datetime, is_deposit_invoice: bool = False) -> None:
        pass

    @abstractmethod
    async def register_dropped_file(
        self,
        file_name: str,
        document_type: str,
        creator: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> DroppedFileInfo:
        """Register a file that is about to be dropped in the drop directory."""
        pass

    @abstractmethod
    async def add_session(self, session_id: str, user_id: str, access_token: str, expires_at: datetime) -> SessionHandle:
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize database (load collections, create directories, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close database connection."""
        pass
