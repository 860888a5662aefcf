"""
Domain entities - Core business objects.
These represent the business concepts, not database models.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .value_objects import DocumentType, LocalFileUri, RemoteId


@dataclass(frozen=True)
class UploadedFileRecord:
    """
    Result of a successful upload, as reported by the remote storage backend.
    Timestamps are the backend's, not the time of the call.
    """
    remote_id: RemoteId
    name: str
    url: str
    size: int
    mime_type: str
    created_at: datetime
    modified_at: datetime

    @property
    def extension(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[1]


@dataclass(frozen=True)
class FileLinkage:
    """
    How a new metadata entry is attached to the business data.

    A case attachment belongs to its case; any other document is derived from
    its source resource. When local_file_uri is set, the entry replaces the
    record of the dropped local file it was uploaded from.
    """
    document_type: Optional[DocumentType] = None
    case_id: Optional[str] = None
    source_id: Optional[str] = None
    local_file_uri: Optional[LocalFileUri] = None


@dataclass
class FileMetadataEntry:
    """Persisted correlation between a logical file and its remote counterpart."""
    id: str
    name: str
    format: str
    size: int
    extension: str
    created: datetime
    remote_id: RemoteId
    url: str
    document_type: Optional[DocumentType] = None
    case_id: Optional[str] = None
    source_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["created"] = self.created.isoformat()
        data["document_type"] = self.document_type.value if self.document_type else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileMetadataEntry":
        values = dict(data)
        values["created"] = datetime.fromisoformat(values["created"])
        if values.get("document_type"):
            values["document_type"] = DocumentType(values["document_type"])
        return cls(**values)


@dataclass(frozen=True)
class RequestInfo:
    number: str
    date: datetime


@dataclass(frozen=True)
class OfferInfo:
    request_number: str
    version: str
    date: datetime


@dataclass(frozen=True)
class OrderInfo:
    request_number: str
    date: datetime
    customer_name: str = ""


@dataclass(frozen=True)
class InvoiceInfo:
    number: str
    date: datetime
    is_deposit_invoice: bool = False


@dataclass(frozen=True)
class DroppedFileInfo:
    """Metadata registered by the producer of a file before dropping it."""
    uri: LocalFileUri
    document_type: str
    creator: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SessionHandle:
    session_id: str
    access_token: str
    expires_at: datetime

    def is_active(self, now: datetime) -> bool:
        """Naive expiration dates are taken to be UTC; `now` must be timezone aware."""
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at >= now
