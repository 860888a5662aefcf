"""
Domain layer - Contains business entities and domain logic.
This layer is independent of infrastructure and frameworks.
"""
from .value_objects import DocumentType, LocationSpec, LocalFileUri, RemoteId, share_uri
from .contexts import (
    AccountancyExportContext,
    CaseAttachmentContext,
    InvoiceContext,
    OfferContext,
    OrderContext,
    RequestContext,
    UploadContext,
    context_from_dict,
    parse_document_type,
)
from .entities import (
    DroppedFileInfo,
    FileLinkage,
    FileMetadataEntry,
    InvoiceInfo,
    OfferInfo,
    OrderInfo,
    RequestInfo,
    SessionHandle,
    UploadedFileRecord,
)

__all__ = [
    "DocumentType",
    "LocationSpec",
    "LocalFileUri",
    "RemoteId",
    "share_uri",
    "AccountancyExportContext",
    "CaseAttachmentContext",
    "InvoiceContext",
    "OfferContext",
    "OrderContext",
    "RequestContext",
    "UploadContext",
    "context_from_dict",
    "parse_document_type",
    "DroppedFileInfo",
    "FileLinkage",
    "FileMetadataEntry",
    "InvoiceInfo",
    "OfferInfo",
    "OrderInfo",
    "RequestInfo",
    "SessionHandle",
    "UploadedFileRecord",
]
