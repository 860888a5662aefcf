"""
Value Objects - Immutable objects that represent domain concepts.
These have no identity and are compared by value.
"""
from dataclasses import dataclass
from enum import Enum
from typing import NewType

# Identifier assigned by the remote storage backend
RemoteId = NewType("RemoteId", str)

# URI of a file dropped in the local drop directory (share://<name>)
LocalFileUri = NewType("LocalFileUri", str)

SHARE_URI_PREFIX = "share://"


class DocumentType(str, Enum):
    """Business category of a document, governs its remote name and path."""
    CASE_ATTACHMENT = "case-attachment"
    VISIT_REPORT = "visit-report"
    INTERVENTION_REPORT = "intervention-report"
    OFFER = "offer"
    ORDER = "order"
    DELIVERY_NOTE = "delivery-note"
    INVOICE = "invoice"
    DEPOSIT_INVOICE = "deposit-invoice"
    PRODUCTION_TICKET = "production-ticket"
    PRODUCTION_TICKET_TEMPLATE = "production-ticket-template"
    INVOICE_ACCOUNTANCY_EXPORT = "invoice-accountancy-export"
    CUSTOMER_ACCOUNTANCY_EXPORT = "customer-accountancy-export"


@dataclass(frozen=True)
class LocationSpec:
    """Target location of a file on the remote drive."""
    directory_path: str
    file_name: str

    @property
    def full_path(self) -> str:
        return f"{self.directory_path.rstrip('/')}/{self.file_name}"


def share_uri(file_name: str) -> LocalFileUri:
    """Local URI under which a dropped file is known to the metadata store."""
    return LocalFileUri(f"{SHARE_URI_PREFIX}{file_name}")
