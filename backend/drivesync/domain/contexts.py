"""
Upload contexts - one variant per document family.

Each variant carries exactly the fields its location rule needs. Loosely typed
mappings (form data, stored drop metadata) are converted with context_from_dict.
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Type, Union

from .value_objects import DocumentType
from ..api.exceptions import InvalidUploadContext, UnsupportedDocumentType


@dataclass(frozen=True)
class CaseAttachmentContext:
    case_id: str
    file_name: str

    @property
    def resource_id(self) -> str:
        return self.case_id


@dataclass(frozen=True)
class RequestContext:
    """Visit and intervention reports are filed per customer request."""
    request_id: str

    @property
    def resource_id(self) -> str:
        return self.request_id


@dataclass(frozen=True)
class OfferContext:
    offer_id: str

    @property
    def resource_id(self) -> str:
        return self.offer_id


@dataclass(frozen=True)
class OrderContext:
    """Orders, delivery notes and production tickets all hang off an order."""
    order_id: str

    @property
    def resource_id(self) -> str:
        return self.order_id


@dataclass(frozen=True)
class InvoiceContext:
    invoice_id: str

    @property
    def resource_id(self) -> str:
        return self.invoice_id


@dataclass(frozen=True)
class AccountancyExportContext:
    """Exports are not derived from a single business resource."""

    @property
    def resource_id(self) -> None:
        return None


UploadContext = Union[
    CaseAttachmentContext,
    RequestContext,
    OfferContext,
    OrderContext,
    InvoiceContext,
    AccountancyExportContext,
]

CONTEXT_TYPES: Dict[DocumentType, Type] = {
    DocumentType.CASE_ATTACHMENT: CaseAttachmentContext,
    DocumentType.VISIT_REPORT: RequestContext,
    DocumentType.INTERVENTION_REPORT: RequestContext,
    DocumentType.OFFER: OfferContext,
    DocumentType.ORDER: OrderContext,
    DocumentType.DELIVERY_NOTE: OrderContext,
    DocumentType.INVOICE: InvoiceContext,
    DocumentType.DEPOSIT_INVOICE: InvoiceContext,
    DocumentType.PRODUCTION_TICKET: OrderContext,
    DocumentType.PRODUCTION_TICKET_TEMPLATE: OrderContext,
    DocumentType.INVOICE_ACCOUNTANCY_EXPORT: AccountancyExportContext,
    DocumentType.CUSTOMER_ACCOUNTANCY_EXPORT: AccountancyExportContext,
}


def parse_document_type(value: Union[DocumentType, str]) -> DocumentType:
    """Coerce a raw value into a DocumentType, rejecting unknown values."""
    if isinstance(value, DocumentType):
        return value
    try:
        return DocumentType(value)
    except ValueError:
        raise UnsupportedDocumentType(value) from None


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _field_value(params: Mapping[str, Any], name: str) -> Any:
    """Read a field by its own name, its camelCase name, or as `{resource: {id: ...}}` for `<resource>_id`."""
    for key in (name, _camel_case(name)):
        if params.get(key) not in (None, ""):
            return params[key]
    if name.endswith("_id"):
        nested = params.get(name[:-len("_id")])
        if isinstance(nested, Mapping):
            return nested.get("id")
    return None


def context_from_dict(document_type: Union[DocumentType, str], params: Mapping[str, Any]) -> UploadContext:
    """
    Build the typed context for a document type from a plain mapping.

    Unknown keys are ignored; every field of the variant must be present.
    Besides flat keys such as `{"case_id": ..., "file_name": ...}` the nested
    form `{"case": {"id": ...}, "fileName": ...}` is accepted.

    Raises:
        UnsupportedDocumentType: if the document type is unknown
        InvalidUploadContext: if a required field is missing or empty
    """
    doc_type = parse_document_type(document_type)
    context_cls = CONTEXT_TYPES.get(doc_type)
    if context_cls is None:
        raise UnsupportedDocumentType(doc_type.value)

    values = {}
    for field in fields(context_cls):
        value = _field_value(params, field.name)
        if value is None or value == "":
            raise InvalidUploadContext(
                f"Missing '{field.name}' in upload context for document type '{doc_type.value}'"
            )
        values[field.name] = str(value)
    return context_cls(**values)
