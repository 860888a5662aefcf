"""
Location Resolver - maps a document type and its context to remote storage locations.

Every document type has one rule: the context variant it expects, the business
lookup it needs (at most one per resolution) and the function building its
locations. A type without a rule is unsupported; there is no fallback location.
"""
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from .database import MetadataStoreInterface
from ..api.exceptions import InvalidUploadContext, ResourceLookupFailed, UnsupportedDocumentType
from ..core import config
from ..core.logging_config import get_logger
from ..domain import (
    AccountancyExportContext,
    CaseAttachmentContext,
    DocumentType,
    InvoiceContext,
    LocationSpec,
    OfferContext,
    OrderContext,
    RequestContext,
    context_from_dict,
    parse_document_type,
)

logger = get_logger(__name__)

INVOICE_NUMBER_WIDTH = 7
EXPORT_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
_UNSAFE_NAME_CHARS = re.compile(r"[\r\n\t|]")


@dataclass(frozen=True)
class StorageLocations:
    """Root directory on the remote drive for each document family."""
    attachments: str
    reports: str
    offers: str
    orders: str
    delivery_notes: str
    invoices: str
    production_tickets: str
    production_ticket_templates: str
    accountancy_exports: str

    @classmethod
    def from_config(cls) -> "StorageLocations":
        return cls(
            attachments=config.ATTACHMENTS_DIR,
            reports=config.REPORTS_DIR,
            offers=config.OFFERS_DIR,
            orders=config.ORDERS_DIR,
            delivery_notes=config.DELIVERY_NOTES_DIR,
            invoices=config.INVOICES_DIR,
            production_tickets=config.PRODUCTION_TICKETS_DIR,
            production_ticket_templates=config.PRODUCTION_TICKET_TEMPLATES_DIR,
            accountancy_exports=config.ACCOUNTANCY_EXPORT_DIR,
        )


def sanitize_customer_name(name: str) -> str:
    """Strip characters that would break a single-line, pipe-delimited file name."""
    return _UNSAFE_NAME_CHARS.sub("", name or "")


def invoice_file_name(number: Any) -> str:
    digits = re.sub(r"\W", "", str(number))
    return f"F{digits.zfill(INVOICE_NUMBER_WIDTH)}.pdf"


def _join(root: str, *parts: Any) -> str:
    return "/".join([root.rstrip("/"), *(str(part) for part in parts)])


Lookup = Callable[[MetadataStoreInterface, Any], Awaitable[Optional[Any]]]
Builder = Callable[[StorageLocations, Any, Any, datetime], List[LocationSpec]]


@dataclass(frozen=True)
class LocationRule:
    context_type: type
    build: Builder
    lookup: Optional[Lookup] = None


def _report_rule(prefix: str) -> LocationRule:
    return LocationRule(
        context_type=RequestContext,
        lookup=lambda db, ctx: db.get_request_info(ctx.request_id),
        build=lambda roots, ctx, request, now: [
            LocationSpec(_join(roots.reports, request.date.year), f"{prefix}{request.number}.pdf")
        ],
    )


def _order_document_rule(root: Callable[[StorageLocations], str]) -> LocationRule:
    return LocationRule(
        context_type=OrderContext,
        lookup=lambda db, ctx: db.get_order_info(ctx.order_id),
        build=lambda roots, ctx, order, now: [
            LocationSpec(_join(root(roots), order.date.year), f"AD{order.request_number}.pdf")
        ],
    )


def _production_ticket_name(order) -> str:
    return f"AD{order.request_number}_{sanitize_customer_name(order.customer_name)}.pdf"


_INVOICE_RULE = LocationRule(
    context_type=InvoiceContext,
    lookup=lambda db, ctx: db.get_invoice_info(ctx.invoice_id),
    build=lambda roots, ctx, invoice, now: [
        LocationSpec(_join(roots.invoices, invoice.date.year), invoice_file_name(invoice.number))
    ],
)


def _accountancy_export_rule(file_name: str) -> LocationRule:
    # The timestamped copy keeps history. The canonical name only holds the latest
    # export when the remote replaces on conflict, otherwise the drive renames it.
    return LocationRule(
        context_type=AccountancyExportContext,
        build=lambda roots, ctx, info, now: [
            LocationSpec(roots.accountancy_exports, file_name),
            LocationSpec(roots.accountancy_exports, f"{now.strftime(EXPORT_TIMESTAMP_FORMAT)}-{file_name}"),
        ],
    )


LOCATION_RULES: Dict[DocumentType, LocationRule] = {
    DocumentType.CASE_ATTACHMENT: LocationRule(
        context_type=CaseAttachmentContext,
        lookup=lambda db, ctx: db.get_case_identifier(ctx.case_id),
        build=lambda roots, ctx, identifier, now: [
            LocationSpec(_join(roots.attachments, identifier), ctx.file_name)
        ],
    ),
    DocumentType.VISIT_REPORT: _report_rule("AD"),
    DocumentType.INTERVENTION_REPORT: _report_rule("IR"),
    DocumentType.OFFER: LocationRule(
        context_type=OfferContext,
        lookup=lambda db, ctx: db.get_offer_info(ctx.offer_id),
        build=lambda roots, ctx, offer, now: [
            LocationSpec(_join(roots.offers, offer.date.year), f"AD{offer.request_number}_{offer.version}.pdf")
        ],
    ),
    DocumentType.ORDER: _order_document_rule(lambda roots: roots.orders),
    DocumentType.DELIVERY_NOTE: _order_document_rule(lambda roots: roots.delivery_notes),
    DocumentType.INVOICE: _INVOICE_RULE,
    DocumentType.DEPOSIT_INVOICE: _INVOICE_RULE,
    DocumentType.PRODUCTION_TICKET: LocationRule(
        context_type=OrderContext,
        lookup=lambda db, ctx: db.get_order_info(ctx.order_id),
        build=lambda roots, ctx, order, now: [
            LocationSpec(_join(roots.production_tickets, order.date.year), _production_ticket_name(order))
        ],
    ),
    DocumentType.PRODUCTION_TICKET_TEMPLATE: LocationRule(
        context_type=OrderContext,
        lookup=lambda db, ctx: db.get_order_info(ctx.order_id),
        build=lambda roots, ctx, order, now: [
            LocationSpec(roots.production_ticket_templates.rstrip("/"), _production_ticket_name(order))
        ],
    ),
    DocumentType.INVOICE_ACCOUNTANCY_EXPORT: _accountancy_export_rule("ACT.csv"),
    DocumentType.CUSTOMER_ACCOUNTANCY_EXPORT: _accountancy_export_rule("CSF.csv"),
}


class LocationResolver:
    """
    Resolves where a document is stored on the remote drive.

    The first location of a resolution is canonical (its remote identity gets
    recorded); any further locations are untracked copies.
    """

    def __init__(
        self,
        db_service: MetadataStoreInterface,
        locations: Optional[StorageLocations] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rules: Optional[Dict[DocumentType, LocationRule]] = None
    ):
        self.db_service = db_service
        self.locations = locations or StorageLocations.from_config()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.rules = LOCATION_RULES if rules is None else rules

    async def resolve(
        self,
        document_type: Union[DocumentType, str],
        context: Union[Any, Mapping[str, Any]]
    ) -> List[LocationSpec]:
        """
        Get the ordered, non-empty list of locations for a document.

        Args:
            document_type: DocumentType or its string value
            context: The context variant of the document type, or a mapping with its fields

        Raises:
            UnsupportedDocumentType: if no rule exists for the document type
            InvalidUploadContext: if the context does not fit the document type
            ResourceLookupFailed: if the referenced business resource does not exist
        """
        doc_type = parse_document_type(document_type)
        rule = self.rules.get(doc_type)
        if rule is None:
            raise UnsupportedDocumentType(doc_type.value)

        if isinstance(context, Mapping):
            context = context_from_dict(doc_type, context)
        if not isinstance(context, rule.context_type):
            raise InvalidUploadContext(
                f"Document type '{doc_type.value}' expects {rule.context_type.__name__}, "
                f"got {type(context).__name__}"
            )

        info = None
        if rule.lookup is not None:
            info = await rule.lookup(self.db_service, context)
            if info is None:
                raise ResourceLookupFailed(f"Resource for {doc_type.value} not found: {context}")

        locations = rule.build(self.locations, context, info, self.clock())
        logger.debug(
            f"Resolved {doc_type.value} to {', '.join(location.full_path for location in locations)}"
        )
        return locations
