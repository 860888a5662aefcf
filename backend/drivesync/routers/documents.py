"""
Documents Router - uploads documents to their canonical drive location.

Endpoints:
    POST /cases/{case_id}/attachments - Attach an uploaded file to a case
    POST /documents - Upload a business document (report, offer, invoice, ...)

The remote drive is accessed on behalf of the session in the mu-session-id header.
"""
import json
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from .dependencies import get_db_service, get_orchestrator, get_remote_client
from ..api.dto import FileResponseDTO
from ..api.exceptions import InvalidUploadContext
from ..core.logging_config import get_logger
from ..domain import CaseAttachmentContext, DocumentType
from ..services.storage import RemoteStorageInterface

logger = get_logger(__name__)

router = APIRouter()


def _file_name(file: UploadFile) -> str:
    if not file.filename:
        raise InvalidUploadContext("File parameter is missing")
    return file.filename


@router.post("/cases/{case_id}/attachments", status_code=201, response_model=FileResponseDTO)
async def upload_case_attachment(
    case_id: str,
    file: UploadFile = File(...),
    remote_client: RemoteStorageInterface = Depends(get_remote_client)
):
    """
    Upload a file as attachment of a case.

    The file keeps its original name and is stored in the case's attachments directory.
    """
    file_name = _file_name(file)
    content = await file.read()
    entry = await get_orchestrator().upload(
        DocumentType.CASE_ATTACHMENT,
        CaseAttachmentContext(case_id=case_id, file_name=file_name),
        content,
        len(content),
        remote_client,
        get_db_service()
    )
    return FileResponseDTO.from_entry(entry)


@router.post("/documents", status_code=201, response_model=FileResponseDTO)
async def upload_document(
    file: UploadFile = File(...),
    type: str = Form(...),
    context: Optional[str] = Form(None),
    remote_client: RemoteStorageInterface = Depends(get_remote_client)
):
    """
    Upload a business document.

    Args:
        file: The generated document
        type: Document type, e.g. 'invoice' or 'production-ticket'
        context: JSON object with the fields the document type needs,
                 e.g. {"invoice_id": "..."}
    """
    _file_name(file)
    try:
        params = json.loads(context) if context else {}
    except json.JSONDecodeError as e:
        raise InvalidUploadContext(f"Context is not valid JSON: {e}") from e
    if not isinstance(params, dict):
        raise InvalidUploadContext("Context must be a JSON object")

    content = await file.read()
    entry = await get_orchestrator().upload(
        type,
        params,
        content,
        len(content),
        remote_client,
        get_db_service()
    )
    return FileResponseDTO.from_entry(entry)
