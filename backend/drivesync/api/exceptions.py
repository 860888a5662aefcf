"""
Custom exceptions for the drivesync service.
Separates business exceptions from HTTP exceptions.
"""
from fastapi import HTTPException, status


class DriveSyncError(Exception):
    """Base class for all business errors raised by drivesync."""
    pass


class UnsupportedDocumentType(DriveSyncError):
    """Raised when no upload location rule exists for a document type."""

    def __init__(self, document_type):
        self.document_type = document_type
        super().__init__(f"Upload location not implemented for document type '{document_type}'")


class InvalidUploadContext(DriveSyncError):
    """Raised when the context given for a document type is missing fields or has the wrong shape."""
    pass


class ResourceLookupFailed(DriveSyncError):
    """Raised when a business resource referenced by a document cannot be found."""
    pass


class NoActiveSession(DriveSyncError):
    """Raised when the creator of a file has no session with an unexpired access token."""
    pass


class RemoteUploadFailed(DriveSyncError):
    """Raised when the remote storage backend fails to store a file."""
    pass


class RemoteDeleteFailed(DriveSyncError):
    """Raised when the remote storage backend fails to delete a file."""
    pass


class RemoteAccessFailed(DriveSyncError):
    """Raised when the remote drive cannot be reached on behalf of the session user."""
    pass


class DocumentNotFoundError(DriveSyncError):
    """Raised when document is not found."""
    pass


class MissingSessionError(DriveSyncError):
    """Raised when a request does not carry a session header."""
    pass


def handle_business_exception(e: Exception) -> HTTPException:
    """
    Convert business exceptions to HTTP exceptions.
    This keeps business logic clean of HTTP concerns.
    """
    if isinstance(e, (UnsupportedDocumentType, InvalidUploadContext, MissingSessionError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    elif isinstance(e, (ResourceLookupFailed, DocumentNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    elif isinstance(e, NoActiveSession):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    elif isinstance(e, (RemoteUploadFailed, RemoteDeleteFailed, RemoteAccessFailed)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    else:
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
