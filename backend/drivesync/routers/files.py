"""
Files Router - removal and download of uploaded files.
"""
from fastapi import APIRouter, Depends, Response

from .dependencies import get_file_service, get_remote_client
from ..services.storage import RemoteStorageInterface

router = APIRouter()


@router.delete("/files/{file_id}", status_code=204)
async def delete_file(
    file_id: str,
    remote_client: RemoteStorageInterface = Depends(get_remote_client)
):
    """Delete a file from the drive and remove its metadata."""
    await get_file_service().delete_document(file_id, remote_client)
    return Response(status_code=204)


@router.get("/files/{file_id}/download", status_code=204)
async def download_file(
    file_id: str,
    remote_client: RemoteStorageInterface = Depends(get_remote_client)
):
    """Point the client to a download URL for the file."""
    url = await get_file_service().get_download_url(file_id, remote_client)
    return Response(status_code=204, headers={"Location": url})
