"""
Me Router - checks that the session user can reach the remote drive.
"""
from fastapi import APIRouter, Depends, Response

from .dependencies import get_remote_client
from ..services.storage import RemoteStorageInterface

router = APIRouter()


@router.get("/me", status_code=204)
async def me(remote_client: RemoteStorageInterface = Depends(get_remote_client)):
    """Fetch the profile of the session user on the remote drive."""
    await remote_client.me()
    return Response(status_code=204)
