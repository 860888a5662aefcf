"""
Drop Queue Router - exposes the state of the drop directory synchronization.
"""
from fastapi import APIRouter

from .dependencies import get_file_drop_handler
from ..api.dto import DropQueueStatusDTO

router = APIRouter()


@router.get("/drop-queue", response_model=DropQueueStatusDTO)
async def get_drop_queue_status():
    """Get the file being uploaded and the files waiting in the queue."""
    handler = get_file_drop_handler()
    if handler is None:
        return DropQueueStatusDTO(enabled=False)
    return DropQueueStatusDTO(enabled=True, **handler.status())
