"""
Data Transfer Objects (DTOs) for API layer.
Separates API contracts from domain entities.
"""
from typing import List, Optional

from pydantic import BaseModel

from ..domain import FileMetadataEntry


class FileAttributesDTO(BaseModel):
    name: str
    format: str
    size: int
    extension: str
    created: str
    url: str
    document_type: Optional[str] = None


class FileResourceDTO(BaseModel):
    id: str
    type: str = "files"
    attributes: FileAttributesDTO


class FileResponseDTO(BaseModel):
    """JSON:API style response for a created file."""
    data: FileResourceDTO

    @classmethod
    def from_entry(cls, entry: FileMetadataEntry) -> "FileResponseDTO":
        return cls(
            data=FileResourceDTO(
                id=entry.id,
                attributes=FileAttributesDTO(
                    name=entry.name,
                    format=entry.format,
                    size=entry.size,
                    extension=entry.extension,
                    created=entry.created.isoformat(),
                    url=entry.url,
                    document_type=entry.document_type.value if entry.document_type else None
                )
            )
        )


class DropQueueStatusDTO(BaseModel):
    enabled: bool
    current: Optional[str] = None
    queue: List[str] = []
    is_handling: bool = False
    uploaded: int = 0
    failed: int = 0
