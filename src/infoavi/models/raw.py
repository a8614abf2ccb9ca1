"""Chunk structure records."""

from pydantic import BaseModel


class ChunkInfo(BaseModel):
    """One chunk header seen while walking the RIFF tree."""

    fourcc: str
    size: int
    offset: int
    depth: int = 0
    list_type: str | None = None

    @property
    def payload_offset(self) -> int:
        return self.offset + 8
