"""Per-file AVI report model."""

from pydantic import BaseModel, Field

from .file import FileInfo
from .raw import ChunkInfo
from .summary import MediaSummary


class AviReport(BaseModel):
    """Result of walking one AVI file.

    - name: Path of the file as it was given to the analyzer
    - file_info: Absolute path, name and size of the file
    - riff_size: Declared size of the top-level RIFF container
    - summary: Media characteristics collected from the headers
    - chunks: Every chunk header visited, in file order
    - software: Text of the ``ISFT`` chunk, if present
    - has_index: Whether the main header sets AVIF_HASINDEX
    - item_limit: Truncation threshold the walk ran with (None if unlimited)
    """

    name: str = ""
    file_info: FileInfo
    riff_size: int = 0
    summary: MediaSummary = Field(default_factory=MediaSummary)
    chunks: list[ChunkInfo] = Field(default_factory=list)
    software: str | None = None
    has_index: bool = False
    item_limit: int | None = None

    @property
    def path(self) -> str:
        """Return file path."""
        return self.file_info.path

    @property
    def filename(self) -> str:
        """Return filename."""
        return self.file_info.filename

    @property
    def duration(self) -> float:
        """Return video duration in seconds."""
        return self.summary.video_length

    def find_chunks(self, fourcc: str) -> list[ChunkInfo]:
        """Return visited chunks with the given tag (or LIST type)."""
        return [c for c in self.chunks if c.fourcc == fourcc or c.list_type == fourcc]
