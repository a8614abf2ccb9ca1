"""Pydantic models for infoavi."""

from .file import FileInfo, format_size
from .headers import (
    AVIF_HASINDEX,
    BitmapInfoHeader,
    ChunkHeader,
    IndexEntry,
    MainHeader,
    RiffHeader,
    StreamHeader,
    WaveFormat,
)
from .raw import ChunkInfo
from .report import AviReport
from .summary import AudioFormat, MediaSummary

__all__ = [
    # Report
    "AviReport",
    "MediaSummary",
    "AudioFormat",
    # Structures
    "RiffHeader",
    "ChunkHeader",
    "MainHeader",
    "StreamHeader",
    "BitmapInfoHeader",
    "WaveFormat",
    "IndexEntry",
    "AVIF_HASINDEX",
    # Raw
    "ChunkInfo",
    # File
    "FileInfo",
    "format_size",
]
