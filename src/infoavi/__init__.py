"""infoavi - AVI structure inspector.

Walk the RIFF chunk tree of AVI files, decode the known headers and
summarize the media they describe.

Usage:
    from infoavi import analyze_file

    report = analyze_file("video.avi")
    print(report.summary.width, report.summary.height)
    print(report.summary.frame_rate_hz)

    # Export as JSON
    print(report.model_dump_json())
"""

from infoavi._version import __version__
from infoavi.analyze import analyze_file, analyze_files, get_file_info
from infoavi.formatters import (
    format_default,
    format_json,
    format_quiet,
    to_dict,
)
from infoavi.models import (
    AudioFormat,
    AviReport,
    ChunkInfo,
    FileInfo,
    MediaSummary,
)
from infoavi.parser import (
    UNLIMITED,
    AviError,
    AviReadError,
    AviStructureError,
    ByteSource,
    TraceReporter,
)
from infoavi.parser.walker import ChunkWalker

__all__ = [
    # Version
    "__version__",
    # Main functions
    "analyze_file",
    "analyze_files",
    "get_file_info",
    # Parser
    "ChunkWalker",
    "ByteSource",
    "TraceReporter",
    "UNLIMITED",
    # Errors
    "AviError",
    "AviReadError",
    "AviStructureError",
    # Models
    "AviReport",
    "MediaSummary",
    "AudioFormat",
    "ChunkInfo",
    "FileInfo",
    # Formatters
    "format_default",
    "format_json",
    "format_quiet",
    "to_dict",
]
