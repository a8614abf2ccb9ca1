"""Core analysis functions."""

from __future__ import annotations

import os
import warnings
from datetime import datetime
from typing import TextIO

from infoavi.config import get_config
from infoavi.models import AviReport, FileInfo
from infoavi.parser import UNLIMITED, AviError, ByteSource, TraceReporter
from infoavi.parser.walker import ChunkWalker


def get_file_info(path: str) -> FileInfo:
    """Get basic file information.

    Args:
        path: Path to the file

    Returns:
        FileInfo object with file details
    """
    stat = os.stat(path)

    return FileInfo(
        path=os.path.abspath(path),
        filename=os.path.basename(path),
        extension=os.path.splitext(path)[1].lower(),
        size_bytes=stat.st_size,
        modified=datetime.fromtimestamp(stat.st_mtime),
    )


def analyze_file(
    path: str,
    item_limit: int | None = None,
    max_depth: int | None = None,
    trace: TextIO | None = None,
) -> AviReport:
    """Walk an AVI file and collect its structure and media summary.

    Args:
        path: Path to the AVI file
        item_limit: Unknown chunks / index entries reported per limited
            container (``UNLIMITED`` for all; config value if None)
        max_depth: Maximum LIST nesting (config value if None)
        trace: Stream receiving the chunk trace (no trace if None)

    Returns:
        AviReport for the file

    Raises:
        FileNotFoundError: If the file does not exist
        AviStructureError: If the file is not a valid AVI file
        AviReadError: If the file cannot be read
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")

    config = get_config()
    if item_limit is None:
        item_limit = config.walker.item_limit
    if max_depth is None:
        max_depth = config.walker.max_depth

    file_info = get_file_info(path)

    with open(path, "rb") as f:
        source = ByteSource(f)
        walker = ChunkWalker(
            source,
            reporter=TraceReporter(trace),
            max_depth=max_depth,
            name=path,
        )
        summary = walker.run(item_limit)

    return AviReport(
        name=path,
        file_info=file_info,
        riff_size=walker.riff_header.size if walker.riff_header else 0,
        summary=summary,
        chunks=walker.chunks,
        software=walker.software,
        has_index=walker.main_header.has_index if walker.main_header else False,
        item_limit=None if item_limit == UNLIMITED else item_limit,
    )


def analyze_files(paths: list[str], item_limit: int | None = None) -> list[AviReport]:
    """Analyze multiple AVI files, skipping the ones that fail.

    Args:
        paths: List of file paths
        item_limit: Truncation threshold (config value if None)

    Returns:
        List of AviReport objects for the files that parsed
    """
    results = []
    for path in paths:
        try:
            results.append(analyze_file(path, item_limit=item_limit))
        except (OSError, AviError) as e:
            warnings.warn(f"Failed to analyze {path}: {e}", stacklevel=2)
    return results
