"""RIFF/AVI structure parsing."""

from .base import (
    DEFAULT_ITEM_LIMIT,
    DEFAULT_MAX_DEPTH,
    UNLIMITED,
    AviError,
    AviReadError,
    AviStructureError,
    ByteSource,
    decode_fourcc,
)
from .trace import TraceReporter

__all__ = [
    "AviError",
    "AviReadError",
    "AviStructureError",
    "ByteSource",
    "TraceReporter",
    "decode_fourcc",
    "DEFAULT_ITEM_LIMIT",
    "DEFAULT_MAX_DEPTH",
    "UNLIMITED",
]
