"""Fixed-layout AVI structures.

Every structure is decoded field by field with explicit little-endian
``struct`` formats, so the result does not depend on host packing or byte
order. Field names follow the Video for Windows documentation in
snake_case; ``trace_fields()`` returns the documented names for display.
"""

from __future__ import annotations

import struct
from typing import ClassVar

from pydantic import BaseModel, Field

from infoavi.parser.base import WAVEFORMATEX_SIZE, AviStructureError, decode_fourcc

# avih.dwFlags bits
AVIF_HASINDEX = 0x00000010
AVIF_MUSTUSEINDEX = 0x00000020
AVIF_ISINTERLEAVED = 0x00000100
AVIF_TRUSTCKTYPE = 0x00000800
AVIF_WASCAPTUREFILE = 0x00010000
AVIF_COPYRIGHTED = 0x00020000

AVIF_NAMES = {
    AVIF_HASINDEX: "has index",
    AVIF_MUSTUSEINDEX: "must use index",
    AVIF_ISINTERLEAVED: "interleaved",
    AVIF_TRUSTCKTYPE: "trust chunk type",
    AVIF_WASCAPTUREFILE: "capture file",
    AVIF_COPYRIGHTED: "copyrighted",
}


def _unpack(layout: struct.Struct, data: bytes, name: str) -> tuple:
    if len(data) < layout.size:
        raise AviStructureError(f"{name} needs {layout.size} bytes, got {len(data)}")
    return layout.unpack_from(data)


class RiffHeader(BaseModel):
    """Leading ``RIFF`` form header."""

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<4sI4s")

    fourcc: str
    size: int
    form_type: str

    @classmethod
    def from_bytes(cls, data: bytes) -> RiffHeader:
        fourcc, size, form_type = _unpack(cls.LAYOUT, data, "RIFF header")
        return cls(fourcc=decode_fourcc(fourcc), size=size, form_type=decode_fourcc(form_type))


class ChunkHeader(BaseModel):
    """Tag and declared payload size of a chunk."""

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<4sI")

    fourcc: str
    size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> ChunkHeader:
        fourcc, size = _unpack(cls.LAYOUT, data, "chunk header")
        return cls(fourcc=decode_fourcc(fourcc), size=size)

    @property
    def padded_size(self) -> int:
        """Payload size including the RIFF alignment byte."""
        return self.size + (self.size & 1)


class MainHeader(BaseModel):
    """``avih`` main AVI header."""

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<14I")

    micro_sec_per_frame: int
    max_bytes_per_sec: int
    padding_granularity: int
    flags: int
    total_frames: int
    initial_frames: int
    streams: int
    suggested_buffer_size: int
    width: int
    height: int
    reserved: tuple[int, int, int, int] = (0, 0, 0, 0)

    @classmethod
    def from_bytes(cls, data: bytes) -> MainHeader:
        values = _unpack(cls.LAYOUT, data, "avih")
        return cls(
            micro_sec_per_frame=values[0],
            max_bytes_per_sec=values[1],
            padding_granularity=values[2],
            flags=values[3],
            total_frames=values[4],
            initial_frames=values[5],
            streams=values[6],
            suggested_buffer_size=values[7],
            width=values[8],
            height=values[9],
            reserved=values[10:14],
        )

    @property
    def has_index(self) -> bool:
        return bool(self.flags & AVIF_HASINDEX)

    @property
    def flag_names(self) -> list[str]:
        """Names of the known flag bits that are set."""
        return [name for bit, name in AVIF_NAMES.items() if self.flags & bit]

    def trace_fields(self) -> list[tuple[str, str]]:
        flags = f"0x{self.flags:x}"
        if self.flag_names:
            flags += f" ({', '.join(self.flag_names)})"
        return [
            ("dwMicroSecPerFrame", str(self.micro_sec_per_frame)),
            ("dwMaxBytesPerSec", str(self.max_bytes_per_sec)),
            ("dwPaddingGranularity", str(self.padding_granularity)),
            ("dwFlags", flags),
            ("dwTotalFrames", str(self.total_frames)),
            ("dwInitialFrames", str(self.initial_frames)),
            ("dwStreams", str(self.streams)),
            ("dwSuggestedBufferSize", str(self.suggested_buffer_size)),
            ("dwWidth", str(self.width)),
            ("dwHeight", str(self.height)),
        ]


class FrameRect(BaseModel):
    """Signed 16-bit destination rectangle of a stream."""

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0


class StreamHeader(BaseModel):
    """``strh`` stream header."""

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<4s4sIHHIIIIIIII4h")

    fcc_type: str
    fcc_handler: str
    flags: int
    priority: int
    language: int
    initial_frames: int
    scale: int
    rate: int
    start: int
    length: int
    suggested_buffer_size: int
    quality: int
    sample_size: int
    frame: FrameRect = Field(default_factory=FrameRect)

    @classmethod
    def from_bytes(cls, data: bytes) -> StreamHeader:
        values = _unpack(cls.LAYOUT, data, "strh")
        left, top, right, bottom = values[13:17]
        return cls(
            fcc_type=decode_fourcc(values[0]),
            fcc_handler=decode_fourcc(values[1]),
            flags=values[2],
            priority=values[3],
            language=values[4],
            initial_frames=values[5],
            scale=values[6],
            rate=values[7],
            start=values[8],
            length=values[9],
            suggested_buffer_size=values[10],
            quality=values[11],
            sample_size=values[12],
            frame=FrameRect(left=left, top=top, right=right, bottom=bottom),
        )

    def trace_fields(self) -> list[tuple[str, str]]:
        return [
            ("fccType", f'"{self.fcc_type}"'),
            ("fccHandler", f'"{self.fcc_handler}"'),
            ("dwFlags", f"0x{self.flags:x}"),
            ("wPriority", str(self.priority)),
            ("wLanguage", str(self.language)),
            ("dwInitialFrames", str(self.initial_frames)),
            ("dwScale", str(self.scale)),
            ("dwRate", str(self.rate)),
            ("dwStart", str(self.start)),
            ("dwLength", str(self.length)),
            ("dwSuggestedBufferSize", str(self.suggested_buffer_size)),
            ("dwQuality", str(self.quality)),
            ("dwSampleSize", str(self.sample_size)),
            ("rcFrame.left", str(self.frame.left)),
            ("rcFrame.top", str(self.frame.top)),
            ("rcFrame.right", str(self.frame.right)),
            ("rcFrame.bottom", str(self.frame.bottom)),
        ]


class BitmapInfoHeader(BaseModel):
    """``strf`` payload of a video stream."""

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IiiHHIIiiII")

    size: int
    width: int
    height: int
    planes: int
    bit_count: int
    compression: int
    size_image: int
    x_pels_per_meter: int
    y_pels_per_meter: int
    clr_used: int
    clr_important: int

    @classmethod
    def from_bytes(cls, data: bytes) -> BitmapInfoHeader:
        values = _unpack(cls.LAYOUT, data, "strf (video)")
        return cls(**dict(zip(cls.model_fields, values)))

    @property
    def compression_fourcc(self) -> str:
        """``biCompression`` viewed as a four-character code."""
        return decode_fourcc(struct.pack("<I", self.compression))

    def trace_fields(self) -> list[tuple[str, str]]:
        return [
            ("biSize", str(self.size)),
            ("biWidth", str(self.width)),
            ("biHeight", str(self.height)),
            ("biPlanes", str(self.planes)),
            ("biBitCount", str(self.bit_count)),
            ("biCompression", f"{self.compression} ('{self.compression_fourcc}')"),
            ("biSizeImage", str(self.size_image)),
            ("biXPelsPerMeter", str(self.x_pels_per_meter)),
            ("biYPelsPerMeter", str(self.y_pels_per_meter)),
            ("biClrUsed", str(self.clr_used)),
            ("biClrImportant", str(self.clr_important)),
        ]


class WaveFormat(BaseModel):
    """``strf`` payload of an audio stream (WAVEFORMAT / WAVEFORMATEX).

    The declared chunk may be shorter than the extended layout: the legacy
    14-byte form has neither ``wBitsPerSample`` nor ``cbSize``. Fields not
    covered by the bytes read are zero.
    """

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<HHIIHHH")

    format_tag: int = 0
    channels: int = 0
    samples_per_sec: int = 0
    avg_bytes_per_sec: int = 0
    block_align: int = 0
    bits_per_sample: int = 0
    cb_size: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> WaveFormat:
        if len(data) > WAVEFORMATEX_SIZE:
            data = data[:WAVEFORMATEX_SIZE]
        values = cls.LAYOUT.unpack(data.ljust(WAVEFORMATEX_SIZE, b"\0"))
        return cls(**dict(zip(cls.model_fields, values)))

    def trace_fields(self, format_name: str) -> list[tuple[str, str]]:
        return [
            ("wFormatTag", f"{self.format_tag} ({format_name})"),
            ("nChannels", str(self.channels)),
            ("nSamplesPerSec", str(self.samples_per_sec)),
            ("nAvgBytesPerSec", str(self.avg_bytes_per_sec)),
            ("nBlockAlign", str(self.block_align)),
            ("wBitsPerSample", str(self.bits_per_sample)),
        ]


class IndexEntry(BaseModel):
    """One ``idx1`` entry."""

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<4sIII")

    chunk_id: str
    flags: int
    offset: int
    size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> IndexEntry:
        chunk_id, flags, offset, size = _unpack(cls.LAYOUT, data, "idx1 entry")
        return cls(chunk_id=decode_fourcc(chunk_id), flags=flags, offset=offset, size=size)

