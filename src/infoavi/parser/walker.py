"""Recursive RIFF/AVI chunk walker."""

from __future__ import annotations

import warnings

from infoavi.models import (
    AudioFormat,
    BitmapInfoHeader,
    ChunkHeader,
    ChunkInfo,
    IndexEntry,
    MainHeader,
    MediaSummary,
    RiffHeader,
    StreamHeader,
    WaveFormat,
)

from .base import (
    AVIMAINHEADER_SIZE,
    AVIOLDINDEX_SIZE,
    AVISTREAMHEADER_SIZE,
    BITMAPINFOHEADER_SIZE,
    CHUNK_HEADER_SIZE,
    DEFAULT_ITEM_LIMIT,
    DEFAULT_MAX_DEPTH,
    RIFF_HEADER_SIZE,
    SOFTWARE_TEXT_MAX,
    UNLIMITED,
    WAVEFORMAT_SIZE,
    WAVEFORMATEX_SIZE,
    AviStructureError,
    ByteSource,
    decode_fourcc,
)
from .trace import TraceReporter


class ChunkWalker:
    """Walk the chunk tree of one AVI file.

    The walker owns the cursor and the media summary; both are reset by
    ``run()``, so one instance can be run again on the same source.

    Attributes:
        cursor: Absolute offset of the next byte to consume
        summary: Media characteristics collected so far
        chunks: Chunk headers visited, in file order
        software: Text of the last ``ISFT`` chunk seen
        main_header: Decoded ``avih``, if any
    """

    def __init__(
        self,
        source: ByteSource,
        reporter: TraceReporter | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        name: str = "",
    ):
        self.source = source
        self.reporter = reporter or TraceReporter()
        self.max_depth = max_depth
        self.name = name
        self._reset()

    def _reset(self) -> None:
        self.cursor = 0
        self.summary = MediaSummary()
        self.chunks: list[ChunkInfo] = []
        self.software: str | None = None
        self.main_header: MainHeader | None = None
        self.riff_header: RiffHeader | None = None

    def run(self, item_limit: int = DEFAULT_ITEM_LIMIT) -> MediaSummary:
        """Validate the RIFF header and walk the whole file.

        Args:
            item_limit: Unknown chunks (and idx1 entries) reported per
                limited container, or ``UNLIMITED``

        Returns:
            The populated MediaSummary

        Raises:
            AviStructureError: If the file is not a well-formed AVI file
            AviReadError: If the underlying stream fails
        """
        if item_limit < 1:
            raise ValueError(f"item limit must be positive, got {item_limit}")

        self._reset()
        file_size = self.source.size
        header = RiffHeader.from_bytes(self.source.read_at(0, RIFF_HEADER_SIZE))

        if header.fourcc != "RIFF":
            raise AviStructureError(f"missing RIFF tag (found '{header.fourcc}')")
        if header.size != file_size - 8:
            raise AviStructureError(
                f"RIFF size {header.size} does not match file size {file_size} - 8"
            )
        if header.form_type != "AVI ":
            raise AviStructureError(f"RIFF form type is '{header.form_type}', not 'AVI '")

        self.riff_header = header
        self.reporter.file_begin(self.name, header.size)
        self.cursor = RIFF_HEADER_SIZE
        self.walk(file_size, 1, item_limit)
        self.reporter.file_end(self.name, self.cursor)
        return self.summary

    def walk(self, container_end: int, depth: int, item_limit: int) -> None:
        """Consume chunks from the cursor up to ``container_end``.

        ``item_limit`` bounds how many unknown chunks are reported in this
        container before the rest is skipped.
        """
        if container_end > self.source.size:
            raise AviStructureError(
                f"container end 0x{container_end:08X} is past end of file 0x{self.source.size:08X}"
            )
        if depth > self.max_depth:
            raise AviStructureError(f"chunks nested deeper than {self.max_depth} levels")

        remaining = item_limit

        while self.cursor < container_end:
            offset = self.cursor
            if offset + CHUNK_HEADER_SIZE > container_end:
                raise AviStructureError(f"chunk header at 0x{offset:08X} crosses container end")

            chunk = ChunkHeader.from_bytes(self.source.read_at(offset, CHUNK_HEADER_SIZE))
            self.cursor += CHUNK_HEADER_SIZE
            size = chunk.size
            fourcc = chunk.fourcc
            info = ChunkInfo(fourcc=fourcc, size=size, offset=offset, depth=depth)
            self.chunks.append(info)

            # LIST and idx1 bound themselves by the container end
            if fourcc not in ("LIST", "idx1") and self.cursor + chunk.padded_size > container_end:
                raise AviStructureError(
                    f"'{fourcc}' chunk at 0x{offset:08X} ({size} bytes) overruns its container"
                )

            if fourcc == "LIST":
                self._walk_list(info, container_end, item_limit)
                size = 0
            elif fourcc == "avih" and size == AVIMAINHEADER_SIZE:
                self._read_main_header(info)
            elif fourcc == "strh" and size == AVISTREAMHEADER_SIZE:
                self._read_stream_header(info)
            elif fourcc == "strf":
                self._read_stream_format(info)
            elif fourcc == "idx1":
                self._read_index(info, container_end, item_limit)
                size = 0
            elif fourcc == "ISFT":
                self._read_software(info)
                self.cursor = container_end
                size = 0
            else:
                self.reporter.chunk(offset, depth, fourcc, size)
                if remaining != UNLIMITED:
                    remaining -= 1

            if size & 1:
                size += 1
            self.cursor += size

            if remaining == 0 and self.cursor < container_end:
                self.reporter.truncated(self.cursor, depth, container_end - self.cursor)
                self.cursor = container_end

    def _walk_list(self, info: ChunkInfo, container_end: int, item_limit: int) -> None:
        if info.size < 4:
            raise AviStructureError(f"LIST at 0x{info.offset:08X} is too small ({info.size} bytes)")

        list_end = self.cursor + info.size
        if list_end > container_end:
            raise AviStructureError(f"LIST at 0x{info.offset:08X} overruns its container")

        list_type = decode_fourcc(self.source.read_at(self.cursor, 4))
        info.list_type = list_type
        self.reporter.open(info.offset, info.depth, "LIST", info.size, list_type)
        self.cursor += 4

        if list_type == "movi":
            self.summary.movi_begin = self.cursor
            self.summary.movi_end = list_end
            limit = item_limit
        else:
            limit = UNLIMITED

        self.walk(list_end, info.depth + 1, limit)
        self.reporter.close(info.depth)

    def _read_main_header(self, info: ChunkInfo) -> None:
        avih = MainHeader.from_bytes(self.source.read_at(self.cursor, AVIMAINHEADER_SIZE))
        self.main_header = avih

        self.summary.width = avih.width
        self.summary.height = avih.height
        self.summary.frame_count = avih.total_frames

        self.reporter.open(info.offset, info.depth, info.fourcc, info.size)
        self.reporter.fields(info.depth, avih.trace_fields())
        self.reporter.close(info.depth)

    def _read_stream_header(self, info: ChunkInfo) -> None:
        strh = StreamHeader.from_bytes(self.source.read_at(self.cursor, AVISTREAMHEADER_SIZE))
        summary = self.summary
        # Stream numbers in chunk ids only have two digits
        stream_index = summary.stream & 0x0F

        if strh.fcc_type == "auds":
            summary.audio_buf_size = strh.suggested_buffer_size
            if strh.scale == 0:
                warnings.warn(
                    f"audio stream header at 0x{info.offset:08X} has dwScale 0", stacklevel=2
                )
                summary.sample_rate = 0
            else:
                summary.sample_rate = strh.rate // strh.scale
            summary.sample_count = strh.length
            if not summary.audio_fcc:
                summary.audio_fcc = f"{stream_index:02d}wb"

        elif strh.fcc_type == "vids" and strh.fcc_handler == "MJPG":
            summary.video_buf_size = strh.suggested_buffer_size
            summary.frame_rate = 0 if strh.scale == 0 else strh.rate * 1000 // strh.scale
            summary.video_length = (
                0.0 if summary.frame_rate == 0 else summary.frame_count * 1000 / summary.frame_rate
            )
            if not summary.video_fcc:
                summary.video_fcc = f"{stream_index:02d}dc"

        summary.stream += 1

        self.reporter.open(info.offset, info.depth, info.fourcc, info.size)
        self.reporter.fields(info.depth, strh.trace_fields())
        self.reporter.close(info.depth)

    def _read_stream_format(self, info: ChunkInfo) -> None:
        if info.size == BITMAPINFOHEADER_SIZE:
            strf = BitmapInfoHeader.from_bytes(
                self.source.read_at(self.cursor, BITMAPINFOHEADER_SIZE)
            )
            self.reporter.open(info.offset, info.depth, info.fourcc, info.size)
            self.reporter.fields(info.depth, strf.trace_fields())
            self.reporter.close(info.depth)
            return

        read_size = min(info.size, WAVEFORMATEX_SIZE)
        wave = WaveFormat.from_bytes(self.source.read_at(self.cursor, read_size))

        if read_size == WAVEFORMAT_SIZE:
            # Legacy WAVEFORMAT has no wBitsPerSample
            if wave.samples_per_sec == 0 or wave.channels == 0:
                warnings.warn(
                    f"wave format at 0x{info.offset:08X} has no sample rate or channels",
                    stacklevel=2,
                )
                wave.bits_per_sample = 0
            else:
                wave.bits_per_sample = (
                    8 * wave.avg_bytes_per_sec // wave.samples_per_sec // wave.channels
                )

        audio_fmt = AudioFormat.from_format_tag(wave.format_tag)
        self.summary.audio_fmt = audio_fmt
        self.summary.audio_chan = wave.channels
        self.summary.sample_depth = wave.bits_per_sample

        self.reporter.open(info.offset, info.depth, info.fourcc, info.size)
        self.reporter.fields(info.depth, wave.trace_fields(audio_fmt.description))
        self.reporter.close(info.depth)

    def _read_index(self, info: ChunkInfo, container_end: int, item_limit: int) -> None:
        if info.size % 4:
            raise AviStructureError(
                f"idx1 size {info.size} at 0x{info.offset:08X} is not a multiple of 4"
            )

        self.summary.idx1_begin = self.cursor
        self.summary.idx1_end = self.cursor + info.size
        self.reporter.open(info.offset, info.depth, info.fourcc, info.size)

        declared = info.size // AVIOLDINDEX_SIZE
        count = declared if item_limit == UNLIMITED else min(declared, item_limit)
        frame = 0
        read = 0

        while read < count and self.cursor + AVIOLDINDEX_SIZE <= container_end:
            entry = IndexEntry.from_bytes(self.source.read_at(self.cursor, AVIOLDINDEX_SIZE))
            number = None
            if entry.chunk_id == self.summary.video_fcc:
                frame += 1
                number = frame
            self.reporter.index_entry(
                self.cursor, info.depth, entry.chunk_id, entry.offset, entry.size, number
            )
            self.cursor += AVIOLDINDEX_SIZE
            read += 1

        if read == count < declared and self.cursor < container_end:
            self.reporter.truncated(
                self.cursor, info.depth, container_end - self.cursor, nested=True
            )

        self.reporter.close(info.depth)
        self.cursor = container_end

    def _read_software(self, info: ChunkInfo) -> None:
        raw = self.source.read_at(self.cursor, min(info.size, SOFTWARE_TEXT_MAX))
        text = raw.split(b"\0", 1)[0].decode("latin-1")
        self.software = text
        self.reporter.text(info.offset, info.depth, info.fourcc, text)
