"""Tests for the RIFF/AVI chunk walker."""

import io
import struct

import pytest

from avi_factory import (
    avi_file,
    avih,
    bitmap_info,
    chunk,
    index_entry,
    raw_chunk,
    riff_list,
    strh,
    walk_bytes,
    wave_format,
)
from infoavi.models import AudioFormat
from infoavi.parser import UNLIMITED, AviReadError, AviStructureError, ByteSource, TraceReporter
from infoavi.parser.walker import ChunkWalker


def stream_list(*children: bytes) -> bytes:
    return riff_list(b"hdrl", *children)


class TestContainerValidation:
    """Test the top-level RIFF header checks."""

    def test_accepts_size_equal_to_file_length_minus_8(self):
        """Test a 108-byte file declaring 100 bytes is accepted."""
        data = avi_file(chunk(b"JUNK", bytes(88)))
        assert len(data) == 108
        assert struct.unpack_from("<I", data, 4)[0] == 100

        walker, _ = walk_bytes(data)
        assert walker.cursor == 108
        assert walker.riff_header.size == 100

    def test_rejects_wrong_tag(self):
        data = b"RIFX" + avi_file(chunk(b"JUNK", bytes(4)))[4:]
        with pytest.raises(AviStructureError, match="RIFF"):
            walk_bytes(data)

    def test_rejects_size_mismatch(self):
        """Test a declared size that does not match the file length."""
        data = avi_file(chunk(b"JUNK", bytes(4))) + b"\0\0"
        out = io.StringIO()
        walker = ChunkWalker(ByteSource.from_bytes(data), reporter=TraceReporter(out))
        with pytest.raises(AviStructureError, match="does not match"):
            walker.run()
        assert out.getvalue() == ""

    def test_rejects_other_form_type(self):
        data = avi_file(chunk(b"fmt ", bytes(16)), form_type=b"WAVE")
        with pytest.raises(AviStructureError, match="form type"):
            walk_bytes(data)

    def test_short_file_is_read_error(self):
        with pytest.raises(AviReadError):
            walk_bytes(b"RIFF\x04\0")

    def test_stream_failure_is_read_error(self):
        """Test OSError from the stream surfaces as AviReadError."""

        class BrokenStream(io.BytesIO):
            def read(self, *args):
                raise OSError("device error")

        data = avi_file(chunk(b"JUNK", bytes(4)))
        walker = ChunkWalker(ByteSource(BrokenStream(data), len(data)))
        with pytest.raises(AviReadError, match="device error"):
            walker.run()

    def test_invalid_item_limit(self, sample_bytes):
        walker = ChunkWalker(ByteSource.from_bytes(sample_bytes))
        with pytest.raises(ValueError):
            walker.run(0)


class TestSampleFile:
    """Test a complete MJPEG + PCM file."""

    def test_summary(self, sample_bytes):
        walker, _ = walk_bytes(sample_bytes)
        s = walker.summary

        assert s.width == 320
        assert s.height == 240
        assert s.frame_count == 3
        assert s.stream == 2
        assert s.frame_rate == 25000
        assert s.frame_rate_hz == 25.0
        assert s.video_length == pytest.approx(0.12)
        assert s.video_buf_size == 32768
        assert s.video_fcc == "00dc"
        assert s.audio_buf_size == 4096
        assert s.sample_rate == 44100
        assert s.sample_count == 44100
        assert s.audio_fcc == "01wb"
        assert s.audio_fmt == AudioFormat.PCM
        assert s.audio_chan == 2
        assert s.sample_depth == 16

    def test_data_ranges(self, sample_bytes):
        walker, _ = walk_bytes(sample_bytes)
        s = walker.summary

        assert s.movi_begin == sample_bytes.index(b"movi") + 4
        assert s.movi_end == sample_bytes.index(b"idx1")
        assert s.idx1_begin == sample_bytes.index(b"idx1") + 8
        assert s.idx1_end == len(sample_bytes)

    def test_cursor_ends_at_file_size(self, sample_bytes):
        walker, _ = walk_bytes(sample_bytes)
        assert walker.cursor == len(sample_bytes)

    def test_walk_is_repeatable(self, sample_bytes):
        """Test running the same walker twice gives identical results."""
        walker = ChunkWalker(ByteSource.from_bytes(sample_bytes))
        first = walker.run().model_copy(deep=True)
        first_chunks = list(walker.chunks)
        second = walker.run()

        assert first == second
        assert first_chunks == walker.chunks

    def test_chunk_records(self, sample_bytes):
        walker, _ = walk_bytes(sample_bytes)
        first = walker.chunks[0]

        assert first.fourcc == "LIST"
        assert first.list_type == "hdrl"
        assert first.offset == 12
        assert first.depth == 1
        assert walker.chunks[1].fourcc == "avih"
        assert walker.chunks[1].depth == 2

    def test_main_header_kept(self, sample_bytes):
        walker, _ = walk_bytes(sample_bytes)
        assert walker.main_header is not None
        assert walker.main_header.has_index is True

    def test_software_text(self, sample_bytes):
        walker, _ = walk_bytes(sample_bytes)
        assert walker.software == "Lavf58.76.100"

    def test_index_frames_numbered(self, sample_bytes):
        _, trace = walk_bytes(sample_bytes)
        assert "#1" in trace
        assert "#3" in trace
        assert "#4" not in trace
        assert " .... " not in trace

    def test_trace_content(self, sample_bytes):
        _, trace = walk_bytes(sample_bytes)
        assert 'Reading file "test.avi"' in trace
        assert "'LIST' ('hdrl' " in trace
        assert "dwWidth = 320" in trace
        assert "dwFlags = 0x10 (has index)" in trace
        assert "biCompression = 1196444237 ('MJPG')" in trace
        assert "wFormatTag = 1 (PCM signed integer format)" in trace
        assert f'{len(sample_bytes):08X} End of file "test.avi"' in trace


class TestPadding:
    """Test RIFF 2-byte alignment."""

    def test_odd_payload_skips_pad_byte(self):
        data = avi_file(chunk(b"JUNK", bytes(5)), chunk(b"JUNK", bytes(2)))
        walker, _ = walk_bytes(data)
        assert walker.chunks[1].offset == 12 + 8 + 5 + 1
        assert walker.cursor == len(data)

    def test_even_payload_has_no_pad(self):
        data = avi_file(chunk(b"JUNK", bytes(4)), chunk(b"JUNK", bytes(2)))
        walker, _ = walk_bytes(data)
        assert walker.chunks[1].offset == 12 + 8 + 4

    def test_missing_final_pad_byte(self):
        """Test an odd last chunk without its pad byte overruns the file."""
        data = avi_file(raw_chunk(b"JUNK", 3, bytes(3)))
        with pytest.raises(AviStructureError, match="overruns"):
            walk_bytes(data)


class TestItemLimit:
    """Test truncation of unknown chunks."""

    def movi_file(self, count: int) -> bytes:
        return avi_file(riff_list(b"movi", *[chunk(b"00dc", bytes(4)) for _ in range(count)]))

    def test_movi_truncated_after_limit(self):
        """Test the third chunk of movi is skipped with limit 2."""
        data = self.movi_file(3)
        walker, trace = walk_bytes(data, item_limit=2)

        assert [c.fourcc for c in walker.chunks].count("00dc") == 2
        assert "00000030 \t\t .... 12" in trace
        assert walker.cursor == len(data)

    def test_movi_range(self):
        data = self.movi_file(3)
        walker, _ = walk_bytes(data, item_limit=2)

        assert walker.summary.movi_begin == 24
        assert walker.summary.movi_end == 24 + 40 - 4

    def test_no_marker_when_limit_reached_at_end(self):
        walker, trace = walk_bytes(self.movi_file(2), item_limit=2)
        assert [c.fourcc for c in walker.chunks].count("00dc") == 2
        assert " .... " not in trace

    def test_unlimited(self):
        walker, trace = walk_bytes(self.movi_file(30), item_limit=UNLIMITED)
        assert [c.fourcc for c in walker.chunks].count("00dc") == 30
        assert " .... " not in trace

    def test_other_lists_are_not_limited(self):
        data = avi_file(riff_list(b"rec ", *[chunk(b"JUNK", bytes(2)) for _ in range(5)]))
        walker, trace = walk_bytes(data, item_limit=2)
        assert [c.fourcc for c in walker.chunks].count("JUNK") == 5
        assert " .... " not in trace

    def test_top_level_is_limited(self):
        data = avi_file(*[chunk(b"JUNK", bytes(2)) for _ in range(3)])
        walker, trace = walk_bytes(data, item_limit=2)
        assert [c.fourcc for c in walker.chunks].count("JUNK") == 2
        assert " .... 10" in trace
        assert walker.cursor == len(data)

    def test_limit_is_per_container(self):
        """Test each movi list gets its own count."""
        movi = riff_list(b"movi", *[chunk(b"00dc", bytes(2)) for _ in range(2)])
        data = avi_file(riff_list(b"rec ", movi, movi))
        walker, trace = walk_bytes(data, item_limit=2)
        assert [c.fourcc for c in walker.chunks].count("00dc") == 4
        assert " .... " not in trace


class TestStreamHeader:
    """Test strh decoding into the summary."""

    def test_audio_stream(self):
        data = avi_file(stream_list(riff_list(b"strl", chunk(b"strh", strh(b"auds", b"\0\0\0\0", rate=44100, scale=1)))))
        walker, _ = walk_bytes(data)

        assert walker.summary.sample_rate == 44100
        assert walker.summary.audio_fcc == "00wb"
        assert walker.summary.stream == 1

    def test_audio_rate_uses_integer_division(self):
        data = avi_file(chunk(b"strh", strh(b"auds", b"\0\0\0\0", rate=44100, scale=4)))
        walker, _ = walk_bytes(data)
        assert walker.summary.sample_rate == 11025

    def test_fourcc_assigned_once(self):
        """Test a second audio stream does not overwrite the audio code."""
        audio = riff_list(b"strl", chunk(b"strh", strh(b"auds", b"\0\0\0\0", rate=8000)))
        data = avi_file(stream_list(audio, audio))
        walker, _ = walk_bytes(data)

        assert walker.summary.audio_fcc == "00wb"
        assert walker.summary.sample_rate == 8000
        assert walker.summary.stream == 2

    def test_video_fourcc_assigned_once(self):
        """Test a second MJPG video stream does not overwrite the video code."""
        video = riff_list(b"strl", chunk(b"strh", strh()))
        walker, _ = walk_bytes(avi_file(stream_list(video, video)))

        assert walker.summary.video_fcc == "00dc"
        assert walker.summary.stream == 2

    def test_video_code_uses_stream_index(self):
        audio = riff_list(b"strl", chunk(b"strh", strh(b"auds", b"\0\0\0\0", rate=8000)))
        video = riff_list(b"strl", chunk(b"strh", strh()))
        walker, _ = walk_bytes(avi_file(stream_list(audio, video)))

        assert walker.summary.audio_fcc == "00wb"
        assert walker.summary.video_fcc == "01dc"

    def test_video_rate_and_length(self):
        data = avi_file(
            stream_list(
                chunk(b"avih", avih(total_frames=250)),
                riff_list(b"strl", chunk(b"strh", strh(rate=30000, scale=1001))),
            )
        )
        walker, _ = walk_bytes(data)

        assert walker.summary.frame_rate == 29970
        assert walker.summary.video_length == pytest.approx(250 * 1000 / 29970)

    def test_video_zero_scale(self):
        data = avi_file(stream_list(chunk(b"avih", avih()), chunk(b"strh", strh(scale=0))))
        walker, _ = walk_bytes(data)

        assert walker.summary.frame_rate == 0
        assert walker.summary.video_length == 0.0
        assert walker.summary.video_fcc == "00dc"

    def test_audio_zero_scale(self):
        data = avi_file(chunk(b"strh", strh(b"auds", b"\0\0\0\0", scale=0)))
        with pytest.warns(UserWarning, match="dwScale"):
            walker, _ = walk_bytes(data)
        assert walker.summary.sample_rate == 0

    def test_non_mjpeg_video_only_counted(self):
        walker, _ = walk_bytes(avi_file(chunk(b"strh", strh(handler=b"XVID"))))

        assert walker.summary.stream == 1
        assert walker.summary.video_fcc == ""
        assert walker.summary.video_buf_size == 0
        assert walker.summary.frame_rate == 0

    def test_other_stream_type_counted(self):
        walker, _ = walk_bytes(avi_file(chunk(b"strh", strh(b"txts", b"\0\0\0\0"))))
        assert walker.summary.stream == 1
        assert walker.summary.audio_fcc == ""

    def test_unexpected_size_is_unknown_chunk(self):
        walker, trace = walk_bytes(avi_file(chunk(b"strh", strh()[:48])))
        assert walker.summary.stream == 0
        assert "'strh' 48" in trace


class TestStreamFormat:
    """Test strf decoding."""

    def test_bitmap_format_leaves_audio_alone(self):
        walker, trace = walk_bytes(avi_file(chunk(b"strf", bitmap_info(height=-240))))

        assert walker.summary.audio_fmt == AudioFormat.UNKNOWN
        assert walker.summary.audio_chan == 0
        assert "biHeight = -240" in trace

    def test_extended_wave_format(self):
        walker, _ = walk_bytes(avi_file(chunk(b"strf", wave_format())))

        assert walker.summary.audio_fmt == AudioFormat.PCM
        assert walker.summary.audio_chan == 2
        assert walker.summary.sample_depth == 16

    def test_legacy_wave_format_derives_depth(self):
        data = avi_file(chunk(b"strf", wave_format(avg_bytes_per_sec=88200, bits_per_sample=0, size=14)))
        walker, _ = walk_bytes(data)
        assert walker.summary.sample_depth == 8

    def test_legacy_wave_format_zero_channels(self):
        data = avi_file(chunk(b"strf", wave_format(channels=0, size=14)))
        with pytest.warns(UserWarning, match="no sample rate or channels"):
            walker, _ = walk_bytes(data)
        assert walker.summary.sample_depth == 0

    def test_pcm_wave_format(self):
        walker, _ = walk_bytes(avi_file(chunk(b"strf", wave_format(bits_per_sample=8, size=16))))
        assert walker.summary.sample_depth == 8

    def test_oversized_wave_format(self):
        data = avi_file(chunk(b"strf", wave_format(format_tag=0x11, bits_per_sample=4, cb_size=2, size=20)))
        walker, _ = walk_bytes(data)

        assert walker.summary.audio_fmt == AudioFormat.IMA_ADPCM
        assert walker.summary.sample_depth == 4
        assert walker.cursor == len(data)

    @pytest.mark.parametrize(
        "tag,expected",
        [
            (0x01, AudioFormat.PCM),
            (0x07, AudioFormat.MULAW),
            (0x11, AudioFormat.IMA_ADPCM),
            (0x55, AudioFormat.UNKNOWN),
        ],
    )
    def test_format_tags(self, tag, expected):
        walker, _ = walk_bytes(avi_file(chunk(b"strf", wave_format(format_tag=tag))))
        assert walker.summary.audio_fmt == expected


class TestIndex:
    """Test idx1 scanning."""

    def index_file(self, count: int) -> bytes:
        entries = b"".join(index_entry(b"00dc", 4 + i * 16, 8) for i in range(count))
        return avi_file(chunk(b"idx1", entries))

    def test_limit_truncates_entries(self):
        """Test 9 entries with limit 5: 5 listed, the rest marked."""
        data = self.index_file(9)
        walker, trace = walk_bytes(data, item_limit=5)

        assert trace.count("'00dc' +") == 5
        assert "00000064 \t\t .... 64" in trace
        assert walker.cursor == len(data)

    def test_index_range(self):
        data = self.index_file(9)
        walker, _ = walk_bytes(data, item_limit=5)

        assert walker.summary.idx1_begin == 20
        assert walker.summary.idx1_end == 20 + 9 * 16

    def test_all_entries_within_limit(self):
        data = self.index_file(4)
        _, trace = walk_bytes(data, item_limit=5)

        assert trace.count("'00dc' +") == 4
        assert " .... " not in trace

    def test_unlimited(self):
        _, trace = walk_bytes(self.index_file(40), item_limit=UNLIMITED)
        assert trace.count("'00dc' +") == 40

    def test_size_must_be_multiple_of_4(self):
        with pytest.raises(AviStructureError, match="multiple of 4"):
            walk_bytes(avi_file(chunk(b"idx1", bytes(18))))

    def test_scan_stops_at_container_end(self):
        """Test a declared size larger than the container is not followed."""
        entries = b"".join(index_entry(b"00dc", 0, 8) for _ in range(2))
        data = avi_file(riff_list(b"rec ", raw_chunk(b"idx1", 64, entries)))
        walker, trace = walk_bytes(data)

        assert trace.count("'00dc' +") == 2
        assert walker.summary.idx1_end == walker.summary.idx1_begin + 64
        assert walker.cursor == len(data)

    def test_index_ends_its_container(self):
        """Test chunks after idx1 in the same container are not visited."""
        data = avi_file(chunk(b"idx1", index_entry(b"00dc", 4, 8)), chunk(b"JUNK", bytes(4)))
        walker, _ = walk_bytes(data)

        assert "JUNK" not in [c.fourcc for c in walker.chunks]
        assert walker.cursor == len(data)


class TestSoftwareTag:
    """Test ISFT handling."""

    def test_skips_rest_of_container(self):
        info = riff_list(b"INFO", chunk(b"ISFT", b"x264\0"), chunk(b"IART", b"someone\0"))
        data = avi_file(info, chunk(b"JUNK", bytes(2)))
        walker, trace = walk_bytes(data)

        assert walker.software == "x264"
        assert "IART" not in [c.fourcc for c in walker.chunks]
        assert "JUNK" in [c.fourcc for c in walker.chunks]
        assert "'ISFT' x264" in trace

    def test_long_text_truncated(self):
        walker, _ = walk_bytes(avi_file(chunk(b"ISFT", b"A" * 200)))
        assert walker.software == "A" * 127


class TestStructureErrors:
    """Test structural violations abort the walk."""

    def test_nesting_bound(self):
        nested = chunk(b"JUNK", bytes(2))
        for _ in range(5):
            nested = riff_list(b"rec ", nested)
        data = avi_file(nested)

        with pytest.raises(AviStructureError, match="nested deeper"):
            walk_bytes(data, max_depth=3)
        walker, _ = walk_bytes(data, max_depth=6)
        assert walker.cursor == len(data)

    def test_list_too_small(self):
        with pytest.raises(AviStructureError, match="too small"):
            walk_bytes(avi_file(raw_chunk(b"LIST", 2, b"ab")))

    def test_list_overruns_parent(self):
        data = avi_file(riff_list(b"hdrl", raw_chunk(b"LIST", 100, b"strl")))
        with pytest.raises(AviStructureError, match="overruns"):
            walk_bytes(data)

    def test_chunk_overruns_file(self):
        with pytest.raises(AviStructureError, match="overruns"):
            walk_bytes(avi_file(raw_chunk(b"JUNK", 100, bytes(10))))

    def test_header_crosses_container_end(self):
        data = avi_file(chunk(b"JUNK", bytes(2)), b"abcd")
        with pytest.raises(AviStructureError, match="crosses"):
            walk_bytes(data)

    def test_container_past_end_of_file(self, sample_bytes):
        walker = ChunkWalker(ByteSource.from_bytes(sample_bytes))
        walker.cursor = 12
        with pytest.raises(AviStructureError, match="past end of file"):
            walker.walk(len(sample_bytes) + 10, 1, 20)
