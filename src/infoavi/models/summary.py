"""Media summary accumulated while walking an AVI file."""

from enum import IntEnum

from pydantic import BaseModel


class AudioFormat(IntEnum):
    """Audio coding of the wave format chunk."""

    UNKNOWN = 0
    PCM = 1
    MULAW = 2
    IMA_ADPCM = 3

    @property
    def description(self) -> str:
        return AUDIO_FORMAT_NAMES[self]

    @classmethod
    def from_format_tag(cls, tag: int) -> "AudioFormat":
        """Map a ``wFormatTag`` value to a known format."""
        return FORMAT_TAGS.get(tag, cls.UNKNOWN)


AUDIO_FORMAT_NAMES = {
    AudioFormat.UNKNOWN: "Unknown format",
    AudioFormat.PCM: "PCM signed integer format",
    AudioFormat.MULAW: "Mu-law encoded format",
    AudioFormat.IMA_ADPCM: "IMA ADPCM format",
}

# wFormatTag values
FORMAT_TAGS = {
    0x01: AudioFormat.PCM,
    0x07: AudioFormat.MULAW,
    0x11: AudioFormat.IMA_ADPCM,
}


class MediaSummary(BaseModel):
    """Summary of one AVI file.

    Sizes are in bytes, offsets are absolute file offsets and ranges are
    half-open. ``frame_rate`` is stored in thousandths of a Hz.
    """

    width: int = 0
    height: int = 0
    stream: int = 0
    audio_fmt: AudioFormat = AudioFormat.UNKNOWN
    audio_chan: int = 0
    sample_depth: int = 0
    sample_rate: int = 0
    sample_count: int = 0
    audio_buf_size: int = 0
    video_buf_size: int = 0
    video_length: float = 0.0
    frame_rate: int = 0
    frame_count: int = 0
    movi_begin: int = 0
    movi_end: int = 0
    idx1_begin: int = 0
    idx1_end: int = 0
    video_fcc: str = ""
    audio_fcc: str = ""

    @property
    def frame_rate_hz(self) -> float:
        """Frame rate in Hz."""
        return self.frame_rate / 1000.0

    @property
    def resolution(self) -> str | None:
        """Return resolution as WxH string."""
        if self.width and self.height:
            return f"{self.width}x{self.height}"
        return None
