"""Default output formatter - summary block of one AVI file."""

from infoavi.models import AviReport


def format_default(report: AviReport) -> str:
    """Format the media summary as a labelled block.

    Offsets are printed in hex, the frame rate in Hz with three decimals
    and the video length in seconds with two.
    """
    s = report.summary
    lines = []

    lines.append("")
    lines.append(f'AviInfo "{report.name or report.path}"')
    lines.append("{")
    lines.append(f"  Width = {s.width}")
    lines.append(f"  Height = {s.height}")
    lines.append(f"  Stream = {s.stream}")
    lines.append(f"  AudioFmt = {int(s.audio_fmt)} ({s.audio_fmt.description})")
    lines.append(f"  AudioChan = {s.audio_chan}")
    lines.append(f"  SampleDepth = {s.sample_depth} bits")
    lines.append(f"  SampleRate  = {s.sample_rate} Hz")
    lines.append(f"  SampleCount = {s.sample_count}")
    lines.append(f"  AudioBufSize = {s.audio_buf_size} bytes")
    lines.append(f"  VideoBufSize = {s.video_buf_size} bytes")
    lines.append(f"  VideoLength  = {s.video_length:.2f} sec")
    lines.append(f"  FrameRate  = {s.frame_rate_hz:.3f} Hz")
    lines.append(f"  FrameCount = {s.frame_count}")
    lines.append(f"  MoviBegin = 0x{s.movi_begin:08X}")
    lines.append(f"  MoviEnd   = 0x{s.movi_end:08X}")
    lines.append(f"  Idx1Begin = 0x{s.idx1_begin:08X}")
    lines.append(f"  Idx1End   = 0x{s.idx1_end:08X}")
    lines.append(f"  VideoFcc = '{s.video_fcc}'")
    lines.append(f"  AudioFcc = '{s.audio_fcc}'")

    # Extras not part of the summary record
    if report.software:
        lines.append(f"  Software = '{report.software}'")
    lines.append("}")

    return "\n".join(lines)
