"""Quiet output formatter - one-line summary."""

from infoavi.models import AviReport


def format_quiet(report: AviReport) -> str:
    """Format a report as one-line summary.

    Format: filename | duration | resolution @ fps | audio | streams
    """
    s = report.summary
    parts = []

    parts.append(report.filename)
    parts.append(f"{s.video_length:.2f}s")

    if s.resolution:
        parts.append(f"{s.resolution} @ {s.frame_rate_hz:.3f} Hz")
    else:
        parts.append("N/A")

    if s.sample_rate:
        parts.append(f"audio {s.sample_rate} Hz {s.audio_chan}ch {s.sample_depth}bit")
    else:
        parts.append("no audio")

    parts.append(f"{s.stream} stream(s)")

    return " | ".join(parts)
