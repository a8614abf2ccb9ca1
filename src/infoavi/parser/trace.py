"""Line-oriented trace of the chunk walk.

Every line that refers to a file position starts with the offset as eight
hex digits. Nested elements are indented with one tab per level.
"""

from __future__ import annotations

from typing import TextIO

MAX_INDENT = 10


class TraceReporter:
    """Write the walk trace to a text stream.

    Args:
        stream: Destination (``None`` disables output)
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    @property
    def enabled(self) -> bool:
        return self.stream is not None

    def write(self, line: str = "") -> None:
        if self.stream is not None:
            self.stream.write(line + "\n")

    @staticmethod
    def indent(depth: int) -> str:
        return "\t" * min(depth, MAX_INDENT)

    @staticmethod
    def address(offset: int) -> str:
        return f"{offset:08X} "

    def file_begin(self, name: str, size: int) -> None:
        self.write()
        self.write(f'Reading file "{name}"')
        self.write(f"{self.address(0)}'RIFF' ('AVI ' {size}")

    def file_end(self, name: str, offset: int) -> None:
        self.write(f'{self.address(offset)}End of file "{name}"')

    def chunk(self, offset: int, depth: int, fourcc: str, size: int) -> None:
        """A chunk reported by size only."""
        self.write(f"{self.address(offset)}{self.indent(depth)}'{fourcc}' {size}")

    def open(self, offset: int, depth: int, fourcc: str, size: int, list_type: str | None = None) -> None:
        """Start of a LIST or of a decoded structure."""
        kind = f"'{list_type}' " if list_type is not None else ""
        self.write(f"{self.address(offset)}{self.indent(depth)}'{fourcc}' ({kind}{size}")

    def close(self, depth: int) -> None:
        self.write(f"{self.indent(depth)}\t       )")

    def field(self, depth: int, name: str, value: str) -> None:
        self.write(f"{' ' * 9}{self.indent(depth)}\t\t{name} = {value}")

    def fields(self, depth: int, pairs: list[tuple[str, str]]) -> None:
        for name, value in pairs:
            self.field(depth, name, value)

    def index_entry(
        self,
        offset: int,
        depth: int,
        chunk_id: str,
        chunk_offset: int,
        chunk_size: int,
        frame: int | None = None,
    ) -> None:
        line = f"{self.address(offset)}{self.indent(depth)}\t'{chunk_id}' +{chunk_offset:08X}{chunk_size:7d}"
        if frame is not None:
            line += f"  #{frame}"
        self.write(line)

    def text(self, offset: int, depth: int, fourcc: str, value: str) -> None:
        self.write(f"{self.address(offset)}{self.indent(depth)}'{fourcc}' {value}")

    def truncated(self, offset: int, depth: int, remaining: int, nested: bool = False) -> None:
        """Marker for a byte range skipped because of the item limit."""
        pad = "\t" if nested else ""
        self.write(f"{self.address(offset)}{self.indent(depth)}{pad} .... {remaining}")
