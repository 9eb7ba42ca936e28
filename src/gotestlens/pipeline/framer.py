# src/gotestlens/pipeline/framer.py

"""
Splits an arbitrarily chunked byte stream into complete text lines.
"""

_LF = b"\n"
_CR = b"\r"


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def frame_lines(buffer: bytes, chunk: bytes) -> tuple[list[str], bytes]:
    """
    Appends `chunk` to `buffer` and cuts off every complete line.

    Both `\\n` and `\\r\\n` terminate a line. A `\\r` at the very end of the
    data stays in the returned buffer until the next chunk shows whether a
    `\\n` follows it.

    Returns:
        The complete lines in order (terminators removed) and the new buffer.
    """
    data = buffer + chunk
    *complete, rest = data.split(_LF)
    lines = [_decode(raw[:-1] if raw.endswith(_CR) else raw) for raw in complete]
    return lines, rest


class LineFramer:
    """Holds the partial-line buffer between successive chunks of one stream."""

    def __init__(self) -> None:
        self._buffer = b""

    def feed(self, chunk: bytes | None) -> list[str]:
        if not chunk:
            return []
        lines, self._buffer = frame_lines(self._buffer, chunk)
        return lines

    def flush(self) -> list[str]:
        """Returns the unterminated residual line, if any, and clears the buffer."""
        residual, self._buffer = self._buffer, b""
        if not residual:
            return []
        return [_decode(residual)]

# 🔼⚙️
