"""
Parsing of the textual header block that precedes each multipart payload.
"""

from framefetch.exceptions import ProtocolError

from .buffer import ScratchBuffer

CRLF = b"\r\n"
HEADER_SEPARATOR = ": "

# Packet metadata keys, sent either as HTTP headers or as part header lines.
PTS = "JCodec-PTS"
DURATION = "JCodec-Duration"
FRAME_NO = "JCodec-FrameNo"
KEY_FRAME = "JCodec-Key"
TAPE_TIMECODE = "JCodec-TapeTimecode"


def iter_lines(buffer: ScratchBuffer):
    """
    Yields the CRLF-delimited lines of `buffer` as text, consuming it.

    A trailing remainder without a line terminator is yielded as one more line.
    """
    nxt = buffer.search(CRLF)
    while nxt != -1:
        yield buffer.read(nxt).to_bytes().decode("utf-8")
        buffer.skip(len(CRLF))
        nxt = buffer.search(CRLF)

    if buffer.remaining() > 0:
        tail = buffer.read(buffer.remaining())
        yield tail.to_bytes().decode("utf-8")


def parse_header_block(buffer: ScratchBuffer) -> dict[str, str]:
    """
    Parses `Key: value` lines into a mapping. Keys are case-sensitive and a
    repeated key keeps its last value.

    Raises:
        ProtocolError: If a line is not exactly one key and one value.
    """
    headers: dict[str, str] = {}
    try:
        for line in iter_lines(buffer):
            fields = line.split(HEADER_SEPARATOR)
            if len(fields) != 2:
                raise ProtocolError(f"Malformed part header line: {line!r}")
            headers[fields[0]] = fields[1]
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Part header block is not valid UTF-8: {e}") from e
    return headers
