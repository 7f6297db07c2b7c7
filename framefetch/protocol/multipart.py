"""
Splits `multipart/mixed` response bodies into packets.

Each part of the body looks like::

    --BOUNDARY\r\n
    JCodec-PTS: 100\r\n
    JCodec-Key: true\r\n
    \r\n
    <payload bytes>\r\n
    --BOUNDARY ...

Splitting stops at the first search that fails to find the next boundary, so
a body without a closing marker simply ends the sequence.
"""

import logging
from typing import Iterator

from framefetch.exceptions import ProtocolError
from framefetch.models.packet import Packet

from .buffer import ScratchBuffer
from .headers import CRLF, parse_header_block
from .packets import build_packet

log = logging.getLogger(__name__)

MULTIPART_MIXED = "multipart/mixed"
HEADER_END = b"\r\n\r\n"


def is_multipart(content_type: str | None) -> bool:
    """Returns True if the response should be handled as a multipart body."""
    return bool(content_type) and content_type.startswith(MULTIPART_MIXED)


def boundary_token(content_type: str) -> bytes:
    """
    Derives the delimiter searched for between parts: CRLF, two dashes, and
    the boundary parameter of `content_type`.

    The boundary is the value after `=` in the second `;`-separated segment,
    e.g. ``multipart/mixed; boundary=XYZ`` gives ``b"\\r\\n--XYZ"``.
    """
    segments = content_type.split(";")
    if len(segments) < 2:
        raise ProtocolError(
            f"No boundary parameter in Content-Type: {content_type!r}"
        )
    param = segments[1].split("=")
    boundary = param[1].strip().strip('"') if len(param) >= 2 else ""
    if not boundary:
        raise ProtocolError(
            f"Malformed boundary parameter in Content-Type: {content_type!r}"
        )
    return CRLF + b"--" + boundary.encode("latin-1")


def _skip_marker_line(buffer: ScratchBuffer) -> bool:
    # Blank lines ahead of the marker line are consumed with it.
    while True:
        eol = buffer.search(CRLF)
        if eol == -1:
            return False
        buffer.skip(eol + len(CRLF))
        if eol > 0:
            return True


def split_parts(buffer: ScratchBuffer, token: bytes) -> Iterator[ScratchBuffer]:
    """
    Lazily yields each part of a flipped buffer as a view (headers and payload).

    The buffer's cursor is advanced past every part that is yielded.
    """
    while _skip_marker_line(buffer):
        to = buffer.search(token)
        if to == -1:
            break
        part = buffer.read(to)
        buffer.skip(len(CRLF))
        yield part


def parse_part(part: ScratchBuffer) -> Packet:
    """
    Parses one part: the header block up to the first blank line, then the
    payload.

    Raises:
        ProtocolError: If the part has no header/payload separator.
    """
    if part.search(CRLF) == 0:
        # No header lines at all, the blank line comes first.
        part.skip(len(CRLF))
        return build_packet({}, part)

    end = part.search(HEADER_END)
    if end == -1:
        raise ProtocolError("Multipart part has no header/payload separator.")
    headers = parse_header_block(part.read(end))
    part.skip(len(HEADER_END))
    return build_packet(headers, part)


def parse_multipart(buffer: ScratchBuffer, content_type: str) -> list[Packet]:
    """Splits a flipped buffer into parts and parses every one into a packet."""
    token = boundary_token(content_type)
    packets = [parse_part(part) for part in split_parts(buffer, token)]
    log.debug(f"Parsed {len(packets)} part(s) from multipart body.")
    return packets
