"""Tests for framefetch.protocol.multipart module."""

import pytest

from framefetch.exceptions import ProtocolError
from framefetch.protocol.buffer import ScratchBuffer
from framefetch.protocol.multipart import (
    boundary_token,
    is_multipart,
    parse_multipart,
    parse_part,
    split_parts,
)

CONTENT_TYPE = "multipart/mixed; boundary=XYZ"
BODY = (
    b"\r\n--XYZ\r\nJCodec-PTS: 100\r\nJCodec-Key: true\r\n\r\nAAAA"
    b"\r\n--XYZ\r\nJCodec-PTS: 200\r\n\r\nBBBB\r\n--XYZ"
)


@pytest.mark.parametrize(
    "content_type, expected",
    [
        ("multipart/mixed; boundary=XYZ", True),
        ("multipart/mixed", True),
        ("application/octet-stream", False),
        ("multipart/x-mixed-replace; boundary=XYZ", False),
        ("", False),
        (None, False),
    ],
)
def test_is_multipart(content_type, expected):
    assert is_multipart(content_type) is expected


def test_boundary_token_from_content_type():
    assert boundary_token(CONTENT_TYPE) == b"\r\n--XYZ"
    assert boundary_token('multipart/mixed; boundary="frames"') == b"\r\n--frames"


@pytest.mark.parametrize(
    "content_type",
    ["multipart/mixed", "multipart/mixed; boundary", "multipart/mixed; boundary="],
)
def test_boundary_token_requires_boundary(content_type):
    with pytest.raises(ProtocolError):
        boundary_token(content_type)


def test_two_part_body():
    packets = parse_multipart(ScratchBuffer.from_bytes(BODY), CONTENT_TYPE)
    assert [(p.pts, p.key, p.data) for p in packets] == [
        (100, True, b"AAAA"),
        (200, False, b"BBBB"),
    ]


def test_body_with_closing_delimiter():
    body = (
        b"--XYZ\r\nJCodec-FrameNo: 1\r\n\r\nAA\r\n"
        b"--XYZ\r\nJCodec-FrameNo: 2\r\n\r\nBB\r\n"
        b"--XYZ--\r\n"
    )
    packets = parse_multipart(ScratchBuffer.from_bytes(body), CONTENT_TYPE)
    assert [(p.frame_no, p.data) for p in packets] == [(1, b"AA"), (2, b"BB")]


def test_missing_boundary_after_opening_marker_yields_no_parts():
    body = b"--XYZ\r\nJCodec-PTS: 1\r\n\r\nAAAA"
    assert parse_multipart(ScratchBuffer.from_bytes(body), CONTENT_TYPE) == []


def test_empty_body_yields_no_parts():
    assert parse_multipart(ScratchBuffer.from_bytes(b""), CONTENT_TYPE) == []


def test_split_parts_yields_views_lazily():
    buf = ScratchBuffer.from_bytes(BODY)
    parts = split_parts(buf, b"\r\n--XYZ")
    first = next(parts)
    assert first.to_bytes() == b"JCodec-PTS: 100\r\nJCodec-Key: true\r\n\r\nAAAA"
    assert buf.remaining() > 0
    assert next(parts).to_bytes() == b"JCodec-PTS: 200\r\n\r\nBBBB"
    assert list(parts) == []


def test_payload_may_contain_line_breaks():
    body = b"--XYZ\r\nJCodec-PTS: 5\r\n\r\n\r\n\x00\r\n\r\nX\r\n--XYZ--"
    (packet,) = parse_multipart(ScratchBuffer.from_bytes(body), CONTENT_TYPE)
    assert packet.pts == 5
    assert packet.data == b"\r\n\x00\r\n\r\nX"


def test_part_without_headers():
    packet = parse_part(ScratchBuffer.from_bytes(b"\r\npayload"))
    assert packet.data == b"payload"
    assert packet.pts == 0


def test_part_without_separator_raises():
    with pytest.raises(ProtocolError):
        parse_part(ScratchBuffer.from_bytes(b"JCodec-PTS: 1\r\npayload"))


def test_malformed_part_fails_whole_body():
    body = b"--XYZ\r\nJCodec-PTS: abc\r\n\r\nAA\r\n--XYZ--"
    with pytest.raises(ProtocolError):
        parse_multipart(ScratchBuffer.from_bytes(body), CONTENT_TYPE)


def test_parsing_same_bytes_twice_is_identical():
    first = parse_multipart(ScratchBuffer.from_bytes(BODY), CONTENT_TYPE)
    second = parse_multipart(ScratchBuffer.from_bytes(BODY), CONTENT_TYPE)
    assert first == second
