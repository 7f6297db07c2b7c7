"""Tests for part header parsing and packet assembly."""

import pytest

from framefetch.exceptions import ProtocolError
from framefetch.models.packet import Packet, Timecode
from framefetch.protocol.buffer import ScratchBuffer
from framefetch.protocol.headers import parse_header_block
from framefetch.protocol.packets import build_packet


def test_header_block_lines_split_on_colon_space():
    block = ScratchBuffer.from_bytes(b"JCodec-PTS: 100\r\nJCodec-Key: true")
    assert parse_header_block(block) == {"JCodec-PTS": "100", "JCodec-Key": "true"}


def test_header_block_trailing_terminator_adds_no_line():
    block = ScratchBuffer.from_bytes(b"A: 1\r\nB: 2\r\n")
    assert parse_header_block(block) == {"A": "1", "B": "2"}


def test_header_keys_are_case_sensitive_and_last_wins():
    block = ScratchBuffer.from_bytes(b"Key: 1\r\nkey: 2\r\nKey: 3")
    assert parse_header_block(block) == {"Key": "3", "key": "2"}


@pytest.mark.parametrize("line", [b"NoSeparator", b"A: b: c", b"A:1"])
def test_malformed_header_line_raises(line):
    with pytest.raises(ProtocolError):
        parse_header_block(ScratchBuffer.from_bytes(line))


def test_packet_defaults_when_headers_absent():
    packet = build_packet({}, ScratchBuffer.from_bytes(b"hello"))
    assert packet == Packet(
        data=b"hello",
        pts=0,
        timescale=0,
        duration=0,
        frame_no=0,
        key=False,
        timecode=None,
    )


def test_packet_fields_from_headers():
    headers = {
        "JCodec-PTS": "3003",
        "JCodec-Duration": "1001",
        "JCodec-FrameNo": "3",
        "JCodec-Key": "TRUE",
        "JCodec-TapeTimecode": "00:00:01;03",
    }
    packet = build_packet(headers, b"\x00\x01")
    assert packet.pts == 3003
    assert packet.duration == 1001
    assert packet.frame_no == 3
    assert packet.key is True
    assert packet.timecode == Timecode(0, 0, 1, 3, True)
    assert packet.timescale == 0
    assert packet.data == b"\x00\x01"


@pytest.mark.parametrize(
    "key, value",
    [
        ("JCodec-PTS", "12a"),
        ("JCodec-Duration", ""),
        ("JCodec-FrameNo", "1.5"),
        ("JCodec-Key", "yes"),
    ],
)
def test_malformed_numeric_or_boolean_field_raises(key, value):
    with pytest.raises(ProtocolError):
        build_packet({key: value}, b"")


def test_malformed_timecode_does_not_fail_packet():
    packet = build_packet({"JCodec-TapeTimecode": "garbage"}, b"x")
    assert packet.timecode is None


def test_payload_is_copied_out_of_the_buffer():
    storage = bytearray(b"abc")
    buf = ScratchBuffer.wrap(storage)
    buf.sink().write(b"abc")
    packet = build_packet({}, buf.flip())
    storage[:] = b"zzz"
    assert packet.data == b"abc"
